"""
Alert Detector

Scans weather samples for hazard thresholds.
Thresholds come from app.shared.constants.HAZARD_THRESHOLDS and can be
replaced per detector without touching the detection logic.
"""

from typing import Mapping, Optional, Sequence

from app.shared.constants import AlertType, HazardThreshold, HAZARD_THRESHOLDS
from app.shared.formatters import (
    format_distance_km,
    format_precipitation,
    format_temperature,
    format_wind_speed,
)
from .models import Alert, AlertReport, WeatherSample


_TITLES = {
    AlertType.EXTREME_HEAT: "Extreme heat",
    AlertType.FREEZING: "Freezing conditions",
    AlertType.HIGH_WIND: "High wind",
    AlertType.HEAVY_RAIN: "Heavy rain",
}

_VALUE_FORMATTERS = {
    "temperature": format_temperature,
    "wind_speed": format_wind_speed,
    "precipitation": format_precipitation,
}


class AlertDetector:
    """
    Pure hazard classifier.

    Usage:
        detector = AlertDetector()
        flags = detector.check(sample)      # {AlertType: bool}
        report = detector.detect(weather)   # AlertReport
    """

    def __init__(
        self,
        thresholds: Optional[Mapping[AlertType, HazardThreshold]] = None
    ):
        self.thresholds = dict(thresholds or HAZARD_THRESHOLDS)

    def check(self, sample: WeatherSample) -> dict[AlertType, bool]:
        """Evaluate every rule against one sample."""
        flags = {}
        for alert_type, rule in self.thresholds.items():
            value = getattr(sample, rule.field)
            flags[alert_type] = value is not None and rule.is_triggered(value)
        return flags

    def detect(
        self,
        weather: Sequence[Optional[WeatherSample]],
        distances_km: Optional[Sequence[float]] = None
    ) -> AlertReport:
        """
        Build alerts for a whole route.

        Args:
            weather: One sample (or None) per forecast point
            distances_km: Optional point distances, used in messages

        Returns:
            AlertReport with alerts in point order and grouped by type
        """
        report = AlertReport(by_type={t: [] for t in self.thresholds})

        for index, sample in enumerate(weather):
            if sample is None:
                continue

            for alert_type, triggered in self.check(sample).items():
                if not triggered:
                    continue

                rule = self.thresholds[alert_type]
                value = getattr(sample, rule.field)
                distance = distances_km[index] if distances_km is not None else None
                alert = Alert(
                    type=alert_type,
                    point_index=index,
                    severity=rule.severity,
                    value=value,
                    message=self._message(alert_type, rule, value, distance),
                )
                report.alerts.append(alert)
                report.by_type[alert_type].append(alert)

        return report

    @staticmethod
    def _message(
        alert_type: AlertType,
        rule: HazardThreshold,
        value: float,
        distance_km: Optional[float]
    ) -> str:
        formatter = _VALUE_FORMATTERS.get(rule.field, str)
        text = f"{_TITLES.get(alert_type, alert_type.value)}: {formatter(value)}"
        if distance_km is not None:
            text += f" at {format_distance_km(distance_km)}"
        return text
