"""
Tests for route weather summary and the sample fallback policy.
"""

from dataclasses import replace

import pytest

from app.features.weather import WeatherSample, summarize


BASE = WeatherSample(
    temperature=10.0,
    feels_like=9.0,
    humidity=60.0,
    pressure=1010.0,
    wind_speed=10.0,
    wind_direction=90.0,
)


class TestSummarize:
    """Tests for summarize()."""

    def test_all_missing(self):
        summary = summarize([None, None])

        assert summary.resolved_points == 0
        assert summary.missing_points == 2
        assert summary.avg_temperature is None

    def test_ignores_missing_points(self):
        weather = [
            replace(BASE, temperature=10.0),
            None,
            replace(BASE, temperature=20.0),
        ]
        summary = summarize(weather)

        assert summary.resolved_points == 2
        assert summary.missing_points == 1
        assert summary.avg_temperature == pytest.approx(15.0)
        assert summary.min_temperature == 10.0
        assert summary.max_temperature == 20.0

    def test_maxima(self):
        weather = [
            replace(BASE, wind_speed=12.0, wind_gust=20.0, uv_index=3.0),
            replace(BASE, wind_speed=25.0, wind_gust=None, uv_index=7.0),
        ]
        summary = summarize(weather)

        assert summary.max_wind_speed == 25.0
        assert summary.max_wind_gust == 20.0
        assert summary.max_uv_index == 7.0

    def test_total_precipitation_uses_fallback(self):
        """Unknown precipitation counts as 0 mm."""
        weather = [
            replace(BASE, precipitation=1.5),
            replace(BASE, precipitation=None),
            replace(BASE, precipitation=2.0),
        ]
        assert summarize(weather).total_precipitation == pytest.approx(3.5)

    def test_to_dict_rounds(self):
        summary = summarize([replace(BASE, temperature=10.04), replace(BASE, temperature=10.0)])
        assert summary.to_dict()["avg_temperature"] == 10.0


class TestFallbackPolicy:
    """Tests for WeatherSample.value."""

    def test_present_value(self):
        assert replace(BASE, precipitation=2.5).value("precipitation") == 2.5

    def test_shared_default(self):
        assert BASE.value("precipitation") == 0.0
        assert BASE.value("weather_description") == "Unknown"

    def test_explicit_default_wins(self):
        assert BASE.value("uv_index", default=1.0) == 1.0

    def test_zero_is_not_missing(self):
        assert replace(BASE, precipitation=0.0).value("precipitation", default=9.0) == 0.0
