"""
Formatting utilities for alert messages.
"""


def format_distance_km(km: float) -> str:
    """
    Format distance.

    Args:
        km: Distance in kilometers

    Returns:
        Formatted string (e.g., '12.5 km' or '850 m')
    """
    if km < 1:
        return f"{int(km * 1000)} m"
    return f"{km:.1f} km"


def format_temperature(celsius: float | None) -> str:
    """Format temperature as '23°C'."""
    if celsius is None:
        return "n/a"
    return f"{round(celsius)}°C"


def format_wind_speed(kmh: float | None) -> str:
    """Format wind speed as '31 km/h'."""
    if kmh is None:
        return "n/a"
    return f"{round(kmh)} km/h"


def format_precipitation(mm: float | None) -> str:
    """Format precipitation as '5.5 mm'."""
    if mm is None:
        return "n/a"
    return f"{mm:.1f} mm"
