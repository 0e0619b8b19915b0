"""Display strings for live telemetry and flight summaries.

Unknown values always render as the placeholder, so a disconnected drone
shows dashes rather than zeros.
"""

from flightlog.config import AltitudeUnit, SpeedUnit
from flightlog.constants import PLACEHOLDER
from flightlog.session.models import FlightSummary

_FEET_PER_METER = 3.28084
_KILOMETERS_PER_HOUR_PER_METER_PER_SECOND = 3.6
_SECONDS_PER_HOUR = 3600
_SECONDS_PER_MINUTE = 60


def format_altitude(altitude: float | None, unit: AltitudeUnit = AltitudeUnit.METERS) -> str:
    """Render an altitude in the chosen unit; negative readings are unknown."""
    if altitude is None or altitude < 0:
        return PLACEHOLDER
    if unit is AltitudeUnit.FEET:
        return f"{altitude * _FEET_PER_METER:.1f} ft"
    return f"{altitude:.1f} m"


def format_speed(speed: float | None, unit: SpeedUnit = SpeedUnit.KILOMETERS_PER_HOUR) -> str:
    """Render a ground speed in the chosen unit."""
    if speed is None or speed < 0:
        return PLACEHOLDER
    if unit is SpeedUnit.KILOMETERS_PER_HOUR:
        return f"{speed * _KILOMETERS_PER_HOUR_PER_METER_PER_SECOND:.1f} km/h"
    return f"{speed:.1f} m/s"


def format_heading(heading: float | None) -> str:
    """Render a heading in degrees."""
    if heading is None or not 0 <= heading <= 360:
        return PLACEHOLDER
    return f"{heading:.1f}°"


def format_gps_signal(level: int | None) -> str:
    """Render a GPS signal level with a quality word."""
    if level is None or level < 0:
        return f"{PLACEHOLDER} (No GPS)"
    if level <= 1:
        quality = "Poor"
    elif level <= 3:
        quality = "Fair"
    elif level <= 5:
        quality = "Good"
    else:
        quality = "Excellent"
    return f"Level {level} ({quality})"


def format_link_signal(level: int | None) -> str:
    """Render a remote-controller link level with a quality word."""
    if level is None or not 0 <= level <= 100:
        return PLACEHOLDER
    if level <= 30:
        quality = "Poor"
    elif level <= 60:
        quality = "Fair"
    elif level <= 80:
        quality = "Good"
    else:
        quality = "Excellent"
    return f"{level}% ({quality})"


def format_battery(percent: int | None) -> str:
    """Render a battery percentage with a charge status."""
    if percent is None or not 0 <= percent <= 100:
        return PLACEHOLDER
    if percent <= 20:
        status = "Low"
    elif percent <= 50:
        status = "Medium"
    else:
        status = "Good"
    return f"{percent}% {status}"


def format_coordinates(latitude: float | None, longitude: float | None) -> tuple[str, str]:
    """Render a coordinate pair to six decimals."""
    return (
        PLACEHOLDER if latitude is None else f"{latitude:.6f}",
        PLACEHOLDER if longitude is None else f"{longitude:.6f}",
    )


def format_duration(seconds: float) -> str:
    """Render a duration as ``m:ss`` or ``h:mm:ss``."""
    total = int(seconds)
    hours = total // _SECONDS_PER_HOUR
    minutes = (total % _SECONDS_PER_HOUR) // _SECONDS_PER_MINUTE
    remainder = total % _SECONDS_PER_MINUTE
    if hours > 0:
        return f"{hours}:{minutes:02d}:{remainder:02d}"
    return f"{minutes}:{remainder:02d}"


def _one_decimal(value: float | None, suffix: str) -> str:
    return PLACEHOLDER if value is None else f"{value:.1f} {suffix}"


def format_summary(
    summary: FlightSummary,
    *,
    speed_unit: SpeedUnit = SpeedUnit.METERS_PER_SECOND,
    altitude_unit: AltitudeUnit = AltitudeUnit.METERS,
) -> dict[str, str]:
    """Render every summary metric for display.

    Args:
        summary: Summary to render.
        speed_unit: Unit for the maximum and average speeds.
        altitude_unit: Unit for the maximum altitude.

    Returns:
        Mapping of metric name to display string.
    """
    if summary.battery_start is not None and summary.battery_end is not None:
        battery_range = f"{summary.battery_start}% → {summary.battery_end}%"
    elif summary.battery_start is not None:
        battery_range = f"{summary.battery_start}% → {PLACEHOLDER}"
    else:
        battery_range = PLACEHOLDER

    return {
        "duration": format_duration(summary.duration_seconds),
        "max_altitude": format_altitude(summary.max_altitude, altitude_unit),
        "max_speed": format_speed(summary.max_speed, speed_unit),
        "average_speed": format_speed(summary.average_speed, speed_unit),
        "total_distance": _one_decimal(summary.total_distance, "m"),
        "battery_range": battery_range,
    }
