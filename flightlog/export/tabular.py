"""Comma-separated export of a session's samples."""

import csv
import io
import logging

from flightlog.export.common import format_timestamp
from flightlog.telemetry.models import TelemetrySample, sort_by_timestamp

logger = logging.getLogger(__name__)

TABULAR_HEADER: tuple[str, ...] = (
    "Timestamp",
    "Battery (%)",
    "Satellites",
    "Altitude (m)",
    "Speed (m/s)",
    "Latitude",
    "Longitude",
    "Heading (°)",
    "GPS Signal",
    "RC Signal (%)",
    "Home Lat",
    "Home Lon",
)


def _integer(value: int | None) -> str:
    return "" if value is None else str(value)


def _decimal(value: float | None, places: int) -> str:
    return "" if value is None else f"{value:.{places}f}"


def _row(sample: TelemetrySample) -> list[str]:
    return [
        format_timestamp(sample.timestamp),
        _integer(sample.battery),
        _integer(sample.satellites),
        _decimal(sample.altitude, 2),
        _decimal(sample.speed, 2),
        _decimal(sample.latitude, 8),
        _decimal(sample.longitude, 8),
        _decimal(sample.heading, 2),
        _integer(sample.gps_signal_level),
        _integer(sample.link_signal_level),
        _decimal(sample.home_latitude, 8),
        _decimal(sample.home_longitude, 8),
    ]


def export_tabular(samples: list[TelemetrySample]) -> bytes | None:
    """Render samples as UTF-8 CSV, one row per sample in time order.

    Samples with no latitude, longitude or battery reading are dropped.

    Args:
        samples: Samples in any order; not modified.

    Returns:
        The CSV document, or None when no sample qualifies.
    """
    if not samples:
        logger.warning("Cannot export CSV - no records provided")
        return None

    valid = [sample for sample in samples if sample.has_identifying_value]
    if not valid:
        logger.warning("Cannot export CSV - no valid records found")
        return None

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TABULAR_HEADER)
    writer.writerows(_row(sample) for sample in sort_by_timestamp(valid))
    return buffer.getvalue().encode("utf-8")
