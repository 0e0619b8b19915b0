"""Rendering of session samples into interchange formats.

Every exporter is a pure function of the samples it is given. Exporters that
filter return None instead of producing an empty or malformed document.
"""

from enum import StrEnum
from uuid import UUID

from flightlog.export.dump import export_dump, load_dump
from flightlog.export.route import export_route
from flightlog.export.tabular import TABULAR_HEADER, export_tabular
from flightlog.telemetry.models import TelemetrySample


class ExportFormat(StrEnum):
    """Supported export formats."""

    CSV = "csv"
    GPX = "gpx"
    JSON = "json"

    @property
    def media_type(self) -> str:
        """Return the MIME type of the rendered document."""
        return _MEDIA_TYPES[self]


_MEDIA_TYPES: dict[ExportFormat, str] = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.GPX: "application/gpx+xml",
    ExportFormat.JSON: "application/json",
}


def render(
    export_format: ExportFormat,
    samples: list[TelemetrySample],
    session_id: UUID,
) -> bytes | None:
    """Render samples in the requested format.

    Returns:
        The document, or None when the format's filter leaves nothing to export.
    """
    if export_format is ExportFormat.CSV:
        return export_tabular(samples)
    if export_format is ExportFormat.GPX:
        return export_route(samples, session_id)
    return export_dump(samples)


def suggested_filename(session_id: UUID, export_format: ExportFormat) -> str:
    """Return the file name offered when sharing an export."""
    return f"flight-{session_id}.{export_format.value}"


__all__ = [
    "TABULAR_HEADER",
    "ExportFormat",
    "export_dump",
    "export_route",
    "export_tabular",
    "load_dump",
    "render",
    "suggested_filename",
]
