"""Full JSON dump of a sample list, in the persisted sample-list format."""

from flightlog.telemetry.models import SAMPLE_LIST_ADAPTER, TelemetrySample

_JSON_INDENT = 2


def export_dump(samples: list[TelemetrySample]) -> bytes:
    """Serialize every sample, unfiltered and in the given order."""
    return SAMPLE_LIST_ADAPTER.dump_json(list(samples), indent=_JSON_INDENT)


def load_dump(data: bytes | str) -> list[TelemetrySample]:
    """Parse a dump produced by ``export_dump``.

    Raises:
        pydantic.ValidationError: If the document is not a valid sample list.
    """
    return SAMPLE_LIST_ADAPTER.validate_json(data)
