"""GPX 1.1 route export of a session's positioned samples."""

import logging
import xml.etree.ElementTree as ElementTree
from uuid import UUID

from flightlog.export.common import format_timestamp
from flightlog.telemetry.models import TelemetrySample, sort_by_timestamp

logger = logging.getLogger(__name__)

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
GPX_CREATOR = "FlightLog"
_SHORT_SESSION_ID_LENGTH = 8


def _child(parent: ElementTree.Element, tag: str, text: object) -> ElementTree.Element:
    element = ElementTree.SubElement(parent, tag)
    element.text = str(text)
    return element


def _track_point(parent: ElementTree.Element, sample: TelemetrySample) -> None:
    point = ElementTree.SubElement(
        parent,
        "trkpt",
        {"lat": str(sample.latitude), "lon": str(sample.longitude)},
    )
    if sample.altitude is not None:
        _child(point, "ele", sample.altitude)
    _child(point, "time", format_timestamp(sample.timestamp))

    readings = {
        "battery": sample.battery,
        "speed": sample.speed,
        "heading": sample.heading,
        "satellites": sample.satellites,
    }
    known = {name: value for name, value in readings.items() if value is not None}
    if not known:
        return

    extensions = ElementTree.SubElement(point, "extensions")
    for name, value in known.items():
        _child(extensions, name, value)


def export_route(samples: list[TelemetrySample], session_id: UUID) -> bytes | None:
    """Render positioned samples as a GPX track with a home waypoint.

    Args:
        samples: Samples in any order; not modified.
        session_id: Session the samples belong to, used for the track name.

    Returns:
        The GPX document, or None when no sample has both coordinates.
    """
    if not samples:
        logger.warning("Cannot export GPX - no records provided")
        return None

    positioned = sort_by_timestamp([sample for sample in samples if sample.has_coordinates])
    if not positioned:
        logger.warning("Cannot export GPX - no records with valid coordinates")
        return None

    root = ElementTree.Element(
        "gpx",
        {"version": "1.1", "creator": GPX_CREATOR, "xmlns": GPX_NAMESPACE},
    )

    metadata = ElementTree.SubElement(root, "metadata")
    _child(metadata, "name", f"Flight Session {str(session_id)[:_SHORT_SESSION_ID_LENGTH]}")
    _child(metadata, "time", format_timestamp(positioned[0].timestamp))

    # GPX 1.1 requires waypoints before tracks.
    first = positioned[0]
    if first.has_home:
        waypoint = ElementTree.SubElement(
            root,
            "wpt",
            {"lat": str(first.home_latitude), "lon": str(first.home_longitude)},
        )
        _child(waypoint, "name", "Home Point")
        _child(waypoint, "sym", "Flag, Red")

    track = ElementTree.SubElement(root, "trk")
    _child(track, "name", "Flight Track")
    segment = ElementTree.SubElement(track, "trkseg")
    for sample in positioned:
        _track_point(segment, sample)

    ElementTree.indent(root)
    return ElementTree.tostring(root, encoding="utf-8", xml_declaration=True)
