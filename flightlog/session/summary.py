"""Flight summary computation.

The summary is a pure function of a sample set: the same samples always give
the same summary, whatever order they arrive in.
"""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from flightlog.geo import haversine_distance
from flightlog.session.models import FlightSummary
from flightlog.telemetry.models import TelemetrySample, sort_by_timestamp


def summarize(
    session_id: UUID,
    samples: Iterable[TelemetrySample],
    *,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
) -> FlightSummary | None:
    """Compute the flight summary for a set of samples.

    Args:
        session_id: Session the samples belong to.
        samples: Samples in any order.
        start_time: Explicit session start. Defaults to the earliest sample.
        end_time: Explicit session end. When absent, the duration runs to the
            latest sample.

    Returns:
        The summary, or None when there are no samples and no start time.
    """
    ordered = sort_by_timestamp(list(samples))

    if start_time is None:
        if not ordered:
            return None
        start_time = ordered[0].timestamp

    altitudes = [sample.altitude for sample in ordered if sample.altitude is not None]
    speeds = [sample.speed for sample in ordered if sample.speed is not None]

    return FlightSummary(
        session_id=session_id,
        start_time=start_time,
        end_time=end_time,
        max_altitude=max(altitudes) if altitudes else None,
        max_speed=max(speeds) if speeds else None,
        average_speed=sum(speeds) / len(speeds) if speeds else None,
        duration_seconds=_duration_seconds(ordered, start_time, end_time),
        total_distance=total_distance(ordered),
        battery_start=ordered[0].battery if ordered else None,
        battery_end=ordered[-1].battery if ordered else None,
    )


def total_distance(ordered_samples: list[TelemetrySample]) -> float | None:
    """Return the geodesic path length through the coordinate-bearing samples.

    Samples without coordinates are skipped; the path continues from the last
    known position to the next one.

    Args:
        ordered_samples: Samples sorted by timestamp.

    Returns:
        Path length in meters, or None with fewer than two positioned samples.
    """
    previous: tuple[float, float] | None = None
    distance = 0.0
    positioned_count = 0

    for sample in ordered_samples:
        if sample.latitude is None or sample.longitude is None:
            continue
        if previous is not None:
            distance += haversine_distance(
                previous[0], previous[1], sample.latitude, sample.longitude
            )
        previous = (sample.latitude, sample.longitude)
        positioned_count += 1

    if positioned_count < 2:
        return None
    return distance


def _duration_seconds(
    ordered_samples: list[TelemetrySample],
    start_time: datetime,
    end_time: datetime | None,
) -> float:
    if end_time is not None:
        return (end_time - start_time).total_seconds()
    if ordered_samples:
        return (ordered_samples[-1].timestamp - start_time).total_seconds()
    return 0.0
