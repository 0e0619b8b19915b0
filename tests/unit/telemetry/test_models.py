"""Tests for telemetry domain models."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from flightlog.telemetry.models import SAMPLE_LIST_ADAPTER, TelemetrySample, sort_by_timestamp

START = datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC)


def _make_sample(seconds=0, **readings):
    return TelemetrySample(
        session_id=readings.pop("session_id", uuid4()),
        timestamp=START + timedelta(seconds=seconds),
        **readings,
    )


class TestTelemetrySample:
    """Tests for TelemetrySample model."""

    def test_all_readings_optional(self) -> None:
        sample = _make_sample()
        assert sample.battery is None
        assert sample.latitude is None
        assert sample.heading is None

    def test_generates_unique_ids(self) -> None:
        assert _make_sample().id != _make_sample().id

    def test_is_frozen(self) -> None:
        sample = _make_sample(battery=80)
        with pytest.raises(ValidationError):
            sample.battery = 70

    def test_rejects_naive_timestamp(self) -> None:
        with pytest.raises(ValidationError):
            TelemetrySample(session_id=uuid4(), timestamp=datetime(2026, 1, 8, 12, 0, 0))

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("battery", 101),
            ("battery", -1),
            ("latitude", 91.0),
            ("longitude", -181.0),
            ("heading", 360.5),
            ("gps_signal_level", 6),
            ("link_signal_level", 101),
            ("speed", -0.1),
        ],
    )
    def test_rejects_out_of_range(self, field, value) -> None:
        with pytest.raises(ValidationError):
            _make_sample(**{field: value})

    def test_has_coordinates(self) -> None:
        assert _make_sample(latitude=55.0, longitude=-4.0).has_coordinates is True
        assert _make_sample(latitude=55.0).has_coordinates is False

    def test_has_home(self) -> None:
        assert _make_sample(home_latitude=55.0, home_longitude=-4.0).has_home is True
        assert _make_sample(home_latitude=55.0).has_home is False

    def test_has_identifying_value(self) -> None:
        assert _make_sample(battery=50).has_identifying_value is True
        assert _make_sample(latitude=55.0).has_identifying_value is True
        assert _make_sample(altitude=10.0, speed=3.0).has_identifying_value is False

    def test_retagged_keeps_readings(self) -> None:
        sample = _make_sample(battery=80, altitude=12.5)
        other_session = uuid4()
        retagged = sample.retagged(other_session)
        assert retagged.session_id == other_session
        assert retagged.id == sample.id
        assert retagged.battery == 80
        assert retagged.altitude == 12.5


class TestSortByTimestamp:
    def test_orders_chronologically(self) -> None:
        late = _make_sample(10)
        early = _make_sample(0)
        middle = _make_sample(5)
        assert sort_by_timestamp([late, early, middle]) == [early, middle, late]

    def test_stable_for_equal_timestamps(self) -> None:
        first = _make_sample(0, battery=1)
        second = _make_sample(0, battery=2)
        assert sort_by_timestamp([first, second]) == [first, second]


class TestSampleListAdapter:
    def test_json_preserves_unknown_readings(self) -> None:
        samples = [_make_sample(battery=90, latitude=55.0, longitude=-4.0), _make_sample(1)]
        decoded = SAMPLE_LIST_ADAPTER.validate_json(SAMPLE_LIST_ADAPTER.dump_json(samples))
        assert decoded == samples
        assert decoded[1].battery is None
