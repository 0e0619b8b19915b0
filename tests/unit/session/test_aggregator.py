"""Tests for the session aggregator."""

import json
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from flightlog.config import RestartPolicy
from flightlog.exceptions.client_errors import ConflictError
from flightlog.logging.context import get_session_id
from flightlog.session.aggregator import SessionAggregator
from flightlog.telemetry.models import TelemetrySample


def _make_aggregator(clock, **kwargs):
    writer = MagicMock()
    events = kwargs.pop("events", None)
    aggregator = SessionAggregator(writer, events, clock=clock, **kwargs)
    return aggregator, writer


def _make_sample(session_id, clock, **readings):
    return TelemetrySample(session_id=session_id, timestamp=clock(), **readings)


class TestSessionLifecycle:
    def test_starts_inactive(self, clock):
        aggregator, _ = _make_aggregator(clock)
        assert aggregator.is_active is False
        assert aggregator.active_session_id is None
        assert aggregator.session_start_time is None

    def test_start_session(self, clock):
        aggregator, _ = _make_aggregator(clock)
        session_id = aggregator.start_session()
        assert aggregator.active_session_id == session_id
        assert aggregator.session_start_time == clock.now
        assert aggregator.records == []

    def test_start_binds_logging_session(self, clock):
        aggregator, _ = _make_aggregator(clock)
        session_id = aggregator.start_session()
        assert get_session_id() == str(session_id)

    def test_replace_discards_previous_session(self, clock):
        aggregator, writer = _make_aggregator(clock)
        first = aggregator.start_session()
        aggregator.capture(_make_sample(first, clock, battery=90))
        second = aggregator.start_session()
        assert second != first
        assert aggregator.records == []
        writer.save_session.assert_not_called()

    def test_refuse_policy_raises(self, clock):
        aggregator, _ = _make_aggregator(clock, restart_policy=RestartPolicy.REFUSE)
        first = aggregator.start_session()
        with pytest.raises(ConflictError):
            aggregator.start_session()
        assert aggregator.active_session_id == first

    def test_end_without_session_is_noop(self, clock):
        aggregator, writer = _make_aggregator(clock)
        assert aggregator.end_session() is None
        writer.save_session.assert_not_called()

    def test_end_session_hands_snapshot_to_writer(self, clock):
        events = MagicMock()
        events.events_for_session.return_value = []
        aggregator, writer = _make_aggregator(clock, events=events)
        session_id = aggregator.start_session()
        aggregator.capture(_make_sample(session_id, clock, battery=90))
        clock.advance(10)
        aggregator.capture(_make_sample(session_id, clock, battery=88))

        summary = aggregator.end_session()

        writer.save_session.assert_called_once()
        saved_id, records, saved_summary, saved_events = writer.save_session.call_args.args
        assert saved_id == session_id
        assert [record.battery for record in records] == [90, 88]
        assert saved_summary == summary
        assert summary.duration_seconds == 10.0
        assert saved_events == []
        assert aggregator.is_active is False
        assert get_session_id() == ""

    def test_end_with_zero_samples_still_saves(self, clock):
        aggregator, writer = _make_aggregator(clock)
        session_id = aggregator.start_session()
        assert aggregator.end_session() is None
        writer.save_session.assert_called_once_with(session_id, [], None, [])

    def test_end_includes_session_events(self, clock):
        events = MagicMock()
        aggregator, writer = _make_aggregator(clock, events=events)
        session_id = aggregator.start_session()
        aggregator.end_session()
        events.events_for_session.assert_called_once_with(session_id)
        assert writer.save_session.call_args.args[3] is events.events_for_session.return_value


class TestCapture:
    def test_capture_appends_in_order(self, clock):
        aggregator, _ = _make_aggregator(clock)
        session_id = aggregator.start_session()
        for battery in (90, 89, 88):
            aggregator.capture(_make_sample(session_id, clock, battery=battery))
            clock.advance(1)
        assert [record.battery for record in aggregator.records] == [90, 89, 88]

    def test_capture_without_session_starts_one(self, clock):
        aggregator, _ = _make_aggregator(clock)
        stored = aggregator.capture(_make_sample(uuid4(), clock, battery=90))
        assert aggregator.is_active is True
        assert stored.session_id == aggregator.active_session_id
        assert aggregator.records == [stored]

    def test_foreign_session_replaces_under_default_policy(self, clock):
        aggregator, _ = _make_aggregator(clock)
        first = aggregator.start_session()
        stored = aggregator.capture(_make_sample(uuid4(), clock, battery=90))
        assert aggregator.active_session_id != first
        assert stored.session_id == aggregator.active_session_id

    def test_foreign_session_retagged_under_refuse_policy(self, clock):
        aggregator, _ = _make_aggregator(clock, restart_policy=RestartPolicy.REFUSE)
        active = aggregator.start_session()
        stored = aggregator.capture(_make_sample(uuid4(), clock, battery=90))
        assert stored.session_id == active
        assert aggregator.active_session_id == active

    def test_buffer_is_bounded(self, clock):
        aggregator, _ = _make_aggregator(clock)
        session_id = aggregator.start_session()
        for index in range(1001):
            aggregator.capture(_make_sample(session_id, clock, satellites=index))
        records = aggregator.records
        assert len(records) == 1000
        assert records[0].satellites == 1
        assert records[-1].satellites == 1000

    def test_custom_bound(self, clock):
        aggregator, _ = _make_aggregator(clock, max_records_in_memory=3)
        session_id = aggregator.start_session()
        for index in range(5):
            aggregator.capture(_make_sample(session_id, clock, satellites=index))
        assert [record.satellites for record in aggregator.records] == [2, 3, 4]
        assert aggregator.max_records_in_memory == 3


class TestQueries:
    def test_records_for_session(self, clock):
        aggregator, _ = _make_aggregator(clock)
        session_id = aggregator.start_session()
        aggregator.capture(_make_sample(session_id, clock))
        assert len(aggregator.records_for_session(session_id)) == 1
        assert aggregator.records_for_session(uuid4()) == []

    def test_buffered_session_ids(self, clock):
        aggregator, _ = _make_aggregator(clock)
        session_id = aggregator.start_session()
        aggregator.capture(_make_sample(session_id, clock))
        aggregator.capture(_make_sample(session_id, clock))
        assert aggregator.buffered_session_ids() == [session_id]

    def test_summary_is_idempotent(self, clock):
        aggregator, _ = _make_aggregator(clock)
        session_id = aggregator.start_session()
        aggregator.capture(_make_sample(session_id, clock, latitude=55.0, longitude=-4.0))
        clock.advance(10)
        aggregator.capture(_make_sample(session_id, clock, latitude=55.001, longitude=-4.001))
        assert aggregator.generate_summary() == aggregator.generate_summary()
        assert aggregator.current_session_summary() == aggregator.generate_summary(session_id)

    def test_summary_without_session(self, clock):
        aggregator, _ = _make_aggregator(clock)
        assert aggregator.generate_summary() is None
        assert aggregator.current_session_summary() is None

    def test_export_active_session(self, clock):
        aggregator, _ = _make_aggregator(clock)
        assert aggregator.export_active_session() is None
        session_id = aggregator.start_session()
        aggregator.capture(_make_sample(session_id, clock, battery=77))
        document = json.loads(aggregator.export_active_session())
        assert document[0]["battery"] == 77
        assert document[0]["session_id"] == str(session_id)

    def test_clear_all(self, clock):
        aggregator, writer = _make_aggregator(clock)
        session_id = aggregator.start_session()
        aggregator.capture(_make_sample(session_id, clock, battery=90))
        aggregator.clear_all()
        assert aggregator.records == []
        assert aggregator.is_active is False
        writer.save_session.assert_called_once_with(session_id, [], None, [])
