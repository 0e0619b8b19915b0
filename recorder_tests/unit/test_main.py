"""Tests for the recorder application wiring."""

import asyncio
from unittest.mock import patch

import pytest

from flightlog.config import Settings
from flightlog.events.models import EventCategory
from flightlog.exceptions.server_errors import ConfigurationError
from flightlog.logging import LogFormat
from recorder.main import SIMULATED_MODEL_NAME, RecorderApplication, main


def _make_settings(tmp_path, **overrides):
    return Settings(sessions_directory=tmp_path / "sessions", **overrides)


class TestRecorderApplicationInit:
    def test_builds_single_component_graph(self, tmp_path):
        application = RecorderApplication(_make_settings(tmp_path))
        assert application.store.root == tmp_path / "sessions"
        assert application.recorder.feed is application.feed
        assert application.aggregator.max_records_in_memory == 1000
        application.writer.close()

    def test_passes_settings_through(self, tmp_path):
        settings = _make_settings(tmp_path, max_records_in_memory=10, event_markers_enabled=False)
        application = RecorderApplication(settings)
        assert application.aggregator.max_records_in_memory == 10
        assert application.annotator.enabled is False
        application.writer.close()

    def test_rejects_file_as_sessions_directory(self, tmp_path):
        path = tmp_path / "sessions"
        path.write_text("not a directory")
        with pytest.raises(ConfigurationError):
            RecorderApplication(Settings(sessions_directory=path))

    def test_deleting_session_clears_live_events(self, tmp_path):
        application = RecorderApplication(_make_settings(tmp_path))
        session_id = application.aggregator.start_session()
        application.recorder.mark_event(EventCategory.ISSUE)
        application.aggregator.end_session()
        application.writer.flush()

        assert application.store.delete_session(session_id) is True
        assert application.annotator.events_for_session(session_id) == []
        application.writer.close()


class TestRecorderApplicationRun:
    def test_records_and_persists_a_session(self, tmp_path):
        settings = _make_settings(tmp_path, simulator_update_interval_seconds=0.05)
        application = RecorderApplication(settings)

        async def scenario():
            task = asyncio.create_task(application.run())
            await asyncio.sleep(0.3)
            assert application.recorder.model_name == SIMULATED_MODEL_NAME
            application.stop()
            await task

        asyncio.run(scenario())

        session_ids = application.store.load_all_session_ids()
        assert len(session_ids) == 1
        records = application.store.load_records(session_ids[0])
        assert len(records) >= 1
        assert application.running is False

    def test_restores_live_events_on_start(self, tmp_path):
        first = RecorderApplication(_make_settings(tmp_path))
        session_id = first.aggregator.start_session()
        event = first.recorder.mark_event(EventCategory.NOTEWORTHY)
        first.writer.close()

        second = RecorderApplication(_make_settings(tmp_path))

        async def scenario():
            task = asyncio.create_task(second.run())
            await asyncio.sleep(0.05)
            second.stop()
            await task

        asyncio.run(scenario())
        assert event in second.annotator.events_for_session(session_id)


class TestMain:
    @patch("recorder.main.asyncio.run")
    @patch("recorder.main.setup_logging")
    def test_configures_logging_and_runs(self, mock_setup_logging, mock_run):
        main()
        mock_setup_logging.assert_called_once()
        mock_run.assert_called_once()
        mock_run.call_args.args[0].close()

    @patch("recorder.main.asyncio.run")
    @patch("recorder.main.setup_logging")
    def test_production_logs_json(self, mock_setup_logging, mock_run, monkeypatch):
        monkeypatch.setenv("FLIGHTLOG_ENVIRONMENT", "production")
        main()
        config = mock_setup_logging.call_args.args[0]
        assert config.log_format == LogFormat.JSON
        mock_run.call_args.args[0].close()
