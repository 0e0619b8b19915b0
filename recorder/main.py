"""Recorder application entry point.

Builds the single store, annotator, aggregator and recorder from settings
and runs the capture loop, driven by the telemetry simulator.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

from flightlog.config import get_settings
from flightlog.events.annotator import EventAnnotator
from flightlog.exceptions.server_errors import ConfigurationError
from flightlog.logging import LogFormat, LoggingConfig, setup_logging
from flightlog.session.aggregator import SessionAggregator
from flightlog.storage.store import SessionStore
from flightlog.storage.writer import BackgroundSessionWriter
from recorder.feed import TelemetryFeed
from recorder.recorder import FlightRecorder
from recorder.simulator import TelemetrySimulator

if TYPE_CHECKING:
    from flightlog.config import Settings

logger = logging.getLogger(__name__)

SIMULATED_MODEL_NAME = "Simulated Drone"

_MAIN_LOOP_INTERVAL_SECONDS: float = 0.1


class RecorderApplication:
    """Owns the recorder's components for the lifetime of the process."""

    def __init__(self, settings: Settings) -> None:
        """Construct every component exactly once.

        Args:
            settings: Application settings.

        Raises:
            ConfigurationError: If the sessions directory path is not a directory.
        """
        if settings.sessions_directory.exists() and not settings.sessions_directory.is_dir():
            raise ConfigurationError(
                "Sessions directory is not a directory",
                context={"sessions_directory": str(settings.sessions_directory)},
            )

        self._settings = settings
        self._running = False

        self.store = SessionStore(settings.sessions_directory)
        self.writer = BackgroundSessionWriter(self.store)
        self.annotator = EventAnnotator(self.writer, enabled=settings.event_markers_enabled)
        self.store.add_deletion_listener(self.annotator.clear_session)
        self.aggregator = SessionAggregator(
            self.writer,
            self.annotator,
            max_records_in_memory=settings.max_records_in_memory,
            restart_policy=settings.restart_policy,
        )
        self.feed = TelemetryFeed()
        self.recorder = FlightRecorder(settings, self.aggregator, self.annotator, self.feed)
        self.simulator = TelemetrySimulator(
            self.recorder.apply_update,
            update_interval=settings.simulator_update_interval_seconds,
        )

    @property
    def running(self) -> bool:
        """Return whether the main loop is running."""
        return self._running

    async def run(self) -> None:
        """Run until ``stop`` is called or the task is cancelled."""
        self._running = True
        self.annotator.restore()
        logger.info(
            "Starting recorder (sessions=%s, frequency=%s)",
            self.store.root,
            self._settings.logging_frequency.value,
        )

        self.simulator.start()
        self.recorder.handle_connected(SIMULATED_MODEL_NAME)

        try:
            while self._running:
                await asyncio.sleep(_MAIN_LOOP_INTERVAL_SECONDS)
        except asyncio.CancelledError:
            logger.info("Recorder cancelled")
        finally:
            self._shutdown()

    def stop(self) -> None:
        """Signal the main loop to stop."""
        logger.info("Stop signal received")
        self._running = False

    def _shutdown(self) -> None:
        logger.info("Shutting down recorder")
        self.simulator.stop()
        self.recorder.handle_disconnected()
        self.recorder.shutdown()
        self.writer.close()

        if self.store.last_save_error is not None:
            logger.warning("Last save failed: %s", self.store.last_save_error)
        logger.info("Recorder shut down complete")


async def run_recorder(settings: Settings) -> None:
    """Run the recorder with signal handling for graceful shutdown.

    Args:
        settings: Application settings.
    """
    application = RecorderApplication(settings=settings)

    loop = asyncio.get_running_loop()

    def signal_handler() -> None:
        logger.info("Received shutdown signal")
        application.stop()

    for signal_name in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signal_name, signal_handler)

    await application.run()


def main() -> None:
    """CLI entry point: load settings and run the async event loop.

    Production runs always log JSON lines.
    """
    settings = get_settings()
    logging_config = LoggingConfig(log_level=settings.log_level, service_name=settings.service_name)
    if settings.is_production:
        logging_config = logging_config.model_copy(update={"log_format": LogFormat.JSON})
    setup_logging(logging_config)

    asyncio.run(run_recorder(settings=settings))


if __name__ == "__main__":
    main()
