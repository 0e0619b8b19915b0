"""Mock drone for running the recorder without flight hardware.

The simulated flight climbs to a cruise altitude, wanders at a varying speed
and heading, and drains its battery slowly. Elapsed time advances by one
update interval per step, so a seeded simulator is fully deterministic.
"""

import asyncio
import logging
import math
import random
from collections.abc import Callable

from flightlog.geo import destination_point
from recorder.feed import Coordinate, TelemetryUpdate

logger = logging.getLogger(__name__)

DEFAULT_BASE_LATITUDE: float = 55.8642
DEFAULT_BASE_LONGITUDE: float = -4.2518

_CLIMB_RATE_METERS_PER_SECOND: float = 2.0
_CRUISE_ALTITUDE_METERS: float = 50.0
_SPEED_VARIATION_START_SECONDS: float = 5.0
_MAX_SPEED_METERS_PER_SECOND: float = 15.0
_HEADING_STEP_DEGREES: float = 5.0
_BATTERY_DRAIN_PERIOD_SECONDS: float = 30.0
_BATTERY_FLOOR_PERCENT: int = 20


class TelemetrySimulator:
    """Produces a plausible stream of telemetry updates."""

    def __init__(
        self,
        callback: Callable[[TelemetryUpdate], None],
        *,
        update_interval: float = 0.5,
        base_latitude: float = DEFAULT_BASE_LATITUDE,
        base_longitude: float = DEFAULT_BASE_LONGITUDE,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the simulator.

        Args:
            callback: Receives every generated update.
            update_interval: Seconds of simulated time per step.
            base_latitude: Take-off latitude, also reported as home.
            base_longitude: Take-off longitude, also reported as home.
            rng: Random source; pass a seeded instance for repeatable flights.
        """
        self._callback = callback
        self._update_interval = update_interval
        self._home = Coordinate(latitude=base_latitude, longitude=base_longitude)
        self._rng = rng if rng is not None else random.Random()
        self._task: asyncio.Task[None] | None = None
        self._reset_flight()

    @property
    def running(self) -> bool:
        """Return whether the simulator is pushing updates."""
        return self._task is not None and not self._task.done()

    @property
    def elapsed_seconds(self) -> float:
        """Return simulated time since take-off."""
        return self._elapsed

    def _reset_flight(self) -> None:
        self._elapsed = 0.0
        self._latitude = self._home.latitude
        self._longitude = self._home.longitude
        self._altitude = 0.0
        self._speed = 0.0
        self._heading = self._rng.uniform(0.0, 360.0)
        self._battery = 100

    def start(self) -> None:
        """Begin a new simulated flight on the running event loop."""
        if self.running:
            return
        self._reset_flight()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Telemetry simulator started")

    def stop(self) -> None:
        """Stop pushing updates."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("Telemetry simulator stopped")

    def step(self) -> TelemetryUpdate:
        """Advance the flight by one interval and publish the new state.

        Returns:
            The update handed to the callback.
        """
        interval = self._update_interval
        self._elapsed += interval
        elapsed = self._elapsed

        if self._altitude < _CRUISE_ALTITUDE_METERS:
            self._altitude = min(_CRUISE_ALTITUDE_METERS, elapsed * _CLIMB_RATE_METERS_PER_SECOND)

        if elapsed > _SPEED_VARIATION_START_SECONDS:
            speed = 5.0 + math.sin(elapsed * 0.1) * 5.0 + self._rng.uniform(-1.0, 1.0)
            self._speed = max(0.0, min(_MAX_SPEED_METERS_PER_SECOND, speed))

        self._heading = (
            self._heading + self._rng.uniform(-_HEADING_STEP_DEGREES, _HEADING_STEP_DEGREES)
        ) % 360.0

        if elapsed % _BATTERY_DRAIN_PERIOD_SECONDS < interval:
            self._battery = max(_BATTERY_FLOOR_PERCENT, self._battery - 1)

        self._latitude, self._longitude = destination_point(
            self._latitude,
            self._longitude,
            self._speed * interval,
            self._heading,
        )

        update = TelemetryUpdate(
            battery=self._battery,
            satellites=self._rng.randint(8, 15),
            altitude=self._altitude,
            speed=self._speed,
            position=Coordinate(latitude=self._latitude, longitude=self._longitude),
            heading=self._heading,
            gps_signal_level=self._rng.randint(3, 5),
            link_signal_level=self._rng.randint(80, 100),
            home=self._home,
        )
        self._callback(update)
        return update

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._update_interval)
            self.step()
