"""Tests for the capture trigger."""

import asyncio
import time

import pytest

from flightlog.exceptions.client_errors import ValidationError
from recorder.trigger import CaptureTrigger


class TestCaptureTrigger:
    def test_fires_immediately_on_start(self):
        ticks = []

        async def scenario():
            trigger = CaptureTrigger(lambda: ticks.append(1))
            trigger.start(10.0)
            count = len(ticks)
            trigger.stop()
            return count

        assert asyncio.run(scenario()) == 1

    def test_fires_repeatedly(self):
        ticks = []

        async def scenario():
            trigger = CaptureTrigger(lambda: ticks.append(1))
            trigger.start(0.01)
            await asyncio.sleep(0.1)
            trigger.stop()

        asyncio.run(scenario())
        assert len(ticks) >= 3

    def test_stop_prevents_further_ticks(self):
        ticks = []

        async def scenario():
            trigger = CaptureTrigger(lambda: ticks.append(1))
            trigger.start(0.01)
            trigger.stop()
            await asyncio.sleep(0.05)
            return trigger.running

        assert asyncio.run(scenario()) is False
        assert len(ticks) == 1

    def test_stop_is_idempotent(self):
        trigger = CaptureTrigger(lambda: None)
        trigger.stop()
        trigger.stop()
        assert trigger.running is False
        assert trigger.interval is None

    def test_restart_replaces_timer(self):
        async def scenario():
            trigger = CaptureTrigger(lambda: None)
            trigger.start(1.0)
            first_task = trigger._task
            trigger.start(0.5)
            await asyncio.sleep(0.01)
            result = (first_task.cancelled(), trigger.interval, trigger.running)
            trigger.stop()
            return result

        assert asyncio.run(scenario()) == (True, 0.5, True)

    def test_callback_failure_does_not_stop_timer(self):
        calls = []

        def failing():
            calls.append(1)
            raise RuntimeError("boom")

        async def scenario():
            trigger = CaptureTrigger(failing)
            trigger.start(0.01)
            await asyncio.sleep(0.05)
            running = trigger.running
            trigger.stop()
            return running

        assert asyncio.run(scenario()) is True
        assert len(calls) >= 2

    def test_skips_ticks_missed_during_stall(self):
        tick_times = []

        def stalling():
            tick_times.append(time.monotonic())
            if len(tick_times) == 2:
                time.sleep(0.5)

        async def scenario():
            trigger = CaptureTrigger(stalling)
            trigger.start(0.1)
            await asyncio.sleep(1.0)
            trigger.stop()

        asyncio.run(scenario())
        gaps = [later - earlier for earlier, later in zip(tick_times, tick_times[1:], strict=False)]
        assert len(tick_times) <= 8
        assert min(gaps[2:]) > 0.05

    def test_rejects_non_positive_interval(self):
        trigger = CaptureTrigger(lambda: None)
        with pytest.raises(ValidationError):
            trigger.start(0)
