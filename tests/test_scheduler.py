"""Tests for the background status sweep scheduler."""

import asyncio

import pytest

from app.services.scheduler import StatusSweepScheduler
from app.services.status_engine import SweepResult


class FlakyEngine:
    """Fails the first sweep, then succeeds."""

    def __init__(self):
        self.calls = 0
        self.second_call = asyncio.Event()

    async def run_idle_sweep(self):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("database unavailable")
        self.second_call.set()
        return SweepResult(scanned=3, moved=1)


@pytest.mark.asyncio
async def test_run_once_logs_and_swallows_failures(caplog):
    scheduler = StatusSweepScheduler(FlakyEngine(), interval_hours=24)

    with caplog.at_level("ERROR"):
        assert await scheduler.run_once() is None
    assert "Error during automatic status processing" in caplog.text

    result = await scheduler.run_once()
    assert result.moved == 1


@pytest.mark.asyncio
async def test_loop_runs_immediately_and_survives_a_failed_pass():
    engine = FlakyEngine()
    scheduler = StatusSweepScheduler(engine, interval_hours=0.01 / 3600)

    scheduler.start()
    try:
        await asyncio.wait_for(engine.second_call.wait(), timeout=2)
    finally:
        await scheduler.stop()

    assert engine.calls >= 2
    assert scheduler.running is False


@pytest.mark.asyncio
async def test_start_twice_keeps_one_loop():
    engine = FlakyEngine()
    scheduler = StatusSweepScheduler(engine, interval_hours=24)

    scheduler.start()
    task = scheduler._task
    scheduler.start()
    assert scheduler._task is task

    await asyncio.sleep(0)
    await scheduler.stop()
    assert engine.calls == 1
