"""
Background status sweep scheduler
Runs the idle sweep once at startup and then on a fixed interval
"""
import asyncio
import logging
from typing import Optional

from app.services.status_engine import StatusEngine

logger = logging.getLogger(__name__)


class StatusSweepScheduler:
    """Periodic driver for ``StatusEngine.run_idle_sweep``"""

    def __init__(self, engine: StatusEngine, interval_hours: float = 24):
        self.engine = engine
        self.interval_seconds = interval_hours * 60 * 60
        self.running = False
        self._task: Optional[asyncio.Task] = None

    def start(self):
        """Start the background sweep loop"""
        if self.running:
            logger.warning("Status sweep scheduler is already running")
            return

        self.running = True
        logger.info("Starting status sweep scheduler (every %s seconds)", self.interval_seconds)
        self._task = asyncio.create_task(self._sweep_loop())

    async def stop(self):
        """Stop the loop and wait for the task to finish"""
        self.running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Stopped status sweep scheduler")

    async def run_once(self):
        """Run one sweep, logging instead of raising on failure"""
        try:
            return await self.engine.run_idle_sweep()
        except Exception:
            logger.exception("Error during automatic status processing")
            return None

    async def _sweep_loop(self):
        while self.running:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)
