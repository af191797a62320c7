# services/sweeper.py
import asyncio
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

JOB_ID = "sweep_expired_solutions"


class ExpirySweeper:
    """Owns the interval job that deletes expired solutions; started and stopped with the app."""

    def __init__(self, service, interval_minutes: int = 60, scheduler: AsyncIOScheduler = None):
        self.service = service
        self.interval_minutes = interval_minutes
        self.scheduler = scheduler or AsyncIOScheduler()

    def start(self):
        self.scheduler.add_job(
            self.run,
            IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info(f"Expiry sweep scheduled every {self.interval_minutes} minutes")

    async def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            # AsyncIOScheduler finishes stopping on the next loop iteration
            await asyncio.sleep(0)

    async def run(self) -> int:
        try:
            return await self.service.sweep_expired()
        except Exception as e:
            logger.error(f"Expiry sweep failed: {e}")
            return 0
