import asyncio
from datetime import timedelta

from services.solutions import SolutionService
from services.sweeper import JOB_ID, ExpirySweeper


def test_sweeper_schedules_one_interval_job():
    async def scenario():
        sweeper = ExpirySweeper(service=None, interval_minutes=15)
        sweeper.start()
        job = sweeper.scheduler.get_job(JOB_ID)
        await sweeper.shutdown()
        return job, sweeper.scheduler.running

    job, running = asyncio.run(scenario())
    assert job.trigger.interval == timedelta(minutes=15)
    assert job.max_instances == 1
    assert running is False


def test_sweeper_run_deletes_expired(db, settings, clock):
    service = SolutionService(db, settings, clock=clock)
    asyncio.run(service.create_solution("q", "a"))
    clock.advance(days=31)
    sweeper = ExpirySweeper(service)
    assert asyncio.run(sweeper.run()) == 1
    assert asyncio.run(sweeper.run()) == 0


def test_sweeper_run_survives_store_failure():
    class BrokenService:
        async def sweep_expired(self):
            raise RuntimeError("store unavailable")

    assert asyncio.run(ExpirySweeper(BrokenService()).run()) == 0
