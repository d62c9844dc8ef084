"""Background job scheduler for the export and training pipeline."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from stockout_predict.config import settings
from stockout_predict.services import get_services
from stockout_predict.training import PipelineResult

logger = logging.getLogger(__name__)


async def job_export_and_train() -> PipelineResult:
    """Export sales history, upload it and retrain every SKU."""
    print("[stockout] Starting export and training...")
    result = await get_services().pipeline.run()

    if result.success:
        print(f"[stockout] {result.message}")
    else:
        print(f"[stockout] Pipeline failed: {result.message}")
    return result


def create_scheduler() -> AsyncIOScheduler:
    """Create the job scheduler."""
    scheduler = AsyncIOScheduler()

    # Daily, after the previous day's sales are complete
    scheduler.add_job(
        job_export_and_train,
        CronTrigger(hour=settings.train_cron_hour, minute=0, timezone="UTC"),
        id="export_and_train",
        name="Daily Sales Export and Training",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    logger.info(f"Scheduler configured: export and train daily at {settings.train_cron_hour:02d}:00 UTC")
    return scheduler
