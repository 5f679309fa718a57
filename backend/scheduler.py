import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from config import APP_TIMEZONE, STOCK_SWEEP_HOUR
from tasks.stock_sweep import run_stock_sweep

logger = logging.getLogger(__name__)


def start_scheduler(toast_bus=None) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()

    # Every day at STOCK_SWEEP_HOUR:00 local time
    scheduler.add_job(
        run_stock_sweep,
        CronTrigger(hour=STOCK_SWEEP_HOUR, minute=0, timezone=APP_TIMEZONE),
        kwargs={"toast_bus": toast_bus},
        id='stock_sweep_job',
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Stock sweep scheduled daily at {STOCK_SWEEP_HOUR:02d}:00 ({APP_TIMEZONE})")
    return scheduler
