# bontemp/triggers/scheduler.py
"""APScheduler setup for the daily winner job."""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from bontemp.triggers.daily_winner import DailyWinnerService

JOB_ID = 'daily_winner'

# Module-level scheduler instance (one per process)
scheduler = BackgroundScheduler()


def build_trigger(cron: str, timezone: str) -> CronTrigger:
    """Crontab expression (minute hour day month weekday) evaluated in the given timezone."""
    return CronTrigger.from_crontab(cron, timezone=timezone)


def start_scheduler(daily_winner_service: DailyWinnerService, cron: str, timezone: str) -> None:
    """
    Adds the daily winner job and starts the scheduler.

    One instance of the job at a time; missed runs are collapsed into one.
    """
    scheduler.add_job(
        daily_winner_service.calculate_daily_winner,
        build_trigger(cron, timezone),
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logging.info(f"Scheduler started: daily winner at '{cron}' ({timezone})")


def shutdown_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logging.info("Scheduler stopped")
