"""Celery background tasks.

This module contains the periodic jobs:
- Auto-assignment of stale bookings to approved washers
"""

import asyncio
import logging

from celery import shared_task

from app.database import get_db_context
from app.services.assignment_service import assignment_service

logger = logging.getLogger(__name__)

_loop: asyncio.AbstractEventLoop | None = None


def run_async(coro):
    """Run async function in sync context.

    The loop is kept for the life of the worker process so pooled database
    connections stay bound to the loop that opened them.
    """
    global _loop
    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
        asyncio.set_event_loop(_loop)
    return _loop.run_until_complete(coro)


# ==================== ASSIGNMENT TASKS ====================


@shared_task(bind=True, max_retries=3)
def auto_assign_stale_bookings(self):
    """Assign bookings that have waited past the staleness threshold.

    Runs every ``auto_assign_interval_minutes`` from the beat schedule.
    Per-booking failures are part of the summary; only a failed run retries.
    """
    try:
        summary = run_async(_auto_assign_stale_bookings())
    except Exception as exc:
        logger.exception("Auto-assignment task failed")
        raise self.retry(exc=exc, countdown=60)

    return {
        "status": "success",
        "message": summary["message"],
        "assigned": summary["assigned"],
        "skipped": summary["skipped"],
        "errored": summary["errored"],
    }


async def _auto_assign_stale_bookings() -> dict:
    """Async implementation of the auto-assignment pass."""
    async with get_db_context() as db:
        summary, run = await assignment_service.run_and_record(db, trigger="celery")
        logger.info(f"Auto-assignment run {run.id}: {summary.assigned}/{summary.total_processed} assigned")
        return summary.to_dict()
