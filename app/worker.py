"""Celery worker configuration.

This module sets up Celery for background task processing including:
- Periodic auto-assignment of stale bookings
"""

from datetime import timedelta

from celery import Celery

from app.config import settings

# Create Celery app
celery_app = Celery(
    "neighbourhood_wash_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Europe/London",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=300,  # 5 minutes max
    task_soft_time_limit=240,  # Soft limit at 4 minutes

    # Worker settings
    worker_prefetch_multiplier=1,
    worker_concurrency=4,

    # Result backend settings
    result_expires=3600,  # Results expire after 1 hour

    # Retry settings
    task_default_retry_delay=60,  # 1 minute
    task_max_retries=3,

    # Beat schedule for periodic tasks
    beat_schedule={
        # Assign bookings nobody has picked up
        "auto-assign-stale-bookings": {
            "task": "app.tasks.auto_assign_stale_bookings",
            "schedule": timedelta(minutes=settings.auto_assign_interval_minutes),
            # A missed tick is superseded by the next one
            "options": {"expires": settings.auto_assign_interval_minutes * 60},
        },
    },
)


if __name__ == "__main__":
    celery_app.start()
