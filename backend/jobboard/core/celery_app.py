"""
Celery application for background board syncs
"""
from celery import Celery
from jobboard.core.config import settings

celery_app = Celery(
    "jobboard",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "jobboard.tasks.sync_tasks",
    ],
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=600,  # 10 minutes
    task_soft_time_limit=540,  # 9 minutes
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    result_expires=3600,  # 1 hour
)

if settings.SYNC_INTERVAL_MINUTES > 0:
    celery_app.conf.beat_schedule = {
        "sync-greenhouse-boards": {
            "task": "jobboard.tasks.sync_tasks.sync_all_boards_task",
            "schedule": settings.SYNC_INTERVAL_MINUTES * 60.0,
        },
    }
