"""
Celery configuration for background tasks
"""
from celery import Celery
from app.core.config import settings

celery_app = Celery(
    "rental_matching",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["app.modules.saved_searches.tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=10 * 60,  # 10 minutes
    task_soft_time_limit=8 * 60,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    beat_schedule={
        "refresh-saved-search-matches": {
            "task": "app.modules.saved_searches.tasks.refresh_saved_search_matches",
            "schedule": settings.MATCH_REFRESH_INTERVAL_SECONDS,
        },
    },
)
