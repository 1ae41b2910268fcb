"""
Celery tasks keeping saved-search match counters current
"""
import logging
from datetime import datetime
from typing import Any, Dict
from celery import Task
from sqlalchemy.orm import Session

from app.core.celery_app import celery_app
from app.core.database import SessionLocal
from .service import SavedSearchService

logger = logging.getLogger(__name__)


class DatabaseTask(Task):
    """Base task class that provides database session management"""

    def __call__(self, *args, **kwargs):
        with SessionLocal() as db:
            try:
                return self.run(db, *args, **kwargs)
            except Exception as e:
                db.rollback()
                logger.error(f"Task {self.name} failed: {str(e)}")
                raise
            finally:
                db.close()

    def run(self, db: Session, *args, **kwargs):
        """Override this method in subclasses"""
        raise NotImplementedError


@celery_app.task(bind=True, base=DatabaseTask, max_retries=3, default_retry_delay=120)
def refresh_saved_search_matches(self, db: Session) -> Dict[str, Any]:
    """Recompute new_matches_count for every active, notifying saved search"""
    try:
        logger.info("Starting saved search match refresh")

        updated = SavedSearchService(db).refresh_new_match_counts()

        return {
            'searches_updated': updated,
            'refresh_time': datetime.now().isoformat()
        }

    except Exception as e:
        logger.error(f"Error in refresh_saved_search_matches: {str(e)}")
        raise self.retry(exc=e, countdown=60 * (2 ** self.request.retries))

