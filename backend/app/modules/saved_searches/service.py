from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.db.models import SavedSearch as DBSavedSearch
from app.models.property import Property
from app.models.search import SearchCriteria
from app.models.user import SavedSearch, SavedSearchCreate, SavedSearchUpdate, SavedSearchSummary
from app.modules.properties.repository import PropertyRepository
from app.modules.search.matching import filter_matching
import logging

logger = logging.getLogger(__name__)

PROFILE_NAME_MIN_LENGTH = 3
PROFILE_NAME_MAX_LENGTH = 100


def to_saved_search(row: DBSavedSearch) -> SavedSearch:
    return SavedSearch(
        id=row.id,
        user_id=row.user_id,
        profile_name=row.profile_name,
        criteria=SearchCriteria.model_validate(row.search_criteria or {}),
        is_active=row.is_active,
        notifications_enabled=row.notifications_enabled,
        new_matches_count=row.new_matches_count or 0,
        last_checked_at=row.last_checked_at,
        created_at=row.created_at,
        updated_at=row.updated_at or row.created_at
    )


def validate_profile_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if len(cleaned) < PROFILE_NAME_MIN_LENGTH:
        raise ValidationError(f"Profile name must be at least {PROFILE_NAME_MIN_LENGTH} characters")
    if len(cleaned) > PROFILE_NAME_MAX_LENGTH:
        raise ValidationError(f"Profile name cannot exceed {PROFILE_NAME_MAX_LENGTH} characters")
    return cleaned


class SavedSearchService:
    """Service for tenants' saved searches and on-demand matching"""

    def __init__(self, db: Session, repository: Optional[PropertyRepository] = None):
        self.db = db
        self.repository = repository or PropertyRepository(db)

    async def create_saved_search(self, user_id: str, data: SavedSearchCreate) -> SavedSearch:
        """Validate and persist a new saved search"""
        name = validate_profile_name(data.profile_name)

        existing_count = self.db.query(func.count(DBSavedSearch.id)).filter(
            DBSavedSearch.user_id == user_id
        ).scalar() or 0
        if existing_count >= settings.MAX_SAVED_SEARCHES_PER_USER:
            raise ValidationError(
                f"You have reached the limit of {settings.MAX_SAVED_SEARCHES_PER_USER} saved searches"
            )

        try:
            now = datetime.utcnow()
            db_search = DBSavedSearch(
                user_id=user_id,
                profile_name=name,
                search_criteria=data.criteria.model_dump(mode="json"),
                is_active=data.is_active,
                notifications_enabled=data.notifications_enabled,
                new_matches_count=0,
                created_at=now,
                updated_at=now
            )

            self.db.add(db_search)
            self.db.commit()
            self.db.refresh(db_search)

            logger.info(f"Created saved search {db_search.id} for user {user_id}")
            return to_saved_search(db_search)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save search: {e}")
            raise

    async def get_user_saved_searches(self, user_id: str) -> List[SavedSearch]:
        """Get user's saved searches, newest first"""
        rows = self.db.query(DBSavedSearch).filter(
            DBSavedSearch.user_id == user_id
        ).order_by(desc(DBSavedSearch.created_at)).all()

        return [to_saved_search(row) for row in rows]

    async def get_saved_search(self, user_id: str, search_id: str) -> SavedSearch:
        return to_saved_search(self._get_row(user_id, search_id))

    async def update_saved_search(self, user_id: str, search_id: str, data: SavedSearchUpdate) -> SavedSearch:
        """Apply the provided fields to an existing saved search"""
        db_search = self._get_row(user_id, search_id)

        if data.profile_name is not None:
            db_search.profile_name = validate_profile_name(data.profile_name)

        try:
            if data.criteria is not None:
                db_search.search_criteria = data.criteria.model_dump(mode="json")
            if data.is_active is not None:
                db_search.is_active = data.is_active
            if data.notifications_enabled is not None:
                db_search.notifications_enabled = data.notifications_enabled

            db_search.updated_at = datetime.utcnow()

            self.db.commit()
            self.db.refresh(db_search)

            return to_saved_search(db_search)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update saved search {search_id}: {e}")
            raise

    async def delete_saved_search(self, user_id: str, search_id: str) -> None:
        db_search = self._get_row(user_id, search_id)

        try:
            self.db.delete(db_search)
            self.db.commit()
            logger.info(f"Deleted saved search {search_id} for user {user_id}")

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete saved search {search_id}: {e}")
            raise

    async def toggle_saved_search_status(self, user_id: str, search_id: str) -> SavedSearch:
        """Flip a saved search between active and paused"""
        db_search = self._get_row(user_id, search_id)
        return await self.update_saved_search(
            user_id, search_id, SavedSearchUpdate(is_active=not db_search.is_active)
        )

    async def execute_search(self, user_id: str, search_id: str) -> List[Property]:
        """
        Run a saved search against the active listings.

        Marks the search as checked and clears its new-match counter.
        """
        db_search = self._get_row(user_id, search_id)
        criteria = SearchCriteria.model_validate(db_search.search_criteria or {})

        matched = self.find_matching_properties(criteria)

        try:
            db_search.last_checked_at = datetime.utcnow()
            db_search.new_matches_count = 0
            self.db.commit()

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to mark saved search {search_id} as checked: {e}")
            raise

        return matched

    def find_matching_properties(self, criteria: SearchCriteria, created_after: Optional[datetime] = None) -> List[Property]:
        page = self.repository.list_active(
            limit=settings.MATCH_CANDIDATE_LIMIT,
            created_after=created_after,
            criteria=criteria
        )
        return filter_matching(criteria, page.properties)

    async def get_summary(self, user_id: str) -> SavedSearchSummary:
        searches = await self.get_user_saved_searches(user_id)

        return SavedSearchSummary(
            total_searches=len(searches),
            active_searches=sum(1 for s in searches if s.is_active),
            total_new_matches=sum(s.new_matches_count for s in searches)
        )

    def refresh_new_match_counts(self) -> int:
        """
        Recount listings that appeared since each active search was last checked.

        Returns the number of saved searches updated.
        """
        rows = self.db.query(DBSavedSearch).filter(
            DBSavedSearch.is_active.is_(True),
            DBSavedSearch.notifications_enabled.is_(True)
        ).all()

        updated = 0
        try:
            for row in rows:
                criteria = SearchCriteria.model_validate(row.search_criteria or {})
                new_matches = self.find_matching_properties(criteria, created_after=row.last_checked_at)
                if row.new_matches_count != len(new_matches):
                    row.new_matches_count = len(new_matches)
                    updated += 1

            self.db.commit()

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to refresh saved search match counts: {e}")
            raise

        logger.info(f"Refreshed match counts for {len(rows)} saved searches ({updated} changed)")
        return updated

    def _get_row(self, user_id: str, search_id: str) -> DBSavedSearch:
        row = self.db.query(DBSavedSearch).filter(
            DBSavedSearch.id == search_id,
            DBSavedSearch.user_id == user_id
        ).first()

        if not row:
            raise NotFoundError(f"Saved search {search_id} not found")
        return row
