from typing import Dict, List, Optional
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from app.core.exceptions import ConflictError
from app.db.models import Favorite as DBFavorite, PropertyInquiry as DBPropertyInquiry
from app.models.user import FavoriteProperty, FavoriteToggleResult, FavoriteSummary
from app.modules.properties.repository import PropertyRepository, to_property
import logging

logger = logging.getLogger(__name__)


class FavoriteService:
    """Server side of the favorites list: one row per (user, property)"""

    def __init__(self, db: Session, repository: Optional[PropertyRepository] = None):
        self.db = db
        self.repository = repository or PropertyRepository(db)

    async def add_favorite(self, user_id: str, property_id: str) -> FavoriteProperty:
        """Add property to user's favorites"""
        if self._find(user_id, property_id) is not None:
            raise ConflictError("Property already in favorites")

        # Raises NotFoundError for unknown listings
        self.repository.get_row(property_id)

        try:
            db_favorite = DBFavorite(
                user_id=user_id,
                property_id=property_id,
                created_at=datetime.utcnow()
            )

            self.db.add(db_favorite)
            self.db.commit()
            self.db.refresh(db_favorite)

        except IntegrityError:
            # Lost a race with a concurrent add for the same pair
            self.db.rollback()
            raise ConflictError("Property already in favorites")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to add favorite property: {e}")
            raise

        contacted = self._contacted_at(user_id, [property_id])
        return self._to_favorite(db_favorite, contacted)

    async def remove_favorite(self, user_id: str, property_id: str) -> bool:
        """Remove property from user's favorites; False when it was not there"""
        db_favorite = self._find(user_id, property_id)
        if db_favorite is None:
            return False

        try:
            self.db.delete(db_favorite)
            self.db.commit()
            return True

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to remove favorite property: {e}")
            raise

    async def toggle_favorite(self, user_id: str, property_id: str) -> FavoriteToggleResult:
        """Add when absent, remove when present"""
        if await self.is_favorite(user_id, property_id):
            await self.remove_favorite(user_id, property_id)
            return FavoriteToggleResult(property_id=property_id, is_favorite=False)

        await self.add_favorite(user_id, property_id)
        return FavoriteToggleResult(property_id=property_id, is_favorite=True)

    async def is_favorite(self, user_id: str, property_id: str) -> bool:
        return self._find(user_id, property_id) is not None

    async def get_user_favorites(self, user_id: str) -> List[FavoriteProperty]:
        """Get user's favorite properties, newest first"""
        rows = self.db.query(DBFavorite).filter(
            DBFavorite.user_id == user_id
        ).order_by(desc(DBFavorite.created_at)).all()

        contacted = self._contacted_at(user_id, [row.property_id for row in rows])
        return [self._to_favorite(row, contacted) for row in rows]

    async def get_summary(self, user_id: str) -> FavoriteSummary:
        favorites = await self.get_user_favorites(user_id)
        contacted_count = sum(1 for f in favorites if f.is_contacted)

        return FavoriteSummary(
            total_favorites=len(favorites),
            contacted_count=contacted_count,
            not_contacted_count=len(favorites) - contacted_count
        )

    def _find(self, user_id: str, property_id: str) -> Optional[DBFavorite]:
        return self.db.query(DBFavorite).filter(
            DBFavorite.user_id == user_id,
            DBFavorite.property_id == property_id
        ).first()

    def _contacted_at(self, user_id: str, property_ids: List[str]) -> Dict[str, datetime]:
        """Earliest inquiry time per property the user has contacted"""
        if not property_ids:
            return {}

        inquiries = self.db.query(DBPropertyInquiry).filter(
            DBPropertyInquiry.user_id == user_id,
            DBPropertyInquiry.property_id.in_(property_ids)
        ).order_by(DBPropertyInquiry.created_at).all()

        contacted: Dict[str, datetime] = {}
        for inquiry in inquiries:
            contacted.setdefault(inquiry.property_id, inquiry.created_at)
        return contacted

    def _to_favorite(self, row: DBFavorite, contacted: Dict[str, datetime]) -> FavoriteProperty:
        contacted_at = contacted.get(row.property_id)
        return FavoriteProperty(
            id=row.id,
            user_id=row.user_id,
            property_id=row.property_id,
            is_contacted=contacted_at is not None,
            contacted_at=contacted_at,
            created_at=row.created_at,
            property=to_property(row.property) if row.property is not None else None
        )
