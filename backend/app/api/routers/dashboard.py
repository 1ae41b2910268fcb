from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.models.user import DashboardSummary
from app.modules.favorites.service import FavoriteService
from app.modules.profiles.service import ProfileService
from app.modules.saved_searches.service import SavedSearchService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    current_user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Saved search, favorite and profile figures shown on the tenant dashboard."""
    try:
        searches = await SavedSearchService(db).get_summary(current_user_id)
        favorites = await FavoriteService(db).get_summary(current_user_id)
        completion = await ProfileService(db).get_tenant_completion(current_user_id)

        return DashboardSummary(
            saved_searches=searches.total_searches,
            active_saved_searches=searches.active_searches,
            new_matches=searches.total_new_matches,
            total_favorites=favorites.total_favorites,
            contacted_favorites=favorites.contacted_count,
            profile_completion=completion.percentage
        )

    except Exception as e:
        logger.error(f"Failed to build dashboard summary: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve dashboard summary"
        )
