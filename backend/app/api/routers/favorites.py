from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.core.exceptions import ConflictError, NotFoundError
from app.models.user import FavoriteProperty, FavoriteToggleRequest, FavoriteToggleResult, FavoriteSummary
from app.modules.favorites.service import FavoriteService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def get_favorite_service(db: Session = Depends(get_db)) -> FavoriteService:
    return FavoriteService(db)

@router.get("/", response_model=List[FavoriteProperty])
async def list_favorites(
    current_user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Get current user's favorite properties."""
    try:
        return await service.get_user_favorites(current_user_id)

    except Exception as e:
        logger.error(f"Failed to get favorite properties: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve favorite properties"
        )

@router.post("/toggle", response_model=FavoriteToggleResult)
async def toggle_favorite(
    toggle_data: FavoriteToggleRequest,
    current_user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Add the property to favorites, or remove it when already there."""
    try:
        return await service.toggle_favorite(current_user_id, toggle_data.property_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Failed to toggle favorite: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update favorites"
        )

@router.get("/summary", response_model=FavoriteSummary)
async def get_favorites_summary(
    current_user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    try:
        return await service.get_summary(current_user_id)

    except Exception as e:
        logger.error(f"Failed to summarise favorites: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve favorites summary"
        )

@router.get("/{property_id}/status", response_model=FavoriteToggleResult)
async def get_favorite_status(
    property_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Whether the property is in the current user's favorites."""
    try:
        is_favorite = await service.is_favorite(current_user_id, property_id)
        return FavoriteToggleResult(property_id=property_id, is_favorite=is_favorite)

    except Exception as e:
        logger.error(f"Failed to check favorite status: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check favorite status"
        )

@router.delete("/{property_id}")
async def remove_favorite(
    property_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Remove a property from current user's favorites."""
    try:
        removed = await service.remove_favorite(current_user_id, property_id)

        if not removed:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Favorite property not found"
            )

        return {"message": "Property removed from favorites"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to remove favorite property: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove favorite property"
        )
