from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.models.property import Property
from app.models.user import SavedSearch, SavedSearchCreate, SavedSearchUpdate, SavedSearchSummary
from app.modules.saved_searches.service import SavedSearchService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def get_saved_search_service(db: Session = Depends(get_db)) -> SavedSearchService:
    return SavedSearchService(db)

@router.get("/", response_model=List[SavedSearch])
async def list_saved_searches(
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """Get current user's saved searches, newest first."""
    try:
        return await service.get_user_saved_searches(current_user_id)

    except Exception as e:
        logger.error(f"Failed to get saved searches: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve saved searches"
        )

@router.post("/", response_model=SavedSearch, status_code=status.HTTP_201_CREATED)
async def create_saved_search(
    search_data: SavedSearchCreate,
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """
    Save a new search for the current user.

    Criteria with an inverted budget or room range are rejected.
    """
    try:
        return await service.create_saved_search(current_user_id, search_data)

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Failed to save search: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save search"
        )

@router.get("/summary", response_model=SavedSearchSummary)
async def get_saved_searches_summary(
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """Counts of saved searches, active ones and pending new matches."""
    try:
        return await service.get_summary(current_user_id)

    except Exception as e:
        logger.error(f"Failed to summarise saved searches: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve saved search summary"
        )

@router.get("/{search_id}", response_model=SavedSearch)
async def get_saved_search(
    search_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    try:
        return await service.get_saved_search(current_user_id, search_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Saved search not found"
        )
    except Exception as e:
        logger.error(f"Failed to get saved search: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve saved search"
        )

@router.put("/{search_id}", response_model=SavedSearch)
async def update_saved_search(
    search_id: str,
    search_data: SavedSearchUpdate,
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """Update an existing saved search."""
    try:
        return await service.update_saved_search(current_user_id, search_id, search_data)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Saved search not found"
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Failed to update saved search: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update saved search"
        )

@router.delete("/{search_id}")
async def delete_saved_search(
    search_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """Delete a saved search."""
    try:
        await service.delete_saved_search(current_user_id, search_id)
        return {"message": "Saved search deleted successfully"}

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Saved search not found"
        )
    except Exception as e:
        logger.error(f"Failed to delete saved search: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete saved search"
        )

@router.post("/{search_id}/toggle", response_model=SavedSearch)
async def toggle_saved_search(
    search_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """Pause or resume a saved search."""
    try:
        return await service.toggle_saved_search_status(current_user_id, search_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Saved search not found"
        )
    except Exception as e:
        logger.error(f"Failed to toggle saved search: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to change saved search status"
        )

@router.post("/{search_id}/execute", response_model=List[Property])
async def execute_saved_search(
    search_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: SavedSearchService = Depends(get_saved_search_service)
):
    """
    Run a saved search against the active listings.

    Resets the search's new-match counter.
    """
    try:
        return await service.execute_search(current_user_id, search_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Saved search not found"
        )
    except Exception as e:
        logger.error(f"Failed to execute saved search: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to execute saved search"
        )
