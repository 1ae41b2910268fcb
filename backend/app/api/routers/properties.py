from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.models.property import Property, PropertyPage
from app.models.profile import ContactRequest, ContactResponse
from app.modules.contact.service import ContactService
from app.modules.properties.repository import PropertyRepository
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def get_property_repository(db: Session = Depends(get_db)) -> PropertyRepository:
    return PropertyRepository(db)

def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db)

@router.get("/", response_model=PropertyPage)
async def get_properties(
    limit: int = Query(50, ge=1, le=100, description="Maximum number of properties to return"),
    offset: int = Query(0, ge=0, description="Number of properties to skip"),
    repository: PropertyRepository = Depends(get_property_repository)
):
    """Active listings, newest first."""
    try:
        return repository.list_active(limit=limit, offset=offset)

    except Exception as e:
        logger.error(f"Failed to get properties: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve properties"
        )

@router.get("/{property_id}", response_model=Property)
async def get_property(
    property_id: str,
    repository: PropertyRepository = Depends(get_property_repository)
):
    try:
        return repository.get(property_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )
    except Exception as e:
        logger.error(f"Failed to get property {property_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve property"
        )

@router.post("/{property_id}/contact", response_model=ContactResponse)
async def contact_property(
    property_id: str,
    contact_data: ContactRequest = ContactRequest(),
    current_user_id: str = Depends(get_current_user_id),
    contact_service: ContactService = Depends(get_contact_service)
):
    """
    Start a WhatsApp conversation with the property's landlord.

    The tenant profile must include name, phone and budget. The inquiry is
    recorded so the property shows as contacted in the tenant's favorites.
    """
    try:
        return await contact_service.contact_property(
            current_user_id, property_id, use_web_version=contact_data.use_web_version
        )

    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Failed to contact property {property_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to contact landlord"
        )
