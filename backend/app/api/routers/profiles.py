from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from typing import Any, Dict
from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.models.profile import (
    TenantProfile, TenantProfileInput, LandlordProfile, LandlordVerificationStatus,
    LandlordVerificationUpdate, ProfileCompletion, ContactPermission
)
from app.modules.profiles.service import ProfileService, landlord_input_adapter
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)

@router.get("/tenant", response_model=TenantProfile)
async def get_tenant_profile(
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    try:
        return await service.get_tenant_profile(current_user_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant profile not found"
        )
    except Exception as e:
        logger.error(f"Failed to get tenant profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve tenant profile"
        )

@router.put("/tenant", response_model=TenantProfile)
async def update_tenant_profile(
    profile_data: TenantProfileInput,
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Create or replace the current user's tenant profile."""
    try:
        return await service.upsert_tenant_profile(current_user_id, profile_data)

    except Exception as e:
        logger.error(f"Failed to update tenant profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update tenant profile"
        )

@router.get("/tenant/completion", response_model=ProfileCompletion)
async def get_tenant_completion(
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """
    Completion percentage of the tenant profile.

    A user without a profile gets a 0% result listing every field.
    """
    try:
        return await service.get_tenant_completion(current_user_id)

    except Exception as e:
        logger.error(f"Failed to score tenant profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate profile completion"
        )

@router.get("/tenant/contact-permission", response_model=ContactPermission)
async def get_contact_permission(
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    try:
        return await service.check_contact_permission(current_user_id)

    except Exception as e:
        logger.error(f"Failed to check contact permission: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check contact permission"
        )

@router.get("/landlord", response_model=LandlordProfile)
async def get_landlord_profile(
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    try:
        return await service.get_landlord_profile(current_user_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Landlord profile not found"
        )
    except Exception as e:
        logger.error(f"Failed to get landlord profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve landlord profile"
        )

@router.put("/landlord", response_model=LandlordProfile)
async def update_landlord_profile(
    payload: Dict[str, Any] = Body(...),
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """
    Create or replace the current user's landlord profile.

    The body's landlord_type selects which onboarding fields apply.
    """
    try:
        details = landlord_input_adapter.validate_python(payload)
    except PydanticValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False)
        )

    try:
        return await service.upsert_landlord_profile(current_user_id, details)

    except Exception as e:
        logger.error(f"Failed to update landlord profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update landlord profile"
        )

@router.get("/landlord/completion", response_model=ProfileCompletion)
async def get_landlord_completion(
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    try:
        return await service.get_landlord_completion(current_user_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Landlord profile not found"
        )
    except Exception as e:
        logger.error(f"Failed to score landlord profile: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate profile completion"
        )

@router.get("/landlord/verification", response_model=LandlordVerificationStatus)
async def get_verification_status(
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    try:
        return await service.get_verification_status(current_user_id)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Landlord profile not found"
        )
    except Exception as e:
        logger.error(f"Failed to get verification status: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve verification status"
        )

@router.put("/landlord/verification", response_model=LandlordVerificationStatus)
async def update_verification_status(
    update: LandlordVerificationUpdate,
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Record verification milestones for the current landlord."""
    try:
        return await service.update_verification(current_user_id, update)

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Landlord profile not found"
        )
    except Exception as e:
        logger.error(f"Failed to update verification status: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update verification status"
        )
