from typing import Optional
from datetime import datetime
from pydantic import TypeAdapter
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError
from app.db.models import TenantProfile as DBTenantProfile, LandlordProfile as DBLandlordProfile
from app.models.profile import (
    TenantProfile, TenantProfileInput, LandlordProfile, LandlordProfileInput,
    LandlordVerificationStatus, LandlordVerificationUpdate, ProfileCompletion,
    ContactPermission
)
from app.modules.profiles.completion import (
    score_tenant, empty_tenant_completion, score_landlord, landlord_percentage,
    missing_contact_fields
)
from app.modules.profiles.verification import verification_status
import logging

logger = logging.getLogger(__name__)

landlord_input_adapter = TypeAdapter(LandlordProfileInput)

TENANT_COLUMNS = tuple(TenantProfileInput.model_fields.keys())


def to_tenant_profile(row: DBTenantProfile) -> TenantProfile:
    values = {column: getattr(row, column) for column in TENANT_COLUMNS}
    values["preferred_areas"] = row.preferred_areas or []
    values["property_types"] = row.property_types or []
    values["has_references"] = bool(row.has_references)
    return TenantProfile(
        id=row.id,
        user_id=row.user_id,
        profile_completion_percentage=row.profile_completion_percentage or 0,
        created_at=row.created_at,
        updated_at=row.updated_at or row.created_at,
        **values
    )


def _verification_of(row: DBLandlordProfile) -> LandlordVerificationStatus:
    return verification_status(
        phone_verified=bool(row.phone_verified),
        email_verified=bool(row.email_verified),
        identity_verified=bool(row.identity_verified),
        business_license_verified=bool(row.business_license_verified)
    )


def to_landlord_profile(row: DBLandlordProfile) -> LandlordProfile:
    details = landlord_input_adapter.validate_python(
        {**(row.profile_data or {}), "landlord_type": row.landlord_type}
    )
    return LandlordProfile(
        id=row.id,
        user_id=row.user_id,
        landlord_type=row.landlord_type,
        details=details,
        verification=_verification_of(row),
        profile_completion_percentage=row.profile_completion_percentage or 0,
        created_at=row.created_at,
        updated_at=row.updated_at or row.created_at
    )


class ProfileService:
    """Tenant and landlord profiles with their derived completion and trust level"""

    def __init__(self, db: Session):
        self.db = db

    # Tenant profiles

    async def get_tenant_profile(self, user_id: str) -> TenantProfile:
        return to_tenant_profile(self._get_tenant_row(user_id))

    async def upsert_tenant_profile(self, user_id: str, data: TenantProfileInput) -> TenantProfile:
        """Create or replace the tenant profile and store its completion percentage"""
        values = data.model_dump(mode="json")
        values["move_date"] = data.move_date
        completion = score_tenant(data.model_dump())

        try:
            row = self.db.query(DBTenantProfile).filter(DBTenantProfile.user_id == user_id).first()
            now = datetime.utcnow()
            if row is None:
                row = DBTenantProfile(user_id=user_id, created_at=now)
                self.db.add(row)

            for column, value in values.items():
                setattr(row, column, value)
            row.profile_completion_percentage = completion.percentage
            row.updated_at = now

            self.db.commit()
            self.db.refresh(row)

            logger.info(f"Tenant profile for user {user_id} saved at {completion.percentage}% complete")
            return to_tenant_profile(row)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save tenant profile for user {user_id}: {e}")
            raise

    async def get_tenant_completion(self, user_id: str) -> ProfileCompletion:
        row = self._find_tenant_row(user_id)
        if row is None:
            return empty_tenant_completion()
        return score_tenant(to_tenant_profile(row).model_dump())

    async def check_contact_permission(self, user_id: str) -> ContactPermission:
        """Whether the tenant has filled the fields landlords need before a contact"""
        row = self._find_tenant_row(user_id)
        if row is None:
            return ContactPermission(
                can_contact=False,
                reason="Create a tenant profile before contacting landlords",
                missing_fields=missing_contact_fields(None)
            )

        missing = missing_contact_fields(to_tenant_profile(row).model_dump())
        if missing:
            return ContactPermission(
                can_contact=False,
                reason="Complete the required profile fields before contacting landlords",
                missing_fields=missing
            )
        return ContactPermission(can_contact=True)

    # Landlord profiles

    async def get_landlord_profile(self, user_id: str) -> LandlordProfile:
        return to_landlord_profile(self._get_landlord_row(user_id))

    async def upsert_landlord_profile(self, user_id: str, details: LandlordProfileInput) -> LandlordProfile:
        """Create or replace the landlord's onboarding fields; verification flags are kept"""
        profile_data = details.model_dump(mode="json", exclude={"landlord_type"})

        try:
            row = self._find_landlord_row(user_id)
            now = datetime.utcnow()
            if row is None:
                row = DBLandlordProfile(
                    user_id=user_id,
                    phone_verified=False,
                    email_verified=False,
                    identity_verified=False,
                    business_license_verified=False,
                    created_at=now
                )
                self.db.add(row)

            row.landlord_type = details.landlord_type
            row.profile_data = profile_data
            row.profile_completion_percentage = self._landlord_percentage(row)
            row.updated_at = now

            self.db.commit()
            self.db.refresh(row)

            return to_landlord_profile(row)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save landlord profile for user {user_id}: {e}")
            raise

    async def update_verification(self, user_id: str, update: LandlordVerificationUpdate) -> LandlordVerificationStatus:
        """Record verification milestones and refresh the stored completion percentage"""
        row = self._get_landlord_row(user_id)

        try:
            for flag, value in update.model_dump(exclude_none=True).items():
                setattr(row, flag, value)
            row.profile_completion_percentage = self._landlord_percentage(row)
            row.updated_at = datetime.utcnow()

            self.db.commit()
            self.db.refresh(row)

            status = _verification_of(row)
            logger.info(f"Landlord {user_id} verification level is now {status.verification_level.value}")
            return status

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update verification for landlord {user_id}: {e}")
            raise

    async def get_verification_status(self, user_id: str) -> LandlordVerificationStatus:
        return _verification_of(self._get_landlord_row(user_id))

    async def get_landlord_completion(self, user_id: str) -> ProfileCompletion:
        row = self._get_landlord_row(user_id)
        return score_landlord(
            row.landlord_type,
            row.profile_data or {},
            phone_verified=bool(row.phone_verified),
            email_verified=bool(row.email_verified)
        )

    def _landlord_percentage(self, row: DBLandlordProfile) -> int:
        base = score_landlord(row.landlord_type, row.profile_data or {}).percentage
        return landlord_percentage(base, bool(row.phone_verified), bool(row.email_verified))

    def _find_tenant_row(self, user_id: str) -> Optional[DBTenantProfile]:
        return self.db.query(DBTenantProfile).filter(DBTenantProfile.user_id == user_id).first()

    def _get_tenant_row(self, user_id: str) -> DBTenantProfile:
        row = self._find_tenant_row(user_id)
        if row is None:
            raise NotFoundError(f"Tenant profile for user {user_id} not found")
        return row

    def _find_landlord_row(self, user_id: str) -> Optional[DBLandlordProfile]:
        return self.db.query(DBLandlordProfile).filter(DBLandlordProfile.user_id == user_id).first()

    def _get_landlord_row(self, user_id: str) -> DBLandlordProfile:
        row = self._find_landlord_row(user_id)
        if row is None:
            raise NotFoundError(f"Landlord profile for user {user_id} not found")
        return row
