from datetime import datetime
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError, ValidationError
from app.db.models import PropertyInquiry as DBPropertyInquiry
from app.models.profile import ContactResponse
from app.modules.contact.whatsapp import build_inquiry_message, build_whatsapp_link
from app.modules.profiles.service import ProfileService
from app.modules.properties.repository import PropertyRepository
import logging

logger = logging.getLogger(__name__)


class ContactService:
    """Hands a tenant's inquiry off to the landlord's WhatsApp"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = PropertyRepository(db)
        self.profiles = ProfileService(db)

    async def contact_property(self, user_id: str, property_id: str, use_web_version: bool = False) -> ContactResponse:
        """Check the tenant may contact, record the inquiry and return the chat link"""
        prop = self.repository.get(property_id)
        if not prop.landlord_whatsapp:
            raise NotFoundError(f"Property {property_id} has no WhatsApp contact")

        permission = await self.profiles.check_contact_permission(user_id)
        if not permission.can_contact:
            raise ValidationError(
                f"{permission.reason}: {', '.join(permission.missing_fields)}"
            )

        tenant = await self.profiles.get_tenant_profile(user_id)
        message = build_inquiry_message(prop, tenant)

        try:
            self.db.add(DBPropertyInquiry(
                user_id=user_id,
                property_id=property_id,
                message=message,
                channel="whatsapp",
                created_at=datetime.utcnow()
            ))
            self.db.commit()

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to record inquiry for property {property_id}: {e}")
            raise

        logger.info(f"User {user_id} contacted landlord of property {property_id}")
        return ContactResponse(
            property_id=property_id,
            whatsapp_url=build_whatsapp_link(prop.landlord_whatsapp, message, use_web_version),
            message=message
        )
