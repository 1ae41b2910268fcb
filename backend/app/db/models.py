from sqlalchemy import Column, Integer, String, Float, DateTime, Date, Boolean, Text, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


class Property(Base):
    """Rental listing, owned by the listings side of the product"""
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=_new_id)

    # Basic listing information
    title = Column(String(500), nullable=False)
    description = Column(Text)
    property_type = Column(String(50), nullable=False)  # apartment, house, room, office
    status = Column(String(20), nullable=False, default="active")
    price_amount = Column(Integer, nullable=False)
    currency = Column(String(3), default="HNL")
    bedrooms = Column(Integer, default=0)
    bathrooms = Column(String(10))  # Legacy imports store text ("1.5")
    area_sqm = Column(Float)

    # Location
    address = Column(String(500))
    neighborhood = Column(String(200))

    # Features
    amenities = Column(JSON)  # Array of amenity tags
    pets_allowed = Column(Boolean, default=False)

    # Owner contact
    landlord_id = Column(String(64))
    landlord_whatsapp = Column(String(30))

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    favorites = relationship("Favorite", back_populates="property", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_properties_status_created', 'status', 'created_at'),
        Index('idx_properties_price_amount', 'price_amount'),
        Index('idx_properties_property_type', 'property_type'),
    )


class SavedSearch(Base):
    """Tenant's named search criteria"""
    __tablename__ = "saved_searches"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False)

    profile_name = Column(String(100), nullable=False)
    search_criteria = Column(JSON, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    notifications_enabled = Column(Boolean, default=True, nullable=False)
    new_matches_count = Column(Integer, default=0, nullable=False)
    last_checked_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_saved_searches_user_id', 'user_id'),
        Index('idx_saved_searches_active', 'is_active', 'notifications_enabled'),
    )


class Favorite(Base):
    """Tenant's favorited properties"""
    __tablename__ = "property_favorites"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False)
    property_id = Column(String(36), ForeignKey('properties.id'), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    property = relationship("Property", back_populates="favorites")

    __table_args__ = (
        Index('idx_favorites_user_id', 'user_id'),
        # At most one favorite per (user, property)
        Index('idx_favorites_unique', 'user_id', 'property_id', unique=True),
    )


class PropertyInquiry(Base):
    """Record of a tenant contacting a landlord about a property"""
    __tablename__ = "property_inquiries"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False)
    property_id = Column(String(36), ForeignKey('properties.id'), nullable=False)
    message = Column(Text)
    channel = Column(String(20), default="whatsapp")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_inquiries_user_property', 'user_id', 'property_id'),
    )


class TenantProfile(Base):
    __tablename__ = "tenant_profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, unique=True)

    full_name = Column(String(200))
    phone = Column(String(30))
    occupation = Column(String(200))
    budget_min = Column(Integer)
    budget_max = Column(Integer)
    move_date = Column(Date)
    occupants = Column(String(50))
    preferred_areas = Column(JSON)
    property_types = Column(JSON)
    has_pets = Column(Boolean)  # NULL = not answered
    pet_details = Column(Text)
    has_references = Column(Boolean, default=False)
    message_to_landlords = Column(Text)

    profile_completion_percentage = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class LandlordProfile(Base):
    __tablename__ = "landlords"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, unique=True)

    landlord_type = Column(String(30), nullable=False)
    # Type-specific onboarding fields
    profile_data = Column(JSON, nullable=False)

    # Verification milestones
    phone_verified = Column(Boolean, default=False, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    identity_verified = Column(Boolean, default=False, nullable=False)
    business_license_verified = Column(Boolean, default=False, nullable=False)

    profile_completion_percentage = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
