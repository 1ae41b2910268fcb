from typing import List, Optional
from datetime import datetime
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Query, Session
from sqlalchemy import desc, func
from app.core.exceptions import NotFoundError
from app.db.models import Property as DBProperty
from app.models.property import Property, PropertyPage, PropertyStatus
from app.models.search import SearchCriteria
import logging

logger = logging.getLogger(__name__)


def to_property(row: DBProperty) -> Property:
    """Convert a listing row into the read model used by the matching core"""
    return Property(
        id=row.id,
        title=row.title,
        description=row.description,
        property_type=row.property_type,
        status=row.status or PropertyStatus.ACTIVE,
        price_amount=row.price_amount,
        currency=row.currency or "HNL",
        bedrooms=row.bedrooms or 0,
        bathrooms=row.bathrooms,
        area_sqm=row.area_sqm,
        neighborhood=row.neighborhood,
        address=row.address,
        amenities=row.amenities or [],
        pets_allowed=bool(row.pets_allowed),
        landlord_id=row.landlord_id,
        landlord_whatsapp=row.landlord_whatsapp,
        created_at=row.created_at
    )


def apply_criteria_filters(query: Query, criteria: SearchCriteria) -> Query:
    """
    Narrow a listing query by the criteria bounds that SQL can check exactly.

    Bathrooms, amenities and locations stay with the match predicate, which
    remains the final authority on every candidate.
    """
    if criteria.budget_min is not None:
        query = query.filter(DBProperty.price_amount >= criteria.budget_min)
    if criteria.budget_max is not None:
        query = query.filter(DBProperty.price_amount <= criteria.budget_max)

    # Missing bedroom counts are read as 0
    bedrooms = func.coalesce(DBProperty.bedrooms, 0)
    if criteria.bedrooms is not None and criteria.bedrooms.min is not None:
        query = query.filter(bedrooms >= criteria.bedrooms.min)
    if criteria.bedrooms is not None and criteria.bedrooms.max is not None:
        query = query.filter(bedrooms <= criteria.bedrooms.max)

    if criteria.area_min is not None:
        query = query.filter(DBProperty.area_sqm >= criteria.area_min)
    if criteria.area_max is not None:
        query = query.filter(DBProperty.area_sqm <= criteria.area_max)

    if criteria.property_types:
        query = query.filter(DBProperty.property_type.in_([t.value for t in criteria.property_types]))
    if criteria.pets_allowed:
        query = query.filter(DBProperty.pets_allowed.is_(True))

    return query


def to_properties(rows: List[DBProperty]) -> List[Property]:
    """Convert rows one at a time, skipping any that fail validation"""
    properties = []
    for row in rows:
        try:
            properties.append(to_property(row))
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed listing {row.id}: {e.error_count()} invalid field(s)")
    return properties


class PropertyRepository:
    """Read access to listings; the candidate source for saved-search matching"""
    
    def __init__(self, db: Session):
        self.db = db
    
    def list_active(self, limit: int = 100, offset: int = 0, created_after: Optional[datetime] = None,
                    criteria: Optional[SearchCriteria] = None) -> PropertyPage:
        """Active listings, newest first, optionally pre-filtered by search criteria"""
        query = self.db.query(DBProperty).filter(DBProperty.status == PropertyStatus.ACTIVE.value)
        if created_after is not None:
            query = query.filter(DBProperty.created_at > created_after)
        if criteria is not None:
            query = apply_criteria_filters(query, criteria)
        
        total = query.with_entities(func.count(DBProperty.id)).scalar() or 0
        rows = query.order_by(desc(DBProperty.created_at)).offset(offset).limit(limit).all()
        
        return PropertyPage(properties=to_properties(rows), total=total)
    
    def get(self, property_id: str) -> Property:
        row = self.get_row(property_id)
        return to_property(row)
    
    def get_row(self, property_id: str) -> DBProperty:
        row = self.db.query(DBProperty).filter(DBProperty.id == property_id).first()
        if not row:
            raise NotFoundError(f"Property {property_id} not found")
        return row
    
