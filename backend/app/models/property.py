from pydantic import BaseModel, Field
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    ROOM = "room"
    OFFICE = "office"


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    RENTED = "rented"
    INACTIVE = "inactive"


class Property(BaseModel):
    """Listing record as handed to the matching core (never mutated by it)"""
    id: str
    title: str
    description: Optional[str] = None
    property_type: PropertyType
    status: PropertyStatus = PropertyStatus.ACTIVE
    price_amount: int
    currency: str = "HNL"
    bedrooms: int = 0
    # Some listing sources send bathrooms as text ("1.5", "2")
    bathrooms: Union[int, float, str, None] = None
    area_sqm: Optional[float] = None
    neighborhood: Optional[str] = None
    address: Optional[str] = None
    amenities: List[str] = []
    pets_allowed: bool = False
    landlord_id: Optional[str] = None
    landlord_whatsapp: Optional[str] = None
    created_at: datetime
    
    class Config:
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class PropertyPage(BaseModel):
    """Result envelope returned by the listings repository"""
    properties: List[Property] = []
    total: int = 0
