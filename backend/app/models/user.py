from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from app.models.search import SearchCriteria
from app.models.property import Property


class SavedSearch(BaseModel):
    id: str
    user_id: str
    profile_name: str
    criteria: SearchCriteria
    is_active: bool = True
    notifications_enabled: bool = True
    new_matches_count: int = 0
    last_checked_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    
    class Config:
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class SavedSearchCreate(BaseModel):
    profile_name: str
    criteria: SearchCriteria
    is_active: bool = True
    notifications_enabled: bool = True


class SavedSearchUpdate(BaseModel):
    profile_name: Optional[str] = None
    criteria: Optional[SearchCriteria] = None
    is_active: Optional[bool] = None
    notifications_enabled: Optional[bool] = None


class SavedSearchSummary(BaseModel):
    total_searches: int = 0
    active_searches: int = 0
    total_new_matches: int = 0


class FavoriteProperty(BaseModel):
    id: str
    user_id: str
    property_id: str
    is_contacted: bool = False
    contacted_at: Optional[datetime] = None
    created_at: datetime
    property: Optional[Property] = None
    
    class Config:
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


class FavoriteToggleRequest(BaseModel):
    property_id: str = Field(..., min_length=1)
    
    @field_validator('property_id')
    @classmethod
    def strip_property_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('property_id must not be blank')
        return v


class FavoriteToggleResult(BaseModel):
    property_id: str
    is_favorite: bool


class FavoriteSummary(BaseModel):
    total_favorites: int = 0
    contacted_count: int = 0
    not_contacted_count: int = 0


class DashboardSummary(BaseModel):
    saved_searches: int = 0
    active_saved_searches: int = 0
    new_matches: int = 0
    total_favorites: int = 0
    contacted_favorites: int = 0
    profile_completion: int = 0
