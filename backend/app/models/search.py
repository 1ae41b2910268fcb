from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from app.models.property import PropertyType


class NumericRange(BaseModel):
    """Inclusive range; a missing bound is unbounded"""
    min: Optional[int] = Field(None, ge=0)
    max: Optional[int] = Field(None, ge=0)
    
    @model_validator(mode='after')
    def validate_bounds(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError('range max must be greater than or equal to min')
        return self


class SearchCriteria(BaseModel):
    # Budget in minor currency units
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)
    
    bedrooms: Optional[NumericRange] = None
    bathrooms: Optional[NumericRange] = None
    area_min: Optional[float] = Field(None, ge=0)  # m²
    area_max: Optional[float] = Field(None, ge=0)
    
    property_types: List[PropertyType] = []
    locations: List[str] = []  # Neighborhood names
    amenities: List[str] = []  # Any-of
    
    pets_allowed: Optional[bool] = None
    furnished: Optional[bool] = None
    
    @model_validator(mode='after')
    def validate_budget_range(self):
        if (self.budget_min is not None and self.budget_max is not None and
            self.budget_min > self.budget_max):
            raise ValueError('budget_max must be greater than or equal to budget_min')
        return self
    
    @model_validator(mode='after')
    def validate_area_range(self):
        if (self.area_min is not None and self.area_max is not None and
            self.area_min > self.area_max):
            raise ValueError('area_max must be greater than or equal to area_min')
        return self
