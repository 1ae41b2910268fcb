from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Union, Literal, Annotated
from datetime import date, datetime
from enum import Enum
from app.models.property import PropertyType


class LandlordType(str, Enum):
    INDIVIDUAL_OWNER = "individual_owner"
    REAL_ESTATE_AGENT = "real_estate_agent"
    PROPERTY_COMPANY = "property_company"


class VerificationLevel(str, Enum):
    BASIC = "basic"
    VERIFIED = "verified"
    PREMIUM = "premium"


class TenantProfileInput(BaseModel):
    """Tenant profile fields; every field may be left blank while onboarding"""
    full_name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    occupation: Optional[str] = None
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)
    move_date: Optional[date] = None
    occupants: Optional[str] = None
    preferred_areas: List[str] = []
    property_types: List[PropertyType] = []
    # None means "not answered"; False is a real answer
    has_pets: Optional[bool] = None
    pet_details: Optional[str] = None
    has_references: bool = False
    message_to_landlords: Optional[str] = Field(None, max_length=1000)
    
    @model_validator(mode='after')
    def validate_budget_range(self):
        if (self.budget_min is not None and self.budget_max is not None and
            self.budget_min > self.budget_max):
            raise ValueError('budget_max must be greater than or equal to budget_min')
        return self


class TenantProfile(TenantProfileInput):
    id: str
    user_id: str
    profile_completion_percentage: int = 0
    created_at: datetime
    updated_at: datetime


class IndividualOwnerProfile(BaseModel):
    landlord_type: Literal["individual_owner"] = "individual_owner"
    full_name: Optional[str] = None
    phone: Optional[str] = None
    whatsapp_number: Optional[str] = None
    property_count_range: Optional[str] = None
    property_location: Optional[str] = None


class RealEstateAgentProfile(BaseModel):
    landlord_type: Literal["real_estate_agent"] = "real_estate_agent"
    full_name: Optional[str] = None
    phone: Optional[str] = None
    whatsapp_number: Optional[str] = None
    company_name: Optional[str] = None
    years_experience: Optional[str] = None
    specializations: List[str] = []
    coverage_areas: List[str] = []
    properties_in_management: Optional[str] = None
    professional_bio: Optional[str] = None


class PropertyCompanyProfile(BaseModel):
    landlord_type: Literal["property_company"] = "property_company"
    company_name: Optional[str] = None
    company_rtn: Optional[str] = None
    main_phone: Optional[str] = None
    whatsapp_business: Optional[str] = None
    office_address: Optional[str] = None
    operation_zones: List[str] = []
    portfolio_size: Optional[str] = None
    portfolio_types: List[str] = []
    company_description: Optional[str] = None


LandlordProfileInput = Annotated[
    Union[IndividualOwnerProfile, RealEstateAgentProfile, PropertyCompanyProfile],
    Field(discriminator="landlord_type"),
]


class LandlordVerificationStatus(BaseModel):
    phone_verified: bool = False
    email_verified: bool = False
    identity_verified: bool = False
    business_license_verified: bool = False
    verification_level: VerificationLevel = VerificationLevel.BASIC


class LandlordVerificationUpdate(BaseModel):
    phone_verified: Optional[bool] = None
    email_verified: Optional[bool] = None
    identity_verified: Optional[bool] = None
    business_license_verified: Optional[bool] = None


class LandlordProfile(BaseModel):
    id: str
    user_id: str
    landlord_type: LandlordType
    details: LandlordProfileInput
    verification: LandlordVerificationStatus
    profile_completion_percentage: int = 0
    created_at: datetime
    updated_at: datetime


class ProfileCompletion(BaseModel):
    percentage: int = Field(0, ge=0, le=100)
    missing_fields: List[str] = []
    completed_fields: List[str] = []
    next_steps: List[str] = []


class ContactPermission(BaseModel):
    can_contact: bool
    reason: Optional[str] = None
    missing_fields: List[str] = []


class ContactRequest(BaseModel):
    use_web_version: bool = False


class ContactResponse(BaseModel):
    property_id: str
    whatsapp_url: str
    message: str
