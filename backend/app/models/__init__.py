# Pydantic models for API contracts

from .property import Property, PropertyType, PropertyStatus, PropertyPage
from .search import NumericRange, SearchCriteria
from .user import (
    SavedSearch, SavedSearchCreate, SavedSearchUpdate, SavedSearchSummary,
    FavoriteProperty, FavoriteToggleRequest, FavoriteToggleResult, FavoriteSummary,
    DashboardSummary
)
from .profile import (
    # Enums
    LandlordType, VerificationLevel,
    
    # Tenant
    TenantProfileInput, TenantProfile,
    
    # Landlord
    IndividualOwnerProfile, RealEstateAgentProfile, PropertyCompanyProfile,
    LandlordProfileInput, LandlordProfile, LandlordVerificationStatus,
    LandlordVerificationUpdate,
    
    # Derived
    ProfileCompletion, ContactPermission, ContactRequest, ContactResponse
)

__all__ = [
    # Property models
    "Property", "PropertyType", "PropertyStatus", "PropertyPage",
    
    # Search models
    "NumericRange", "SearchCriteria",
    
    # User models
    "SavedSearch", "SavedSearchCreate", "SavedSearchUpdate", "SavedSearchSummary",
    "FavoriteProperty", "FavoriteToggleRequest", "FavoriteToggleResult", "FavoriteSummary",
    "DashboardSummary",
    
    # Profile models
    "LandlordType", "VerificationLevel", "TenantProfileInput", "TenantProfile",
    "IndividualOwnerProfile", "RealEstateAgentProfile", "PropertyCompanyProfile",
    "LandlordProfileInput", "LandlordProfile", "LandlordVerificationStatus",
    "LandlordVerificationUpdate", "ProfileCompletion", "ContactPermission",
    "ContactRequest", "ContactResponse"
]
