"""
Profile completion scoring for tenant and landlord profiles
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from app.models.profile import LandlordType, ProfileCompletion

logger = logging.getLogger(__name__)


def has_value(value: Any) -> bool:
    """Scalars count when not None and not a blank string"""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def has_items(value: Any) -> bool:
    """Lists count only when non-empty"""
    return value is not None and len(value) > 0


def is_answered(value: Any) -> bool:
    """Booleans count once answered; False is an answer"""
    return value is not None


@dataclass(frozen=True)
class FieldRule:
    """One weighted field of a completion table"""
    name: str
    weight: int
    is_present: Callable[[Any], bool] = has_value
    next_step: Optional[str] = None


TENANT_FIELDS: Sequence[FieldRule] = (
    FieldRule("full_name", 15, next_step="Add your full name"),
    FieldRule("phone", 15, next_step="Add your phone number"),
    FieldRule("occupation", 10, next_step="Tell landlords your occupation"),
    FieldRule("budget_min", 10, next_step="Set your minimum budget"),
    FieldRule("budget_max", 10, next_step="Set your maximum budget"),
    FieldRule("move_date", 10, next_step="Choose your move-in date"),
    FieldRule("occupants", 10, next_step="Say how many people will live there"),
    FieldRule("preferred_areas", 10, has_items, "Pick your preferred areas"),
    FieldRule("property_types", 5, has_items, "Choose the property types you want"),
    FieldRule("has_pets", 5, is_answered, "Tell landlords whether you have pets"),
)

# Order in which missing tenant fields are suggested
TENANT_STEP_PRIORITY = ("budget_min", "budget_max", "move_date", "preferred_areas", "full_name", "phone")

INDIVIDUAL_OWNER_FIELDS: Sequence[FieldRule] = (
    FieldRule("full_name", 25, next_step="Add your full name"),
    FieldRule("phone", 25, next_step="Add your phone number"),
    FieldRule("whatsapp_number", 20, next_step="Add your WhatsApp number"),
    FieldRule("property_count_range", 15, next_step="Say how many properties you rent out"),
    FieldRule("property_location", 15, next_step="Say where your properties are"),
)

REAL_ESTATE_AGENT_FIELDS: Sequence[FieldRule] = (
    FieldRule("full_name", 15, next_step="Add your full name"),
    FieldRule("phone", 15, next_step="Add your phone number"),
    FieldRule("whatsapp_number", 15, next_step="Add your WhatsApp number"),
    FieldRule("years_experience", 10, next_step="Add your years of experience"),
    FieldRule("specializations", 10, has_items, "List your specializations"),
    FieldRule("coverage_areas", 15, has_items, "List the areas you cover"),
    FieldRule("properties_in_management", 10, next_step="Say how many properties you manage"),
    FieldRule("professional_bio", 10, next_step="Write a short professional bio"),
)

PROPERTY_COMPANY_FIELDS: Sequence[FieldRule] = (
    FieldRule("company_name", 15, next_step="Add your company name"),
    FieldRule("company_rtn", 15, next_step="Add your company tax number (RTN)"),
    FieldRule("main_phone", 10, next_step="Add a main phone number"),
    FieldRule("whatsapp_business", 10, next_step="Add your WhatsApp Business number"),
    FieldRule("office_address", 10, next_step="Add your office address"),
    FieldRule("operation_zones", 15, has_items, "List the zones you operate in"),
    FieldRule("portfolio_size", 10, next_step="Say how large your portfolio is"),
    FieldRule("portfolio_types", 10, has_items, "List the property types in your portfolio"),
    FieldRule("company_description", 5, next_step="Describe your company"),
)

LANDLORD_FIELDS: Dict[LandlordType, Sequence[FieldRule]] = {
    LandlordType.INDIVIDUAL_OWNER: INDIVIDUAL_OWNER_FIELDS,
    LandlordType.REAL_ESTATE_AGENT: REAL_ESTATE_AGENT_FIELDS,
    LandlordType.PROPERTY_COMPANY: PROPERTY_COMPANY_FIELDS,
}

MAX_NEXT_STEPS = 3

# Landlord stored percentage: profile fields scaled to 70, each verification worth 15
LANDLORD_PROFILE_SHARE = 0.7
EMAIL_VERIFICATION_POINTS = 15
PHONE_VERIFICATION_POINTS = 15


def score(profile: Mapping[str, Any], rules: Sequence[FieldRule]) -> ProfileCompletion:
    """Sum the weights of present fields, clamped to 100"""
    accumulated = 0
    missing: List[str] = []
    completed: List[str] = []

    for rule in rules:
        if rule.is_present(profile.get(rule.name)):
            accumulated += rule.weight
            completed.append(rule.name)
        else:
            missing.append(rule.name)

    return ProfileCompletion(
        percentage=min(100, accumulated),
        missing_fields=missing,
        completed_fields=completed
    )


def _steps_for(fields: Sequence[str], rules: Sequence[FieldRule]) -> List[str]:
    by_name = {rule.name: rule for rule in rules}
    return [by_name[name].next_step or f"Complete {name}" for name in fields]


def score_tenant(profile: Mapping[str, Any]) -> ProfileCompletion:
    completion = score(profile, TENANT_FIELDS)
    priority_missing = [f for f in TENANT_STEP_PRIORITY if f in completion.missing_fields]
    completion.next_steps = _steps_for(priority_missing[:MAX_NEXT_STEPS], TENANT_FIELDS)
    return completion


def empty_tenant_completion() -> ProfileCompletion:
    """Completion status for a tenant who has not created a profile yet"""
    return score_tenant({})


def score_landlord(
    landlord_type: LandlordType,
    profile: Mapping[str, Any],
    phone_verified: bool = False,
    email_verified: bool = False,
) -> ProfileCompletion:
    """Score a landlord's type-specific fields; suggestions favour the heaviest gaps"""
    rules = LANDLORD_FIELDS.get(landlord_type)
    if rules is None:
        logger.warning(f"No completion table for landlord type {landlord_type}")
        return ProfileCompletion()

    completion = score(profile, rules)

    weights = {rule.name: rule.weight for rule in rules}
    heaviest = sorted(completion.missing_fields, key=lambda f: weights[f], reverse=True)
    steps = _steps_for(heaviest[:MAX_NEXT_STEPS], rules)
    if not phone_verified:
        steps.append("Verify your phone number")
    if not email_verified:
        steps.append("Verify your email address")
    completion.next_steps = steps
    return completion


def landlord_percentage(base_percentage: int, phone_verified: bool, email_verified: bool) -> int:
    """Blend the field score with the verification milestones"""
    blended = base_percentage * LANDLORD_PROFILE_SHARE
    if email_verified:
        blended += EMAIL_VERIFICATION_POINTS
    if phone_verified:
        blended += PHONE_VERIFICATION_POINTS
    return min(100, round(blended))


def missing_contact_fields(profile: Optional[Mapping[str, Any]]) -> List[str]:
    """Required tenant fields still missing before a landlord can be contacted"""
    required = ("full_name", "phone", "budget_min", "budget_max")
    if profile is None:
        return list(required)
    return [field for field in required if not has_value(profile.get(field))]
