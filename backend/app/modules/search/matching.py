"""
Match predicate deciding whether a listing satisfies a tenant's search criteria
"""
import math
from typing import Any, Callable, Iterable, List, Optional, Tuple
from app.core.exceptions import CoercionFailure
from app.models.property import Property
from app.models.search import NumericRange, SearchCriteria
import logging

logger = logging.getLogger(__name__)

INFINITY = float('inf')


def coerce_number(field: str, value: Any) -> float:
    """Parse a numeric listing field that may arrive as text"""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise CoercionFailure(field, value)
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip().replace(",", "."))
        except ValueError:
            raise CoercionFailure(field, value)
    if not math.isfinite(number):
        raise CoercionFailure(field, value)
    return number


def _within(value: float, lower: Optional[float], upper: Optional[float]) -> bool:
    return (lower if lower is not None else 0) <= value <= (upper if upper is not None else INFINITY)


def _within_range(value: float, bounds: Optional[NumericRange]) -> bool:
    if bounds is None:
        return True
    return _within(value, bounds.min, bounds.max)


def _price_matches(criteria: SearchCriteria, prop: Property) -> bool:
    return _within(prop.price_amount, criteria.budget_min, criteria.budget_max)


def _bedrooms_matches(criteria: SearchCriteria, prop: Property) -> bool:
    return _within_range(prop.bedrooms or 0, criteria.bedrooms)


def _bathrooms_matches(criteria: SearchCriteria, prop: Property) -> bool:
    if criteria.bathrooms is None:
        return True
    try:
        bathrooms = coerce_number("bathrooms", prop.bathrooms)
    except CoercionFailure as e:
        # A malformed record drops out of the results instead of aborting the batch
        logger.debug(f"Property {prop.id} excluded: {e}")
        return False
    return _within_range(bathrooms, criteria.bathrooms)


def _area_matches(criteria: SearchCriteria, prop: Property) -> bool:
    if criteria.area_min is None and criteria.area_max is None:
        return True
    if prop.area_sqm is None:
        return False
    return _within(prop.area_sqm, criteria.area_min, criteria.area_max)


def _amenities_matches(criteria: SearchCriteria, prop: Property) -> bool:
    # Any-of: one shared amenity is enough
    if not criteria.amenities:
        return True
    available = set(prop.amenities or [])
    return any(amenity in available for amenity in criteria.amenities)


def _property_type_matches(criteria: SearchCriteria, prop: Property) -> bool:
    if not criteria.property_types:
        return True
    return prop.property_type in criteria.property_types


def _pets_matches(criteria: SearchCriteria, prop: Property) -> bool:
    if not criteria.pets_allowed:
        return True
    return prop.pets_allowed is True


def _location_matches(criteria: SearchCriteria, prop: Property) -> bool:
    if not criteria.locations:
        return True
    neighborhood = (prop.neighborhood or "").lower()
    return any(location.lower() in neighborhood for location in criteria.locations)


MatchRule = Callable[[SearchCriteria, Property], bool]

MATCH_RULES: List[Tuple[str, MatchRule]] = [
    ("price", _price_matches),
    ("bedrooms", _bedrooms_matches),
    ("bathrooms", _bathrooms_matches),
    ("area", _area_matches),
    ("amenities", _amenities_matches),
    ("property_types", _property_type_matches),
    ("pets_allowed", _pets_matches),
    ("locations", _location_matches),
]


def matches(criteria: SearchCriteria, prop: Property) -> bool:
    """True when the property passes every rule"""
    return all(rule(criteria, prop) for _, rule in MATCH_RULES)


def unmatched_fields(criteria: SearchCriteria, prop: Property) -> List[str]:
    """Names of the rules the property fails, in evaluation order"""
    return [name for name, rule in MATCH_RULES if not rule(criteria, prop)]


def filter_matching(criteria: SearchCriteria, properties: Iterable[Property]) -> List[Property]:
    """Keep the matching properties, preserving candidate order"""
    matched = []
    for prop in properties:
        if matches(criteria, prop):
            matched.append(prop)
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Property {prop.id} rejected on {unmatched_fields(criteria, prop)}")
    return matched
