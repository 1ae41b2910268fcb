"""
WhatsApp handoff: inquiry message text and click-to-chat links
"""
import re
from typing import Optional
from urllib.parse import quote
from app.core.config import settings
from app.models.profile import TenantProfile
from app.models.property import Property, PropertyType

PROPERTY_TYPE_LABELS = {
    PropertyType.APARTMENT: "Apartment",
    PropertyType.HOUSE: "House",
    PropertyType.ROOM: "Room",
    PropertyType.OFFICE: "Office",
}

MAX_LISTED_AMENITIES = 5


def format_phone(phone: str, country_code: Optional[str] = None) -> str:
    """Digits only, with the country code prefixed when missing"""
    country_code = country_code or settings.WHATSAPP_COUNTRY_CODE
    digits = re.sub(r"\D", "", phone or "")
    if not digits.startswith(country_code):
        return f"{country_code}{digits}"
    return digits


def _plural(count, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def build_inquiry_message(prop: Property, tenant: Optional[TenantProfile] = None) -> str:
    lines = [
        "Hi! I saw this property and I'm interested:",
        "",
        f"*{prop.address or prop.title}*",
        f"*{prop.currency} {prop.price_amount:,}/month*",
        PROPERTY_TYPE_LABELS.get(prop.property_type, str(prop.property_type)),
        _plural(prop.bedrooms, "bedroom", "bedrooms"),
    ]
    if prop.bathrooms is not None:
        lines.append(_plural(prop.bathrooms, "bathroom", "bathrooms"))
    if prop.area_sqm:
        lines.append(f"{prop.area_sqm:g} m²")

    if prop.amenities:
        lines.extend(["", "*Highlights:*"])
        lines.extend(f"- {amenity}" for amenity in prop.amenities[:MAX_LISTED_AMENITIES])

    if tenant is not None:
        lines.extend(["", "*About me:*"])
        if tenant.full_name:
            lines.append(tenant.full_name)
        if tenant.phone:
            lines.append(tenant.phone)
        if tenant.budget_min is not None and tenant.budget_max is not None:
            lines.append(f"Budget: {prop.currency} {tenant.budget_min:,}-{tenant.budget_max:,}")
        if tenant.move_date:
            lines.append(f"Move-in date: {tenant.move_date.isoformat()}")
        if tenant.message_to_landlords:
            lines.extend(["", tenant.message_to_landlords])

    lines.extend([
        "",
        "Could we arrange a visit?",
        "",
        f"More: {settings.PUBLIC_SITE_URL.rstrip('/')}/property/{prop.id}",
        f"Ref: {prop.id[:8].upper()}",
    ])
    return "\n".join(lines)


def build_whatsapp_link(phone: str, message: str, use_web_version: bool = False) -> str:
    base_url = "https://web.whatsapp.com/send" if use_web_version else "https://wa.me"
    formatted = format_phone(phone)
    encoded = quote(message, safe="")
    if use_web_version:
        return f"{base_url}?phone={formatted}&text={encoded}"
    return f"{base_url}/{formatted}?text={encoded}"
