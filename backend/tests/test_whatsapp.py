import pytest
from datetime import date, datetime
from urllib.parse import unquote

from app.core.config import settings
from app.models.profile import TenantProfile
from app.models.property import Property, PropertyType
from app.modules.contact.whatsapp import build_inquiry_message, build_whatsapp_link, format_phone


@pytest.fixture
def listing():
    return Property(
        id="abcd1234-0000-0000-0000-000000000000",
        title="Casa en Lomas",
        property_type=PropertyType.HOUSE,
        price_amount=18500,
        bedrooms=3,
        bathrooms="2",
        area_sqm=140.0,
        address="Lomas del Mayab, Tegucigalpa",
        amenities=["parking", "garden", "security", "pool", "gym", "laundry"],
        created_at=datetime(2024, 1, 1)
    )


@pytest.fixture
def tenant():
    return TenantProfile(
        id="t-1",
        user_id="u-1",
        full_name="Ana Martínez",
        phone="9999-8888",
        budget_min=15000,
        budget_max=20000,
        move_date=date(2024, 6, 1),
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1)
    )


class TestFormatPhone:

    def test_local_number_gets_country_code(self):
        assert format_phone("9999-8888") == "50499998888"

    def test_existing_country_code_kept(self):
        assert format_phone("+504 9999 8888") == "50499998888"

    def test_explicit_country_code(self):
        assert format_phone("(555) 123-4567", country_code="1") == "15551234567"


class TestInquiryMessage:

    def test_message_describes_listing(self, listing):
        message = build_inquiry_message(listing)

        assert "*Lomas del Mayab, Tegucigalpa*" in message
        assert "*HNL 18,500/month*" in message
        assert "3 bedrooms" in message
        assert "140 m²" in message
        assert "About me" not in message

    def test_amenities_are_capped(self, listing):
        message = build_inquiry_message(listing)

        assert "- gym" in message
        assert "- laundry" not in message

    def test_tenant_details_included(self, listing, tenant):
        message = build_inquiry_message(listing, tenant)

        assert "Ana Martínez" in message
        assert "Budget: HNL 15,000-20,000" in message
        assert "Move-in date: 2024-06-01" in message

    def test_footer_links_back_to_listing(self, listing):
        lines = build_inquiry_message(listing).splitlines()

        assert lines[-2] == f"More: {settings.PUBLIC_SITE_URL.rstrip('/')}/property/{listing.id}"
        assert lines[-1] == "Ref: ABCD1234"


class TestWhatsAppLink:

    def test_mobile_link(self):
        link = build_whatsapp_link("9999-8888", "Hola & bienvenidos")

        assert link.startswith("https://wa.me/50499998888?text=")
        assert "&" not in link.split("?text=", 1)[1]
        assert unquote(link.split("?text=", 1)[1]) == "Hola & bienvenidos"

    def test_web_link(self):
        link = build_whatsapp_link("9999-8888", "Hi\nthere", use_web_version=True)

        assert link == "https://web.whatsapp.com/send?phone=50499998888&text=Hi%0Athere"
