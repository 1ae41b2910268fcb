"""
Tests for the listings repository
"""
import pytest

from app.core.exceptions import NotFoundError
from app.models.property import PropertyType
from app.models.search import NumericRange, SearchCriteria
from app.modules.properties.repository import PropertyRepository


@pytest.fixture
def repository(test_db_session):
    return PropertyRepository(test_db_session)


class TestListActive:

    def test_malformed_row_is_skipped(self, repository, make_property):
        valid = make_property()
        make_property(property_type="studio")

        page = repository.list_active()

        assert [p.id for p in page.properties] == [valid.id]
        assert page.total == 2

    def test_criteria_filters_applied_before_limit(self, repository, make_property):
        wanted = make_property(price_amount=8000, bedrooms=None, pets_allowed=True, property_type="house")
        make_property(price_amount=8000, pets_allowed=False, property_type="house")
        make_property(price_amount=8000, pets_allowed=True, property_type="apartment")
        make_property(price_amount=9000, pets_allowed=True, property_type="house", area_sqm=None)
        make_property(price_amount=20000, pets_allowed=True, property_type="house")

        criteria = SearchCriteria(
            budget_max=10000,
            bedrooms=NumericRange(max=0),
            area_min=50,
            property_types=[PropertyType.HOUSE],
            pets_allowed=True
        )
        page = repository.list_active(limit=1, criteria=criteria)

        assert page.total == 1
        assert [p.id for p in page.properties] == [wanted.id]

    def test_get_missing_raises(self, repository):
        with pytest.raises(NotFoundError):
            repository.get("missing")
