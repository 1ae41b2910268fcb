"""
Tests for SavedSearchService against an in-memory database
"""
import pytest
from datetime import datetime
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.db.models import SavedSearch as DBSavedSearch
from app.models.search import NumericRange, SearchCriteria
from app.models.user import SavedSearchCreate, SavedSearchUpdate
from app.modules.saved_searches.service import SavedSearchService, validate_profile_name


@pytest.fixture
def service(test_db_session):
    return SavedSearchService(test_db_session)


@pytest.fixture
def search_data():
    return SavedSearchCreate(
        profile_name="Two bedrooms near work",
        criteria=SearchCriteria(
            budget_min=10000,
            budget_max=15000,
            bedrooms=NumericRange(min=2),
            amenities=["parking", "gym"]
        )
    )


class TestProfileName:

    def test_name_is_stripped(self):
        assert validate_profile_name("  Family home  ") == "Family home"

    @pytest.mark.parametrize("name", [None, "", "ab", "x" * 101])
    def test_invalid_names_rejected(self, name):
        with pytest.raises(ValidationError):
            validate_profile_name(name)


class TestSavedSearchCrud:

    @pytest.mark.asyncio
    async def test_create_saved_search(self, service, search_data, user_id):
        saved = await service.create_saved_search(user_id, search_data)

        assert saved.user_id == user_id
        assert saved.profile_name == "Two bedrooms near work"
        assert saved.criteria.budget_max == 15000
        assert saved.criteria.bedrooms.min == 2
        assert saved.is_active is True
        assert saved.new_matches_count == 0

    def test_inverted_budget_rejected_before_persistence(self):
        with pytest.raises(PydanticValidationError):
            SavedSearchCreate(
                profile_name="Bad budget",
                criteria={"budget_min": 15000, "budget_max": 10000}
            )

    @pytest.mark.asyncio
    async def test_limit_per_user(self, service, search_data, user_id, monkeypatch):
        monkeypatch.setattr(settings, "MAX_SAVED_SEARCHES_PER_USER", 2)

        await service.create_saved_search(user_id, search_data)
        await service.create_saved_search(user_id, search_data)

        with pytest.raises(ValidationError):
            await service.create_saved_search(user_id, search_data)

        # Other users are unaffected
        await service.create_saved_search("someone-else", search_data)

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(self, service, search_data, user_id):
        await service.create_saved_search(user_id, search_data)
        await service.create_saved_search("someone-else", search_data)

        searches = await service.get_user_saved_searches(user_id)

        assert len(searches) == 1
        assert searches[0].user_id == user_id

    @pytest.mark.asyncio
    async def test_other_users_search_is_not_found(self, service, search_data, user_id):
        saved = await service.create_saved_search(user_id, search_data)

        with pytest.raises(NotFoundError):
            await service.get_saved_search("someone-else", saved.id)

    @pytest.mark.asyncio
    async def test_update_saved_search(self, service, search_data, user_id):
        saved = await service.create_saved_search(user_id, search_data)

        updated = await service.update_saved_search(user_id, saved.id, SavedSearchUpdate(
            profile_name="Cheaper",
            criteria=SearchCriteria(budget_max=9000)
        ))

        assert updated.profile_name == "Cheaper"
        assert updated.criteria.budget_max == 9000
        assert updated.criteria.amenities == []

    @pytest.mark.asyncio
    async def test_update_rejects_short_name(self, service, search_data, user_id):
        saved = await service.create_saved_search(user_id, search_data)

        with pytest.raises(ValidationError):
            await service.update_saved_search(user_id, saved.id, SavedSearchUpdate(profile_name="x"))

    @pytest.mark.asyncio
    async def test_delete_saved_search(self, service, search_data, user_id):
        saved = await service.create_saved_search(user_id, search_data)

        await service.delete_saved_search(user_id, saved.id)

        with pytest.raises(NotFoundError):
            await service.delete_saved_search(user_id, saved.id)

    @pytest.mark.asyncio
    async def test_toggle_status(self, service, search_data, user_id):
        saved = await service.create_saved_search(user_id, search_data)

        paused = await service.toggle_saved_search_status(user_id, saved.id)
        resumed = await service.toggle_saved_search_status(user_id, saved.id)

        assert paused.is_active is False
        assert resumed.is_active is True


class TestMatching:

    @pytest.mark.asyncio
    async def test_execute_returns_matches_and_resets_counter(
        self, service, search_data, user_id, make_property, test_db_session
    ):
        make_property(price_amount=12000, bedrooms=2, amenities=["parking", "pool"])
        make_property(price_amount=20000, bedrooms=3, amenities=["gym"])
        make_property(price_amount=11000, bedrooms=2, amenities=["pool", "security"])
        make_property(price_amount=12000, bedrooms=2, amenities=["gym"], status="rented")

        saved = await service.create_saved_search(user_id, search_data)
        row = test_db_session.query(DBSavedSearch).filter(DBSavedSearch.id == saved.id).first()
        row.new_matches_count = 4
        test_db_session.commit()

        matched = await service.execute_search(user_id, saved.id)

        assert [p.price_amount for p in matched] == [12000]
        refreshed = await service.get_saved_search(user_id, saved.id)
        assert refreshed.new_matches_count == 0
        assert refreshed.last_checked_at is not None

    @pytest.mark.asyncio
    async def test_refresh_counts_listings_since_last_check(
        self, service, search_data, user_id, make_property, test_db_session
    ):
        make_property(price_amount=12000, amenities=["parking"], created_at=datetime(2024, 1, 1))
        make_property(price_amount=13000, amenities=["gym"], created_at=datetime(2024, 2, 1))

        checked = await service.create_saved_search(user_id, search_data)
        fresh = await service.create_saved_search(user_id, search_data)
        paused = await service.create_saved_search(user_id, search_data)
        await service.toggle_saved_search_status(user_id, paused.id)

        row = test_db_session.query(DBSavedSearch).filter(DBSavedSearch.id == checked.id).first()
        row.last_checked_at = datetime(2024, 1, 15)
        test_db_session.commit()

        updated = service.refresh_new_match_counts()

        assert updated == 2
        assert (await service.get_saved_search(user_id, checked.id)).new_matches_count == 1
        assert (await service.get_saved_search(user_id, fresh.id)).new_matches_count == 2
        assert (await service.get_saved_search(user_id, paused.id)).new_matches_count == 0

    @pytest.mark.asyncio
    async def test_summary(self, service, search_data, user_id, make_property):
        make_property(price_amount=12000, amenities=["parking"])
        first = await service.create_saved_search(user_id, search_data)
        await service.create_saved_search(user_id, search_data)
        await service.toggle_saved_search_status(user_id, first.id)
        service.refresh_new_match_counts()

        summary = await service.get_summary(user_id)

        assert summary.total_searches == 2
        assert summary.active_searches == 1
        assert summary.total_new_matches == 1


class TestCandidateSelection:

    @pytest.mark.asyncio
    async def test_match_older_than_newest_window_is_found(
        self, service, user_id, make_property, monkeypatch
    ):
        monkeypatch.setattr(settings, "MATCH_CANDIDATE_LIMIT", 3)
        cheap = make_property(price_amount=5000)
        for _ in range(3):
            make_property(price_amount=30000)

        saved = await service.create_saved_search(user_id, SavedSearchCreate(
            profile_name="Cheap anything",
            criteria=SearchCriteria(budget_max=6000)
        ))

        matched = await service.execute_search(user_id, saved.id)

        assert [p.id for p in matched] == [cheap.id]

    def test_refresh_counts_match_outside_newest_window(
        self, service, user_id, make_property, monkeypatch, test_db_session
    ):
        monkeypatch.setattr(settings, "MATCH_CANDIDATE_LIMIT", 2)
        make_property(price_amount=5000, bedrooms=1)
        make_property(price_amount=5500, bedrooms=1)
        for _ in range(2):
            make_property(price_amount=5000, bedrooms=4)
        test_db_session.add(DBSavedSearch(
            user_id=user_id,
            profile_name="One bedroom",
            search_criteria={"budget_max": 6000, "bedrooms": {"max": 1}},
            is_active=True,
            notifications_enabled=True,
            new_matches_count=0
        ))
        test_db_session.commit()

        assert service.refresh_new_match_counts() == 1
        assert test_db_session.query(DBSavedSearch).first().new_matches_count == 2

    @pytest.mark.asyncio
    async def test_malformed_listing_is_skipped(self, service, user_id, make_property):
        valid = make_property(price_amount=5000)
        make_property(price_amount=5000, property_type="studio")

        saved = await service.create_saved_search(user_id, SavedSearchCreate(
            profile_name="Cheap anything",
            criteria=SearchCriteria(budget_max=6000)
        ))

        matched = await service.execute_search(user_id, saved.id)

        assert [p.id for p in matched] == [valid.id]

    def test_bathrooms_left_to_predicate(self, service, make_property):
        make_property(bathrooms="2,5")
        make_property(bathrooms="n/a")

        matched = service.find_matching_properties(
            SearchCriteria(bathrooms=NumericRange(min=2))
        )

        assert [p.bathrooms for p in matched] == ["2,5"]
