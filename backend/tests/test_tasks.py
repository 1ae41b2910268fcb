"""
Tests for the saved search match refresh task
"""
import pytest
from unittest.mock import patch

from app.core.celery_app import celery_app
from app.db.models import SavedSearch as DBSavedSearch
from app.modules.saved_searches.tasks import refresh_saved_search_matches


class TestRefreshTask:

    def test_task_updates_counts(self, test_db_session, make_property):
        make_property(price_amount=12000)
        make_property(price_amount=30000)
        test_db_session.add(DBSavedSearch(
            user_id="tenant-1",
            profile_name="Under 15k",
            search_criteria={"budget_max": 15000},
            is_active=True,
            notifications_enabled=True,
            new_matches_count=0
        ))
        test_db_session.commit()

        result = refresh_saved_search_matches.run(test_db_session)

        assert result['searches_updated'] == 1
        assert 'refresh_time' in result
        row = test_db_session.query(DBSavedSearch).first()
        assert row.new_matches_count == 1

    def test_notifications_disabled_searches_skipped(self, test_db_session, make_property):
        make_property()
        test_db_session.add(DBSavedSearch(
            user_id="tenant-1",
            profile_name="Muted",
            search_criteria={},
            is_active=True,
            notifications_enabled=False,
            new_matches_count=0
        ))
        test_db_session.commit()

        result = refresh_saved_search_matches.run(test_db_session)

        assert result['searches_updated'] == 0

    def test_failure_is_retried(self, test_db_session):
        with patch('app.modules.saved_searches.tasks.SavedSearchService') as service_class, \
             patch.object(refresh_saved_search_matches, 'retry', side_effect=RuntimeError("retrying")) as retry:
            service_class.return_value.refresh_new_match_counts.side_effect = Exception("database gone")

            with pytest.raises(RuntimeError):
                refresh_saved_search_matches.run(test_db_session)

            retry.assert_called_once()


class TestCeleryConfig:

    def test_beat_schedule_registered(self):
        entry = celery_app.conf.beat_schedule["refresh-saved-search-matches"]
        assert entry["task"] == refresh_saved_search_matches.name


class TestDatabaseTask:

    def test_session_closed_after_run(self):
        with patch('app.modules.saved_searches.tasks.SessionLocal') as session_factory, \
             patch('app.modules.saved_searches.tasks.SavedSearchService') as service_class:
            service_class.return_value.refresh_new_match_counts.return_value = 0
            db = session_factory.return_value.__enter__.return_value

            result = refresh_saved_search_matches()

            assert result['searches_updated'] == 0
            service_class.assert_called_once_with(db)
            db.close.assert_called_once()
