"""
Tests for usage statistics
"""

from datetime import datetime, timedelta

import pytest

from runlab.errors import StorageError
from runlab.models.db import db
from runlab.models.snippet_model import Star
from runlab.services.analytics_service import NO_LANGUAGE, AnalyticsService, top_language


@pytest.fixture
def analytics(app):
    return app.extensions['analytics_service']


class TestTopLanguage:
    """Test the favourite-language selection rule"""

    def test_empty(self):
        """Should return N/A without data"""
        assert top_language({}) == NO_LANGUAGE

    def test_highest_count_wins(self):
        """Should pick the most frequent language"""
        assert top_language({"go": 1, "python": 3, "rust": 2}) == "python"

    def test_ties_are_lexicographic(self):
        """Should break ties by the smallest tag, whatever the order"""
        assert top_language({"python": 2, "javascript": 2}) == "javascript"
        assert top_language({"javascript": 2, "python": 2}) == "javascript"


class TestComputeStats:
    """Test AnalyticsService.compute_stats()"""

    def test_no_history(self, analytics):
        """Should return zeros and N/A for a user without data"""
        stats = analytics.compute_stats("nobody")

        assert stats.total_executions == 0
        assert stats.languages_count == 0
        assert stats.languages == []
        assert stats.language_stats == {}
        assert stats.last_24_hours == 0
        assert stats.favorite_language == NO_LANGUAGE
        assert stats.most_starred_language == NO_LANGUAGE

    def test_recent_mixed_languages(self, analytics, add_execution):
        """Should count two python runs and one javascript run"""
        now = datetime.utcnow()
        add_execution("u1", "python", created_at=now - timedelta(minutes=50))
        add_execution("u1", "javascript", created_at=now - timedelta(minutes=30))
        add_execution("u1", "python", created_at=now - timedelta(minutes=10))

        stats = analytics.compute_stats("u1", now=now)

        assert stats.total_executions == 3
        assert stats.language_stats == {"python": 2, "javascript": 1}
        assert stats.favorite_language == "python"
        assert stats.last_24_hours == 3
        assert stats.languages_count == 2
        assert sorted(stats.languages) == ["javascript", "python"]

    def test_last_24_hours_boundary(self, analytics, add_execution):
        """Should count 24h minus 1ms but not exactly 24h"""
        now = datetime(2026, 3, 1, 12, 0, 0)
        add_execution("u1", "javascript", created_at=now - timedelta(hours=24) + timedelta(milliseconds=1))
        add_execution("u1", "javascript", created_at=now - timedelta(hours=24))
        add_execution("u1", "javascript", created_at=now - timedelta(days=3))

        stats = analytics.compute_stats("u1", now=now)

        assert stats.total_executions == 3
        assert stats.last_24_hours == 1

    def test_failed_runs_count(self, analytics, add_execution):
        """Should count failed executions like any other"""
        add_execution("u1", "rust", output=None, error="compile failed")

        assert analytics.compute_stats("u1").language_stats == {"rust": 1}

    def test_most_starred_language(self, analytics, star_snippet, add_execution):
        """Should use the languages of starred snippets"""
        add_execution("u1", "javascript")
        star_snippet("u1", "python")
        star_snippet("u1", "python")
        star_snippet("u1", "go")
        star_snippet("u2", "rust")

        stats = analytics.compute_stats("u1")

        assert stats.most_starred_language == "python"
        assert stats.favorite_language == "javascript"

    def test_missing_snippet_is_skipped(self, analytics, star_snippet):
        """Should ignore stars whose snippet no longer exists"""
        star_snippet("u1", "go")
        db.session.add(Star(user_id="u1", snippet_id=9999))
        db.session.add(Star(user_id="u1", snippet_id=9998))
        db.session.commit()

        assert analytics.compute_stats("u1").most_starred_language == "go"

    def test_idempotent(self, analytics, add_execution, star_snippet):
        """Should give identical results when nothing changed"""
        now = datetime.utcnow()
        add_execution("u1", "python", created_at=now)
        add_execution("u1", "go", created_at=now)
        star_snippet("u1", "rust")

        assert analytics.compute_stats("u1", now=now) == analytics.compute_stats("u1", now=now)

    def test_storage_failure_propagates(self):
        """Should raise StorageError instead of reporting empty stats"""
        class BrokenStore:
            def all_by_user(self, user_id):
                raise StorageError("Could not read executions")

        with pytest.raises(StorageError):
            AnalyticsService(BrokenStore()).compute_stats("u1")

    def test_star_read_failure_propagates(self, analytics):
        """Should wrap database errors from the star lookup"""
        Star.__table__.drop(db.engine)

        with pytest.raises(StorageError):
            analytics.starred_languages("u1")
