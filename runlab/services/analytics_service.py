"""Usage statistics derived from a user's executions and starred snippets.

Nothing here is cached or persisted: every call reads the store and
recomputes the numbers from scratch.
"""
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
import logging
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError

from runlab.errors import StorageError
from runlab.models.db import db
from runlab.models.snippet_model import Snippet, Star

logger = logging.getLogger(__name__)

NO_LANGUAGE = "N/A"
RECENT_WINDOW = timedelta(hours=24)


@dataclass
class UsageStats:
    total_executions: int = 0
    languages_count: int = 0
    languages: List[str] = field(default_factory=list)
    last_24_hours: int = 0
    favorite_language: str = NO_LANGUAGE
    language_stats: Dict[str, int] = field(default_factory=dict)
    most_starred_language: str = NO_LANGUAGE

    def to_dict(self):
        return asdict(self)


def top_language(counts):
    """Most frequent language; ties go to the lexicographically smallest tag."""
    if not counts:
        return NO_LANGUAGE
    return min(counts.items(), key=lambda item: (-item[1], item[0]))[0]


class AnalyticsService:

    def __init__(self, store):
        self.store = store

    def starred_languages(self, user_id):
        """Languages of the snippets a user starred, skipping snippets that are gone"""
        try:
            rows = (
                db.session.query(Star.snippet_id, Snippet.language)
                .outerjoin(Snippet, Star.snippet_id == Snippet.id)
                .filter(Star.user_id == user_id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Could not read stars for user {user_id}: {e}")
            raise StorageError("Could not read starred snippets") from e

        return [language for _, language in rows if language]

    def compute_stats(self, user_id, now=None):
        now = now or datetime.utcnow()
        window_start = now - RECENT_WINDOW

        executions = self.store.all_by_user(user_id)
        star_languages = self.starred_languages(user_id)

        language_stats = Counter(execution.language for execution in executions)
        last_24_hours = sum(1 for execution in executions if execution.created_at > window_start)

        stats = UsageStats(
            total_executions=len(executions),
            languages_count=len(language_stats),
            languages=sorted(language_stats),
            last_24_hours=last_24_hours,
            favorite_language=top_language(language_stats),
            language_stats=dict(language_stats),
            most_starred_language=top_language(Counter(star_languages)),
        )
        logger.info(f"📊 Stats for user {user_id}: {stats.total_executions} executions, favorite {stats.favorite_language}")
        return stats
