import base64
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError

from runlab.errors import EntitlementDenied, InputError, InvalidCursor, StorageError, Unauthenticated
from runlab.models.db import db
from runlab.models.execution_model import CodeExecution
from runlab.services.entitlement_service import DEFAULT_FREE_TIER_LANGUAGE, EntitlementService, authorize

logger = logging.getLogger(__name__)


@dataclass
class ExecutionPage:
    items: List[CodeExecution]
    next_cursor: Optional[str]
    is_done: bool


def encode_cursor(execution):
    raw = f"{execution.created_at.isoformat()}|{execution.id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor):
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        created_at, execution_id = raw.rsplit("|", 1)
        return datetime.fromisoformat(created_at), int(execution_id)
    except ValueError as e:
        raise InvalidCursor(f"Invalid cursor: {cursor}") from e


class ExecutionStore:
    """Append-only store of execution attempts, keyed by user."""

    def __init__(self, free_tier_language=DEFAULT_FREE_TIER_LANGUAGE, default_page_size=10, max_page_size=100):
        self.free_tier_language = free_tier_language
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    @classmethod
    def from_config(cls, config):
        return cls(
            free_tier_language=config['FREE_TIER_LANGUAGE'],
            default_page_size=config['DEFAULT_PAGE_SIZE'],
            max_page_size=config['MAX_PAGE_SIZE'],
        )

    def append(self, identity, language, code, output=None, error=None):
        """Insert one finished execution for the calling user and return its id.

        Entitlement is checked again here; callers are not trusted to have
        done it.
        """
        if identity is None:
            raise Unauthenticated()

        decision = authorize(language, EntitlementService.get_entitlement(identity.user_id), self.free_tier_language)
        if not decision.allowed:
            logger.warning(f"🚫 Refusing to store {language} execution for user {identity.user_id}")
            raise EntitlementDenied(decision.reason)

        if output is None and error is None:
            raise InputError("An execution needs an output or an error")

        execution = CodeExecution(
            user_id=identity.user_id,
            language=language,
            code=code,
            output=output,
            error=error,
            created_at=datetime.utcnow(),
        )
        try:
            db.session.add(execution)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Could not store execution for user {identity.user_id}: {e}")
            raise StorageError("Could not store execution") from e

        return execution.id

    def list_by_user(self, user_id, cursor=None, page_size=None):
        """Return one newest-first page of a user's executions"""
        if page_size is None:
            page_size = self.default_page_size
        page_size = max(1, min(page_size, self.max_page_size))

        query = CodeExecution.query.filter_by(user_id=user_id)
        if cursor:
            created_at, execution_id = decode_cursor(cursor)
            query = query.filter(or_(
                CodeExecution.created_at < created_at,
                and_(CodeExecution.created_at == created_at, CodeExecution.id < execution_id),
            ))

        try:
            rows = query.order_by(CodeExecution.created_at.desc(), CodeExecution.id.desc()).limit(page_size + 1).all()
        except SQLAlchemyError as e:
            logger.error(f"Could not list executions for user {user_id}: {e}")
            raise StorageError("Could not read executions") from e

        items = rows[:page_size]
        is_done = len(rows) <= page_size
        next_cursor = None if is_done else encode_cursor(items[-1])
        return ExecutionPage(items=items, next_cursor=next_cursor, is_done=is_done)

    def all_by_user(self, user_id):
        try:
            return CodeExecution.query.filter_by(user_id=user_id).order_by(CodeExecution.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Could not read executions for user {user_id}: {e}")
            raise StorageError("Could not read executions") from e
