from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from runlab.errors import NotFound, StorageError
from runlab.models.db import db
from runlab.models.user_model import User

logger = logging.getLogger(__name__)

DEFAULT_FREE_TIER_LANGUAGE = "javascript"
DENIED_REASON = "entitlement required for this language"


@dataclass(frozen=True)
class EntitlementDecision:
    allowed: bool
    reason: Optional[str] = None


def authorize(requested_language, entitlement, free_tier_language=DEFAULT_FREE_TIER_LANGUAGE):
    """Decide whether ``entitlement`` may execute ``requested_language``.

    ``entitlement`` is anything with an ``is_pro`` attribute, or None for a
    user without a record, who is treated as free tier.
    """
    if entitlement is not None and entitlement.is_pro:
        return EntitlementDecision(allowed=True)
    if requested_language == free_tier_language:
        return EntitlementDecision(allowed=True)
    return EntitlementDecision(allowed=False, reason=DENIED_REASON)


class EntitlementService:

    @staticmethod
    def get_entitlement(user_id):
        try:
            return User.query.filter_by(user_id=user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Entitlement lookup failed for user {user_id}: {e}")
            raise StorageError("Could not read entitlement") from e

    @staticmethod
    def sync_user(user_id, email, name):
        """Create the user on first sign-in; existing users are left untouched"""
        user = EntitlementService.get_entitlement(user_id)
        if user:
            return user

        user = User(user_id=user_id, email=email, name=name, is_pro=False)
        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Could not create user {user_id}: {e}")
            raise StorageError("Could not create user") from e

        logger.info(f"👤 User {user_id} created on free tier")
        return user

    @staticmethod
    def upgrade_to_pro(email, customer_id, order_id):
        """Mark the user owning ``email`` as Pro after a confirmed order"""
        try:
            user = User.query.filter_by(email=email).first()
        except SQLAlchemyError as e:
            logger.error(f"User lookup by email failed: {e}")
            raise StorageError("Could not read entitlement") from e
        if not user:
            raise NotFound("User not found")

        if user.is_pro:
            logger.info(f"User {user.user_id} is already Pro since {user.pro_since}")
            return user

        user.is_pro = True
        user.pro_since = datetime.utcnow()
        user.lemon_squeezy_customer_id = customer_id
        user.lemon_squeezy_order_id = order_id
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Could not upgrade user {user.user_id}: {e}")
            raise StorageError("Could not upgrade user") from e

        logger.info(f"⭐ User {user.user_id} upgraded to Pro (order {order_id})")
        return user
