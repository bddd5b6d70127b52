from dataclasses import dataclass

from flask import request

# Set by the identity provider's gateway in front of this service
USER_ID_HEADER = 'X-User-Id'


@dataclass(frozen=True)
class Identity:
    user_id: str


def current_identity():
    """Identity of the caller of the current request, or None"""
    user_id = request.headers.get(USER_ID_HEADER, '').strip()
    if not user_id:
        return None
    return Identity(user_id=user_id)
