"""
Identity provider stub.

Authentication belongs to an external identity provider. This module only
resolves who is purchasing: in ``header`` mode the gateway in front of the
API forwards the authenticated user id as ``X-User-Id``; in ``static`` mode
every request is a guest.
"""

from typing import Optional
import logging

from fastapi import Header

from .config import settings
from .error_handling import APIValidationError

logger = logging.getLogger(__name__)


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> Optional[int]:
    """Return the authenticated user id, or None for a guest."""
    if settings.auth_mode == "static":
        return None

    if x_user_id is None or not x_user_id.strip():
        return None

    try:
        user_id = int(x_user_id)
    except ValueError:
        raise APIValidationError(
            "Invalid user identifier", {"X-User-Id": x_user_id}
        )

    if user_id <= 0:
        raise APIValidationError("Invalid user identifier", {"X-User-Id": x_user_id})

    return user_id
