from __future__ import annotations

from .api import get_optional_user_id, require_user_id
from .repo import resolve_session_user_id

__all__ = [
    "get_optional_user_id",
    "require_user_id",
    "resolve_session_user_id",
]
