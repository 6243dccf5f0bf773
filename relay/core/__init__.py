"""Core app configuration, identities and database."""

from relay.core.config import get_settings, settings
from relay.core.database import get_db, get_session_factory
from relay.core.identity import Identity, IdentityError

__all__ = [
    "Identity",
    "IdentityError",
    "get_db",
    "get_session_factory",
    "get_settings",
    "settings",
]
