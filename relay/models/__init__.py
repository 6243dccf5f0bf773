"""SQLAlchemy ORM models."""

from relay.models.base import Base
from relay.models.message import Message
from relay.models.user import User

__all__ = ["Base", "Message", "User"]
