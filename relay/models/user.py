"""ORM model for chat participants (one row per caller identity)."""

from sqlalchemy import Boolean, Column, String

from relay.models.base import Base


class User(Base):
    """
    Participant account keyed by caller identity.

    Created on first connect (or at bootstrap for the administrator) and never
    deleted. online tracks presence; authorized gates sending messages and
    seeing the message feed.
    """

    __tablename__ = "users"

    identity = Column(String(64), primary_key=True)
    name = Column(String, nullable=True)
    online = Column(Boolean, nullable=False, default=False)
    authorized = Column(Boolean, nullable=False, default=False)
