"""ORM model for the public message feed."""

from sqlalchemy import Column, DateTime, Integer, String, Text

from relay.models.base import Base


class Message(Base):
    """
    One sent message. Append-only: rows are never updated or deleted.

    sender references users.identity without a hard foreign key.
    """

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender = Column(String(64), nullable=False, index=True)
    sent = Column(DateTime(timezone=True), nullable=False)
    text = Column(Text, nullable=False)
