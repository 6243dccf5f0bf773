"""Shared fixtures for the unittest suites."""

from sqlalchemy.orm import Session, sessionmaker

from relay.core.database import create_session_factory
from relay.models import Base


def session_factory() -> sessionmaker[Session]:
    """Fresh in-memory database with the schema created."""
    factory = create_session_factory("sqlite://")
    Base.metadata.create_all(factory.kw["bind"])
    return factory
