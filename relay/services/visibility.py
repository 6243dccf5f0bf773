"""
Row visibility: which User and Message rows each observer may receive.

Each filter maps an observer identity to a SELECT over one table. Filters are
registered once, never write, and are evaluated whenever rows are read for or
pushed to a connected caller.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, exists, select
from sqlalchemy.orm import Session

from relay.core.identity import Identity
from relay.models import Base, Message, User


@dataclass(frozen=True)
class VisibilityFilter:
    """A named row filter for one model."""

    name: str
    model: type[Base]
    build: Callable[[str], Select]

    def query(self, observer: Identity) -> Select:
        return self.build(observer.to_hex())


def _account_filter(observer: str) -> Select:
    # A client can only see their own account.
    return select(User).where(User.identity == observer)


def _message_filter(observer: str) -> Select:
    # Authorized observers see every message, whoever sent it; others see none.
    observer_authorized = exists().where(
        User.identity == observer,
        User.authorized.is_(True),
    )
    return select(Message).where(observer_authorized).order_by(Message.id)


FILTERS: dict[type[Base], VisibilityFilter] = {}


def register_filter(visibility_filter: VisibilityFilter) -> VisibilityFilter:
    """Register a filter; a model has at most one."""
    if visibility_filter.model in FILTERS:
        raise ValueError(f"A filter is already registered for {visibility_filter.model.__name__}")
    FILTERS[visibility_filter.model] = visibility_filter
    return visibility_filter


ACCOUNT_FILTER = register_filter(VisibilityFilter("account_filter", User, _account_filter))
MESSAGE_FILTER = register_filter(VisibilityFilter("message_filter", Message, _message_filter))


def get_filter(model: type[Base]) -> VisibilityFilter:
    """Return the filter registered for model. Raises KeyError if none."""
    return FILTERS[model]


def _primary_key(model: type[Base]) -> Any:
    return model.__mapper__.primary_key[0]


def visible_rows(
    session: Session,
    model: type[Base],
    observer: Identity,
    keys: Iterable[Any] | None = None,
) -> list[Any]:
    """
    Rows of model the observer may see.

    keys narrows the result to those primary keys (e.g. the rows one
    transaction changed); an empty keys returns nothing without querying.
    """
    stmt = get_filter(model).query(observer)
    if keys is not None:
        keys = list(keys)
        if not keys:
            return []
        stmt = stmt.where(_primary_key(model).in_(keys))
    return list(session.scalars(stmt).all())

