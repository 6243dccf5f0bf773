"""Reducer dispatch: run one handler as one transaction and report the outcome."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session

from relay.core.identity import Identity
from relay.models import Message, User
from relay.schemas.rows import MessageRow, UserRow
from relay.services.context import ReducerContext
from relay.services.errors import ReducerError
from relay.services.messages import send_message
from relay.services.presence import on_connect, on_disconnect, set_name

logger = logging.getLogger(__name__)

Reducer = Callable[..., None]

# Commands exposed to authenticated callers. Lifecycle reducers are invoked by
# the transport only.
REDUCERS: dict[str, Reducer] = {
    "set_name": set_name,
    "send_message": send_message,
}


@dataclass
class ReducerOutcome:
    """Result of one reducer call plus the rows its transaction changed."""

    reducer: str
    sender: Identity
    error: ReducerError | None = None
    users: list[UserRow] = field(default_factory=list)
    messages: list[MessageRow] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> str | None:
        return self.error.message if self.error is not None else None


# session.info key holding the rows flushed by the running reducer.
CHANGED_ROWS_KEY = "relay.changed_rows"


@event.listens_for(Session, "after_flush")
def _record_changed_rows(session: Session, flush_context: Any) -> None:
    changed = session.info.get(CHANGED_ROWS_KEY)
    if changed is None:
        return
    # new/dirty still hold the pre-flush state here.
    for obj in list(session.new) + [o for o in session.dirty if session.is_modified(o)]:
        if obj not in changed:
            changed.append(obj)


def call_reducer(
    session: Session,
    reducer: Reducer,
    sender: Identity,
    *args: Any,
    timestamp: datetime | None = None,
) -> ReducerOutcome:
    """
    Run reducer(ctx, *args) in one transaction.

    Commits on success. A ReducerError rolls back and is returned as a failed
    outcome; any other exception rolls back and propagates.
    """
    name = getattr(reducer, "__name__", repr(reducer))
    ctx = ReducerContext(
        session=session,
        sender=sender,
        timestamp=timestamp or datetime.now(UTC),
    )
    session.info[CHANGED_ROWS_KEY] = []
    try:
        reducer(ctx, *args)
        session.flush()
        changed = session.info[CHANGED_ROWS_KEY]
        outcome = ReducerOutcome(
            reducer=name,
            sender=sender,
            users=[UserRow.model_validate(r) for r in changed if isinstance(r, User)],
            messages=[MessageRow.model_validate(r) for r in changed if isinstance(r, Message)],
        )
        session.commit()
    except ReducerError as e:
        session.rollback()
        logger.info("Reducer %s rejected for %s: %s", name, sender, e.message)
        return ReducerOutcome(reducer=name, sender=sender, error=e)
    except Exception:
        session.rollback()
        raise
    finally:
        session.info.pop(CHANGED_ROWS_KEY, None)
    return outcome


def invoke(session: Session, reducer_name: str, sender: Identity, *args: Any) -> ReducerOutcome:
    """Run a command from the public surface by name. Raises KeyError for unknown names."""
    return call_reducer(session, REDUCERS[reducer_name], sender, *args)
