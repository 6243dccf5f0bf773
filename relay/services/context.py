"""Per-call context handed to every reducer."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from relay.core.identity import Identity


@dataclass(frozen=True)
class ReducerContext:
    """
    Ambient values for one reducer invocation.

    session is scoped to the reducer's transaction; timestamp is fixed when the
    transaction starts and is the value stored on any row the reducer inserts.
    """

    session: Session
    sender: Identity
    timestamp: datetime
