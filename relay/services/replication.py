"""Push committed row changes to connected observers through their visibility filters."""

import asyncio
import logging
from typing import Any

from fastapi import WebSocket
from sqlalchemy.orm import Session, sessionmaker

from relay.core.identity import Identity
from relay.models import Message, User
from relay.schemas.rows import MessageRow, UserRow
from relay.services.reducers import ReducerOutcome
from relay.services.visibility import visible_rows

logger = logging.getLogger(__name__)


def _dump_rows(users: list[Any], messages: list[Any]) -> dict[str, Any]:
    return {
        "users": [UserRow.model_validate(u).model_dump(mode="json") for u in users],
        "messages": [MessageRow.model_validate(m).model_dump(mode="json") for m in messages],
    }


def initial_subscription(session: Session, observer: Identity) -> dict[str, Any]:
    """Every row currently visible to observer."""
    return {
        "type": "initial_subscription",
        **_dump_rows(
            visible_rows(session, User, observer),
            visible_rows(session, Message, observer),
        ),
    }


def transaction_update(
    session: Session, outcome: ReducerOutcome, observer: Identity
) -> dict[str, Any] | None:
    """The part of a committed transaction visible to observer, or None if nothing is."""
    users = visible_rows(session, User, observer, keys=[u.identity for u in outcome.users])
    messages = visible_rows(session, Message, observer, keys=[m.id for m in outcome.messages])
    if not users and not messages:
        return None
    return {
        "type": "transaction_update",
        "reducer": outcome.reducer,
        "caller": outcome.sender.to_hex(),
        **_dump_rows(users, messages),
    }


class ReplicationHub:
    """
    Tracks open WebSocket connections per identity.

    A connection registered with hold=True queues its updates until ready() is
    called, so updates committed while its initial subscription is being read
    and sent are delivered after it, in commit order. Such an update may repeat
    a row already in the initial subscription; clients key rows by primary key.
    """

    def __init__(self) -> None:
        self._connections: dict[Identity, list[WebSocket]] = {}
        self._held: dict[WebSocket, list[dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, identity: Identity, websocket: WebSocket, hold: bool = False) -> None:
        """Register an accepted websocket under its caller identity."""

        async with self._lock:
            if hold:
                self._held[websocket] = []
            self._connections.setdefault(identity, []).append(websocket)

    async def ready(self, websocket: WebSocket) -> None:
        """Deliver updates queued for a held connection, then send directly."""

        queue = self._held.get(websocket)
        while queue:
            await websocket.send_json(queue.pop(0))
        # Emptiness check and removal run without a suspension point in between.
        self._held.pop(websocket, None)

    async def disconnect(self, identity: Identity, websocket: WebSocket) -> None:
        """Remove a websocket connection if it still exists."""

        async with self._lock:
            self._held.pop(websocket, None)
            if identity not in self._connections:
                return
            if websocket in self._connections[identity]:
                self._connections[identity].remove(websocket)
            if not self._connections[identity]:
                del self._connections[identity]

    async def publish(
        self, outcome: ReducerOutcome, session_factory: sessionmaker[Session]
    ) -> None:
        """Send each connected observer the rows of outcome it may see."""

        if not outcome.ok or not (outcome.users or outcome.messages):
            return

        async with self._lock:
            targets = {identity: list(conns) for identity, conns in self._connections.items()}

        stale: list[tuple[Identity, WebSocket]] = []
        with session_factory() as session:
            for observer, connections in targets.items():
                payload = transaction_update(session, outcome, observer)
                if payload is None:
                    continue
                for connection in connections:
                    queue = self._held.get(connection)
                    if queue is not None:
                        queue.append(payload)
                        continue
                    try:
                        await connection.send_json(payload)
                    except Exception:
                        logger.warning("Dropping stale connection for %s", observer)
                        stale.append((observer, connection))

        for observer, websocket in stale:
            await self.disconnect(observer, websocket)


hub = ReplicationHub()


def get_hub() -> ReplicationHub:
    """Dependency returning the process-wide hub."""
    return hub
