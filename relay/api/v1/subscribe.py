"""WebSocket transport: connect/disconnect lifecycle, reducer calls and row replication."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from relay.core.database import get_session_factory
from relay.core.identity import IdentityError
from relay.core.security import identity_from_token
from relay.schemas.reducers import ReducerCall, SendMessageRequest, SetNameRequest
from relay.services.presence import on_connect, on_disconnect
from relay.services.reducers import call_reducer, invoke
from relay.services.replication import ReplicationHub, get_hub, initial_subscription

logger = logging.getLogger(__name__)

router = APIRouter()

# Reducer name -> (argument schema, attribute passed to the reducer)
REDUCER_ARGS = {
    "set_name": (SetNameRequest, "name"),
    "send_message": (SendMessageRequest, "text"),
}


@router.websocket("")
async def subscribe(
    websocket: WebSocket,
    token: str,
    session_factory: Annotated[sessionmaker, Depends(get_session_factory)],
    hub: Annotated[ReplicationHub, Depends(get_hub)],
) -> None:
    """
    Connect as the token's identity and stay subscribed.

    Inbound frames: {"reducer": "set_name" | "send_message", "args": {...}}.
    Outbound frames: initial_subscription, reducer_result, transaction_update, error.
    """
    try:
        identity = identity_from_token(token)
    except (jwt.PyJWTError, IdentityError) as e:
        logger.info("Rejected subscription: %s", e)
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION,
            reason="Invalid or expired token",
        )
        return

    await websocket.accept()
    try:
        with session_factory() as session:
            connected = call_reducer(session, on_connect, identity)
        # Reaches other connections only; this one reads its rows below.
        await hub.publish(connected, session_factory)
        # Registered before the snapshot is read, so no later commit is missed.
        await hub.connect(identity, websocket, hold=True)
        with session_factory() as session:
            await websocket.send_json(initial_subscription(session, identity))
        await hub.ready(websocket)

        while True:
            frame = await websocket.receive_text()
            try:
                call = ReducerCall.model_validate_json(frame)
                schema, arg = REDUCER_ARGS[call.reducer]
                value = getattr(schema.model_validate(call.args), arg)
            except ValidationError as e:
                await websocket.send_json({"type": "error", "reason": str(e)})
                continue

            with session_factory() as session:
                outcome = invoke(session, call.reducer, identity, value)
            await websocket.send_json(
                {
                    "type": "reducer_result",
                    "reducer": call.reducer,
                    "ok": outcome.ok,
                    "reason": outcome.reason,
                }
            )
            await hub.publish(outcome, session_factory)
    except WebSocketDisconnect:
        pass
    finally:
        # No await before the presence write: cancellation of the closing task
        # cannot interrupt it.
        with session_factory() as session:
            disconnected = call_reducer(session, on_disconnect, identity)
        await hub.disconnect(identity, websocket)
        await hub.publish(disconnected, session_factory)
