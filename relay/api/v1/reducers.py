"""Command surface: set_name and send_message over HTTP."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, sessionmaker

from relay.api.v1.auth import get_current_identity
from relay.core.database import get_db, get_session_factory
from relay.core.identity import Identity
from relay.schemas.reducers import ReducerResult, SendMessageRequest, SetNameRequest
from relay.services.errors import EmptyInput, UnauthorizedCaller, UnknownCaller
from relay.services.reducers import ReducerOutcome, invoke
from relay.services.replication import ReplicationHub, get_hub

router = APIRouter()

ERROR_STATUS = {
    UnknownCaller: status.HTTP_404_NOT_FOUND,
    UnauthorizedCaller: status.HTTP_403_FORBIDDEN,
    EmptyInput: 422,
}


def _to_result(outcome: ReducerOutcome) -> ReducerResult:
    if outcome.error is not None:
        raise HTTPException(
            status_code=ERROR_STATUS.get(type(outcome.error), status.HTTP_400_BAD_REQUEST),
            detail=outcome.reason,
        )
    return ReducerResult(ok=True)


@router.post("/set_name", response_model=ReducerResult)
async def post_set_name(
    body: SetNameRequest,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
    session_factory: Annotated[sessionmaker, Depends(get_session_factory)],
    hub: Annotated[ReplicationHub, Depends(get_hub)],
) -> ReducerResult:
    """Set the caller's display name. The caller must be known and authorized."""
    outcome = invoke(db, "set_name", identity, body.name)
    await hub.publish(outcome, session_factory)
    return _to_result(outcome)


@router.post("/send_message", response_model=ReducerResult)
async def post_send_message(
    body: SendMessageRequest,
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
    session_factory: Annotated[sessionmaker, Depends(get_session_factory)],
    hub: Annotated[ReplicationHub, Depends(get_hub)],
) -> ReducerResult:
    """Append a message to the feed. The caller must be known and authorized."""
    outcome = invoke(db, "send_message", identity, body.text)
    await hub.publish(outcome, session_factory)
    return _to_result(outcome)
