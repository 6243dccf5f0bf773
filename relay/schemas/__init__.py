"""Pydantic request/response schemas."""

from relay.schemas.health import HealthResponse
from relay.schemas.identity import IdentityResponse
from relay.schemas.reducers import (
    ReducerCall,
    ReducerResult,
    SendMessageRequest,
    SetNameRequest,
)
from relay.schemas.rows import MessageRow, UserRow

__all__ = [
    "HealthResponse",
    "IdentityResponse",
    "MessageRow",
    "ReducerCall",
    "ReducerResult",
    "SendMessageRequest",
    "SetNameRequest",
    "UserRow",
]
