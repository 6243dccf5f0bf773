"""Request/response schemas for reducer invocation."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class SetNameRequest(BaseModel):
    """Body for set_name. Emptiness is checked by the reducer, not here."""

    name: str = Field(..., description="New display name")


class SendMessageRequest(BaseModel):
    """Body for send_message. Emptiness is checked by the reducer, not here."""

    text: str = Field(..., description="Message body")


class ReducerCall(BaseModel):
    """Inbound WebSocket frame invoking a reducer."""

    reducer: Literal["set_name", "send_message"]
    args: dict[str, Any] = Field(default_factory=dict)


class ReducerResult(BaseModel):
    """Result<(), string> of one reducer call."""

    ok: bool
    reason: str | None = None
