"""Read the rows visible to the caller."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from relay.api.v1.auth import get_current_identity
from relay.core.database import get_db
from relay.core.identity import Identity
from relay.models import Message, User
from relay.schemas.rows import MessageRow, UserRow
from relay.services.visibility import visible_rows

router = APIRouter()


@router.get("/users", response_model=list[UserRow])
def list_users(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserRow]:
    """The caller's own account row (empty before the first connect)."""
    return [UserRow.model_validate(u) for u in visible_rows(db, User, identity)]


@router.get("/messages", response_model=list[MessageRow])
def list_messages(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> list[MessageRow]:
    """The whole feed for authorized callers; empty for everyone else."""
    return [MessageRow.model_validate(m) for m in visible_rows(db, Message, identity)]
