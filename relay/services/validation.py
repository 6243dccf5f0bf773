"""Validation shared by the reducers."""

from sqlalchemy.orm import Session

from relay.core.identity import Identity
from relay.models import User
from relay.services.context import ReducerContext
from relay.services.errors import EmptyInput, UnauthorizedCaller, UnknownCaller


def find_user(session: Session, identity: Identity, for_update: bool = False) -> User | None:
    """Primary-key lookup; for_update locks the row until the transaction ends."""
    return session.get(User, identity.to_hex(), with_for_update=for_update)


def validate_identity(ctx: ReducerContext) -> User:
    """Return the caller's row if it exists and is authorized."""
    user = find_user(ctx.session, ctx.sender, for_update=True)
    if user is None:
        raise UnknownCaller("Validation failed: Unknown user")
    if not user.authorized:
        raise UnauthorizedCaller("Unauthorized user attempted to perform an action")
    return user


def validate_name(name: str) -> str:
    """Takes a name and checks if it's acceptable as a user's name."""
    if not name:
        raise EmptyInput("Names must not be empty")
    return name


def validate_message(text: str) -> str:
    """Takes a message's text and checks if it's acceptable to send."""
    if not text:
        raise EmptyInput("Messages must not be empty")
    return text
