"""Identity and presence: bootstrap, connect/disconnect lifecycle, set_name."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from relay.core.config import get_settings
from relay.core.identity import Identity, IdentityError
from relay.models import User
from relay.services.context import ReducerContext
from relay.services.errors import BootstrapError
from relay.services.validation import find_user, validate_identity, validate_name

if TYPE_CHECKING:
    from relay.core.config import Settings

logger = logging.getLogger(__name__)


def bootstrap(session: Session, settings: "Settings") -> User:
    """
    Create the administrative user, authorized and online.

    Runs once when the module is first published. Raises BootstrapError if
    ADMIN_IDENTITY is malformed or the row already exists; nothing is committed
    in either case.
    """
    try:
        identity = Identity.from_hex(settings.ADMIN_IDENTITY)
    except IdentityError as e:
        raise BootstrapError(f"ADMIN_IDENTITY is invalid: {e.message}", cause=e) from e

    if find_user(session, identity) is not None:
        session.rollback()
        raise BootstrapError(f"Module already initialized: user {identity} exists")

    admin = User(
        identity=identity.to_hex(),
        name=None,
        online=True,
        authorized=True,
    )
    session.add(admin)
    session.commit()
    logger.info("Bootstrap created administrative user %s", identity)
    return admin


def _authorized_on_first_connect(identity: Identity) -> bool:
    return identity.to_hex() in get_settings().AUTO_AUTHORIZED_IDENTITIES


def _insert_on_first_connect(ctx: ReducerContext) -> User:
    user = User(
        identity=ctx.sender.to_hex(),
        name=None,
        online=True,
        authorized=_authorized_on_first_connect(ctx.sender),
    )
    try:
        with ctx.session.begin_nested():
            ctx.session.add(user)
    except IntegrityError:
        # A concurrent first connect inserted the row after our lookup.
        logger.info("Concurrent first connect for %s; updating existing row", ctx.sender)
        user = find_user(ctx.session, ctx.sender, for_update=True)
        user.online = True
    return user


def on_connect(ctx: ReducerContext) -> None:
    """Mark the caller online, creating an unauthorized row on first connect."""
    user = find_user(ctx.session, ctx.sender, for_update=True)
    if user is not None:
        # Returning user: only presence changes.
        user.online = True
    else:
        user = _insert_on_first_connect(ctx)

    if not user.authorized:
        logger.warning("Unauthorized user connected: %s", ctx.sender)


def on_disconnect(ctx: ReducerContext) -> None:
    """Mark the caller offline. Never creates a row."""
    user = find_user(ctx.session, ctx.sender, for_update=True)
    if user is None:
        # Transport should never disconnect a caller that did not connect.
        logger.warning("Disconnect event for unknown user with identity %s", ctx.sender)
        return
    user.online = False


def set_name(ctx: ReducerContext, name: str) -> None:
    """Clients invoke this reducer to set their user names."""
    user = validate_identity(ctx)
    user.name = validate_name(name)
