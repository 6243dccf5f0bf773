"""Message ingress: the send_message reducer."""

import logging

from relay.models import Message
from relay.services.context import ReducerContext
from relay.services.validation import validate_identity, validate_message

logger = logging.getLogger(__name__)


def send_message(ctx: ReducerContext, text: str) -> None:
    """Clients invoke this reducer to send messages."""
    validate_identity(ctx)
    text = validate_message(text)
    logger.info("%s", text)
    ctx.session.add(
        Message(
            sender=ctx.sender.to_hex(),
            sent=ctx.timestamp,
            text=text,
        )
    )
