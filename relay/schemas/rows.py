"""Row schemas replicated to observers."""

from datetime import datetime

from pydantic import BaseModel


class UserRow(BaseModel):
    """A User row as sent to its owner."""

    identity: str
    name: str | None = None
    online: bool
    authorized: bool

    class Config:
        from_attributes = True


class MessageRow(BaseModel):
    """A Message row as sent to authorized observers."""

    id: int
    sender: str
    sent: datetime
    text: str

    class Config:
        from_attributes = True
