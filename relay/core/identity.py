"""Caller identity: an opaque 32-byte value exchanged as lowercase hex."""

import secrets
from dataclasses import dataclass

IDENTITY_BYTES = 32
IDENTITY_HEX_LEN = IDENTITY_BYTES * 2


class IdentityError(ValueError):
    """Raised when a string cannot be parsed as an identity."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class Identity:
    """Unique caller identifier. Stored and compared as its hex form."""

    raw: bytes

    @classmethod
    def from_hex(cls, value: str) -> "Identity":
        s = (value or "").strip()
        if len(s) != IDENTITY_HEX_LEN:
            raise IdentityError(
                f"Identity must be {IDENTITY_HEX_LEN} hex characters, got {len(s)}"
            )
        try:
            return cls(bytes.fromhex(s))
        except ValueError as e:
            raise IdentityError(f"Invalid hex string: {s!r}") from e

    @classmethod
    def generate(cls) -> "Identity":
        return cls(secrets.token_bytes(IDENTITY_BYTES))

    def to_hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.to_hex()
