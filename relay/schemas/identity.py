"""Response schema for identity issuance."""

from pydantic import BaseModel, Field


class IdentityResponse(BaseModel):
    """A freshly minted identity and the token that proves it."""

    identity: str = Field(..., description="Identity as 64 lowercase hex characters")
    token: str = Field(..., description="JWT to pass as Bearer token or ?token= on subscribe")
    token_type: str = Field(default="bearer", description="Token type")
