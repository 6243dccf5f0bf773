"""Identity issuance for clients connecting for the first time."""

from fastapi import APIRouter, status

from relay.core.identity import Identity
from relay.core.security import create_access_token
from relay.schemas.identity import IdentityResponse

router = APIRouter()


@router.post("", response_model=IdentityResponse, status_code=status.HTTP_201_CREATED)
def create_identity() -> IdentityResponse:
    """
    Mint a new random identity and a token proving it.
    No User row exists until the client subscribes (connects).
    """
    identity = Identity.generate()
    return IdentityResponse(identity=identity.to_hex(), token=create_access_token(identity))
