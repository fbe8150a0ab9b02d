# gymo/app/api/v1/endpoints/token.py
from fastapi import APIRouter, Depends

from gymo.app.api import deps
from gymo.app.schemas.response import Envelope
from gymo.app.schemas.user import TokenPayload

router = APIRouter()


# Signature/expiry check only: cheap, stateless, does not see revocation
@router.get("/check", response_model=Envelope[TokenPayload])
async def check_token(payload: TokenPayload = Depends(deps.get_token_payload)):
    return Envelope(data=payload)
