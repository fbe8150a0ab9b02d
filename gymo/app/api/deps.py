# gymo/app/api/deps.py
"""
Session resolution, split into two dependencies that compose:

    get_token_payload  - signature and expiry only, no database access
    get_current_user   - the above, then load the user and require the
                         token's login_time to equal the stored last_login

Protected endpoints declare `current_user: User = Depends(get_current_user)`
and receive the resolved row directly.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from gymo.app.core.config import TokenConfig
from gymo.app.core.exceptions import InvalidTokenError, StaleTokenError
from gymo.app.db.session import get_db, storage_errors
from gymo.app.models.user import User
from gymo.app.schemas.user import TokenPayload
from gymo.app.security import jwt
from gymo.app.services.accounts import get_user_by_id

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_config(request: Request) -> TokenConfig:
    return request.app.state.token_config


async def get_token_payload(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        config: TokenConfig = Depends(get_token_config),
) -> TokenPayload:
    if credentials is None:
        raise InvalidTokenError()
    try:
        return jwt.decode_access_token(credentials.credentials, config)
    except InvalidTokenError as e:
        logger.info(f"Rejected token: {type(e).__name__}")
        raise


async def get_current_user(
        payload: TokenPayload = Depends(get_token_payload),
        db: AsyncSession = Depends(get_db),
) -> User:
    async with storage_errors(db):
        user = await get_user_by_id(db, payload.user_id)

    if user is None:
        logger.info(f"Token for missing user id={payload.user_id}")
        raise InvalidTokenError()

    # A later login rewrote last_login; this token belongs to an older epoch
    if payload.login_time != user.last_login:
        logger.warning(
            f"Stale token for uid={user.uid}: issued at {payload.login_time}, "
            f"last login {user.last_login}"
        )
        raise StaleTokenError()

    return user
