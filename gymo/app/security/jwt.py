# gymo/app/security/jwt.py
"""
Bearer tokens: HS256 JWTs carrying the user id and the login time.

Payload:
    sub         user id (string, per RFC 7519)
    login_time  Unix seconds of the login that issued the token
    iat / exp   issuance and absolute expiry (login_time + validity window)

Verification here is pure: signature and expiry only. Comparing
login_time with the user's stored last_login is the caller's job
(see gymo.app.api.deps).
"""
from datetime import datetime, timezone

from jose import JWTError, ExpiredSignatureError, jwt
from pydantic import ValidationError

from gymo.app.core.config import TokenConfig
from gymo.app.core.exceptions import InvalidTokenError
from gymo.app.schemas.user import TokenPayload


class TokenExpiredError(InvalidTokenError):
    pass


def create_access_token(user_id: int, login_time: int, config: TokenConfig) -> str:
    issued_at = datetime.fromtimestamp(login_time, tz=timezone.utc)
    to_encode = {
        "sub": str(user_id),
        "login_time": login_time,
        "iat": issued_at,
        "exp": issued_at + config.expire_delta,
    }
    return jwt.encode(to_encode, config.secret_key, algorithm=config.algorithm)


def decode_access_token(token: str, config: TokenConfig) -> TokenPayload:
    """
    Verify signature and expiry and return the embedded identity.

    Raises:
        TokenExpiredError: exp is in the past
        InvalidTokenError: anything else wrong with the token
    """
    try:
        payload = jwt.decode(token, config.secret_key, algorithms=[config.algorithm])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    try:
        return TokenPayload(user_id=payload.get("sub"), login_time=payload.get("login_time"))
    except ValidationError:
        raise InvalidTokenError()
