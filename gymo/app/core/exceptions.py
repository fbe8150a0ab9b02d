# gymo/app/core/exceptions.py
"""
Service errors and the FastAPI handlers that render them.

Every failure leaves the API in the same envelope as a success:
    {"status": "error", "message": "...", "data": null}

Usage:
    raise SelfRequestError()            # inside a workflow
    setup_exception_handlers(app)       # in the application factory
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ==================== 400 ====================

class InputError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "malformed request"


# ==================== 401 ====================

class AuthError(ServiceError):
    """
    Authentication failure.

    Subclasses exist only so the server can log them apart; the client
    always sees one of two generic messages.
    """
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "could not validate credentials"


class InvalidTokenError(AuthError):
    """Bad signature, malformed payload or expired token."""


class StaleTokenError(AuthError):
    """Token predates the user's most recent login."""


class PasswordMismatchError(AuthError):
    default_message = "password not correct"


# ==================== 409 ====================

class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "user already exists"


# ==================== 422 ====================

class BusinessRuleError(ServiceError):
    status_code = 422
    default_message = "request violates a business rule"


class NotFoundError(BusinessRuleError):
    default_message = "user not found"


class SelfRequestError(BusinessRuleError):
    default_message = "cannot make friend with self"


class TargetNotFoundError(BusinessRuleError):
    default_message = "target user not exist"


class AlreadyContactError(BusinessRuleError):
    default_message = "target user is already friend"


class DuplicateRequestError(BusinessRuleError):
    def __init__(self, target_uid: int):
        self.target_uid = target_uid
        super().__init__(f"already sent a request to user {target_uid}")


# ==================== 500 ====================

class InternalError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal error"


# ==================== Handlers ====================

def error_body(message: str) -> dict:
    return {"status": "error", "message": message, "data": None}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    headers = {}
    if isinstance(exc, AuthError):
        headers["WWW-Authenticate"] = "Bearer"
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/query binding failures are the client's to fix: always 400."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        problems.append(f"{field}: {error['msg']}" if field else error["msg"])

    logger.info("Rejected malformed %s %s: %s", request.method, request.url.path, problems)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("; ".join(problems) or "malformed request"),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unmapped still leaves in the envelope, without internals."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(InternalError.default_message),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
