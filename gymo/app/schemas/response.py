# gymo/app/schemas/response.py
"""
Response envelope shared by every endpoint.

Errors use the same shape, built by the exception handlers in
gymo.app.core.exceptions.
"""
from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    status: Literal["ok", "error"] = "ok"
    message: str = ""
    data: Optional[T] = None
