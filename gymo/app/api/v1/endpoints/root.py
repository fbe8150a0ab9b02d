# gymo/app/api/v1/endpoints/root.py
from fastapi import APIRouter, Request

from gymo.app.schemas.response import Envelope

router = APIRouter()


@router.get("/", response_model=Envelope[dict])
async def root(request: Request):
    return Envelope(message=f"Welcome to {request.app.title} API", data={})
