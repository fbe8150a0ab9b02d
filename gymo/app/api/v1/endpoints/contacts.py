# gymo/app/api/v1/endpoints/contacts.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymo.app.api import deps
from gymo.app.db.session import get_db
from gymo.app.models.user import User
from gymo.app.schemas.contact import FriendRequestCreate, FriendRequestOut
from gymo.app.schemas.response import Envelope
from gymo.app.services import contacts

router = APIRouter()


@router.post("/request", response_model=Envelope[FriendRequestOut])
async def make_friend(
        request_in: FriendRequestCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    friend_request = await contacts.submit_friend_request(db, current_user, request_in.uid)
    return Envelope(data=FriendRequestOut.model_validate(friend_request))


@router.get("/requests", response_model=Envelope[List[FriendRequestOut]])
async def read_incoming_requests(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    pending = await contacts.list_incoming_requests(db, current_user)
    return Envelope(data=[FriendRequestOut.model_validate(r) for r in pending])
