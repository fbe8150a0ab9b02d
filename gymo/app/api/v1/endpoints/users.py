# gymo/app/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gymo.app.api import deps
from gymo.app.core.config import TokenConfig
from gymo.app.db.session import get_db
from gymo.app.models.user import User
from gymo.app.schemas.response import Envelope
from gymo.app.schemas.user import LoginData, UserCreate, UserLogin, UserPublic, UserUpdate
from gymo.app.services import accounts

router = APIRouter()


# ---------- public ----------

@router.get("/user", response_model=Envelope[UserPublic])
async def get_user(
        email: str = Query(..., min_length=1),
        db: AsyncSession = Depends(get_db),
):
    user = await accounts.lookup(db, email)
    return Envelope(data=UserPublic.model_validate(user))


@router.post("/register", response_model=Envelope[UserPublic])
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await accounts.register(db, user_in)
    return Envelope(data=UserPublic.model_validate(user))


@router.post("/login", response_model=Envelope[LoginData])
async def login(
        credentials: UserLogin,
        db: AsyncSession = Depends(get_db),
        config: TokenConfig = Depends(deps.get_token_config),
):
    user, token = await accounts.login(db, credentials, config)
    profile = UserPublic.model_validate(user).model_dump()
    return Envelope(data=LoginData(token=token, **profile))


# ---------- bearer token required ----------

@router.post("/user", response_model=Envelope[UserPublic])
async def read_user_self(current_user: User = Depends(deps.get_current_user)):
    return Envelope(data=UserPublic.model_validate(current_user))


@router.patch("/user", response_model=Envelope[UserPublic])
async def modify_user(
        changes: UserUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    user = await accounts.modify_profile(db, current_user, changes)
    return Envelope(data=UserPublic.model_validate(user))


@router.delete("/user", response_model=Envelope[dict])
async def delete_user(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    await accounts.delete_self(db, current_user)
    return Envelope(message="user deleted", data={})
