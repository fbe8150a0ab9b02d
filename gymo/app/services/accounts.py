# gymo/app/services/accounts.py
"""
Account workflow: register, lookup, login, modify, delete.

Each function takes the request's AsyncSession, commits its own writes
and raises a ServiceError subclass on the first failed step.
"""
import logging
import secrets
import time
from typing import Optional, Tuple

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gymo.app.core.config import TokenConfig
from gymo.app.core.exceptions import ConflictError, InputError, NotFoundError, PasswordMismatchError
from gymo.app.db.session import storage_errors
from gymo.app.models import Contact, FriendRequest, User
from gymo.app.schemas.user import UserCreate, UserLogin, UserUpdate
from gymo.app.security import hashing, jwt

logger = logging.getLogger(__name__)

# Public UIDs are drawn from the 9-digit range
UID_MIN = 100_000_000
UID_MAX = 999_999_999


def current_timestamp() -> int:
    return int(time.time())


def _check_email(email: str) -> None:
    local, _, domain = email.partition("@")
    if not local or not domain or " " in email:
        raise InputError(f"invalid email: {email}")


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalars().first()


async def get_user_by_uid(db: AsyncSession, uid: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.uid == uid))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def _allocate_uid(db: AsyncSession) -> int:
    while True:
        uid = UID_MIN + secrets.randbelow(UID_MAX - UID_MIN + 1)
        if await get_user_by_uid(db, uid) is None:
            return uid


async def register(db: AsyncSession, user_in: UserCreate) -> User:
    """
    Find-or-create by email.

    The unique index on users.email settles concurrent registrations:
    whoever commits second gets an IntegrityError, reported as a conflict.
    """
    _check_email(user_in.email)

    async with storage_errors(db):
        if await get_user_by_email(db, user_in.email) is not None:
            logger.info(f"Registration refused, email taken: {user_in.email}")
            raise ConflictError()

        new_user = User(
            uid=await _allocate_uid(db),
            username=user_in.username,
            email=user_in.email,
            password=hashing.get_password_hash(user_in.password),
            description=user_in.description,
            gender=user_in.gender,
            last_login=0,
        )
        db.add(new_user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if await get_user_by_email(db, user_in.email) is None:
                raise
            logger.info(f"Registration lost race for email: {user_in.email}")
            raise ConflictError()
        await db.refresh(new_user)

    logger.info(f"Registered user uid={new_user.uid}")
    return new_user


async def lookup(db: AsyncSession, email: str) -> User:
    async with storage_errors(db):
        user = await get_user_by_email(db, email)
    if user is None:
        raise NotFoundError()
    return user


async def login(db: AsyncSession, credentials: UserLogin, config: TokenConfig) -> Tuple[User, str]:
    """
    Verify the password, issue a token and record the login time.

    The token only becomes usable once last_login is committed, so the
    commit happens before the token is returned. login_time is forced to
    move forward even for two logins in the same second, which guarantees
    the previous token is revoked.
    """
    async with storage_errors(db):
        user = await get_user_by_email(db, credentials.email)
    if user is None:
        raise NotFoundError()

    try:
        hashing.check_password_hash(credentials.password, user.password)
    except PasswordMismatchError:
        logger.info(f"Failed login for {credentials.email}")
        raise

    login_time = max(current_timestamp(), (user.last_login or 0) + 1)
    token = jwt.create_access_token(user.id, login_time, config)

    async with storage_errors(db):
        user.last_login = login_time
        db.add(user)
        await db.commit()

    logger.info(f"User uid={user.uid} logged in")
    return user, token


async def modify_profile(db: AsyncSession, user: User, changes: UserUpdate) -> User:
    """
    Partial update: None and "" both leave the stored value alone.

    Email uniqueness is not re-checked here; a collision surfaces from the
    unique index as an InternalError.
    """
    if changes.email:
        _check_email(changes.email)

    if changes.username:
        user.username = changes.username
    if changes.email:
        user.email = changes.email
    if changes.password:
        user.password = hashing.get_password_hash(changes.password)
    if changes.description:
        user.description = changes.description
    if changes.gender is not None:
        user.gender = changes.gender

    async with storage_errors(db):
        db.add(user)
        await db.commit()

    logger.info(f"User uid={user.uid} updated profile")
    return user


async def delete_self(db: AsyncSession, user: User) -> None:
    """Hard delete keyed by email, with the user's pending requests and contacts."""
    async with storage_errors(db):
        await db.execute(
            delete(FriendRequest).where(
                or_(FriendRequest.from_user_uid == user.uid, FriendRequest.to_user_uid == user.uid)
            )
        )
        await db.execute(
            delete(Contact).where(or_(Contact.user_uid == user.uid, Contact.friend_uid == user.uid))
        )
        await db.execute(delete(User).where(User.email == user.email))
        await db.commit()

    logger.info(f"User uid={user.uid} deleted")
