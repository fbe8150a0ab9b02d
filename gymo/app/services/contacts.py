# gymo/app/services/contacts.py
"""
Friend-request workflow.

A request is checked against four rules, cheapest first, and only written
when all of them pass:
    1. target is not the requester
    2. target exists
    3. target is not already a contact
    4. no request from requester to target is pending

Accepting or rejecting a request (and so creating Contact rows) is not
implemented. Notifying the target is not implemented either.
"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gymo.app.core.exceptions import (
    AlreadyContactError,
    DuplicateRequestError,
    SelfRequestError,
    TargetNotFoundError,
)
from gymo.app.db.session import storage_errors
from gymo.app.models import Contact, FriendRequest, User
from gymo.app.services.accounts import get_user_by_uid

logger = logging.getLogger(__name__)


async def submit_friend_request(db: AsyncSession, requester: User, target_uid: int) -> FriendRequest:
    requester_uid = requester.uid
    if target_uid == requester_uid:
        logger.info(f"uid={requester_uid} tried to befriend self")
        raise SelfRequestError()

    async with storage_errors(db):
        target = await get_user_by_uid(db, target_uid)
        if target is None:
            logger.info(f"uid={requester_uid} requested unknown uid={target_uid}")
            raise TargetNotFoundError()

        result = await db.execute(
            select(Contact).where(
                Contact.user_uid == requester_uid,
                Contact.friend_uid == target.uid,
            )
        )
        if result.scalars().first() is not None:
            logger.info(f"uid={requester_uid} already has uid={target.uid} as contact")
            raise AlreadyContactError()

        result = await db.execute(
            select(FriendRequest).where(
                FriendRequest.from_user_uid == requester_uid,
                FriendRequest.to_user_uid == target.uid,
            )
        )
        if result.scalars().first() is not None:
            logger.info(f"uid={requester_uid} repeated request to uid={target.uid}")
            raise DuplicateRequestError(target.uid)

        friend_request = FriendRequest(from_user_uid=requester_uid, to_user_uid=target.uid)
        db.add(friend_request)
        try:
            await db.commit()
        except IntegrityError:
            # a concurrent identical request committed first; rollback
            # expires ORM rows, so only plain values from here on
            await db.rollback()
            logger.info(f"Concurrent duplicate request uid={requester_uid} -> uid={target_uid}")
            raise DuplicateRequestError(target_uid)
        await db.refresh(friend_request)

    # TODO: notify the target user once a notification channel exists
    logger.info(f"Friend request uid={requester_uid} -> uid={target_uid}")
    return friend_request


async def list_incoming_requests(db: AsyncSession, user: User) -> List[FriendRequest]:
    async with storage_errors(db):
        result = await db.execute(
            select(FriendRequest)
            .where(FriendRequest.to_user_uid == user.uid)
            .order_by(FriendRequest.id)
        )
        return list(result.scalars().all())
