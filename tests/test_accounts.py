"""
Tests for the account workflow (register, lookup, login, modify, delete).
"""
import asyncio

import pytest
from sqlalchemy import func, select

from gymo.app.core.exceptions import ConflictError, InternalError, NotFoundError, PasswordMismatchError
from gymo.app.models import FriendRequest, User
from gymo.app.schemas.user import UserCreate, UserLogin, UserUpdate
from gymo.app.security import hashing, jwt
from gymo.app.services import accounts, contacts


async def count_users(db) -> int:
    return await db.scalar(select(func.count()).select_from(User))


@pytest.mark.asyncio
async def test_register_creates_user_with_hashed_password(db, create_user):
    user = await create_user("a@x.com", password="pw1")

    assert user.id is not None
    assert accounts.UID_MIN <= user.uid <= accounts.UID_MAX
    assert user.password != "pw1"
    assert hashing.verify_password("pw1", user.password)
    assert user.last_login == 0


@pytest.mark.asyncio
async def test_register_same_email_conflicts(db, create_user):
    await create_user("a@x.com")

    with pytest.raises(ConflictError):
        await create_user("a@x.com", username="other")

    assert await count_users(db) == 1


@pytest.mark.asyncio
async def test_concurrent_registrations_single_winner(app, db):
    async def attempt(i):
        async with app.state.session_factory() as session:
            try:
                await accounts.register(
                    session, UserCreate(username=f"u{i}", password="pw", email="race@x.com")
                )
                return "created"
            except ConflictError:
                return "conflict"

    outcomes = await asyncio.gather(*(attempt(i) for i in range(5)))

    assert outcomes.count("created") == 1
    assert outcomes.count("conflict") == 4
    assert await count_users(db) == 1


@pytest.mark.asyncio
async def test_lookup(db, create_user):
    await create_user("a@x.com", username="alice")

    user = await accounts.lookup(db, "a@x.com")
    assert user.username == "alice"

    with pytest.raises(NotFoundError):
        await accounts.lookup(db, "nobody@x.com")


@pytest.mark.asyncio
async def test_login_records_login_time_in_token(db, create_user, token_config):
    await create_user("a@x.com")

    user, token = await accounts.login(db, UserLogin(email="a@x.com", password="pw1"), token_config)

    payload = jwt.decode_access_token(token, token_config)
    assert payload.user_id == user.id
    assert payload.login_time == user.last_login
    assert user.last_login > 0

    stored = await accounts.get_user_by_id(db, user.id)
    assert stored.last_login == payload.login_time


@pytest.mark.asyncio
async def test_login_again_moves_login_time_forward(db, create_user, token_config):
    await create_user("a@x.com")
    credentials = UserLogin(email="a@x.com", password="pw1")

    _, first = await accounts.login(db, credentials, token_config)
    _, second = await accounts.login(db, credentials, token_config)

    first_time = jwt.decode_access_token(first, token_config).login_time
    second_time = jwt.decode_access_token(second, token_config).login_time
    assert second_time > first_time


@pytest.mark.asyncio
async def test_login_failures(db, create_user, token_config):
    await create_user("a@x.com")

    with pytest.raises(PasswordMismatchError):
        await accounts.login(db, UserLogin(email="a@x.com", password="wrong"), token_config)
    with pytest.raises(NotFoundError):
        await accounts.login(db, UserLogin(email="b@x.com", password="pw1"), token_config)

    # a failed attempt must not touch the revocation epoch
    user = await accounts.get_user_by_email(db, "a@x.com")
    assert user.last_login == 0


@pytest.mark.asyncio
async def test_modify_only_username(db, create_user):
    user = await create_user("a@x.com", username="alice")
    old_hash = user.password

    await accounts.modify_profile(db, user, UserUpdate(username="x"))

    stored = await accounts.get_user_by_email(db, "a@x.com")
    assert stored.username == "x"
    assert stored.email == "a@x.com"
    assert stored.password == old_hash


@pytest.mark.asyncio
async def test_modify_empty_strings_keep_values(db, create_user):
    user = await create_user("a@x.com", username="alice")
    old_hash = user.password

    await accounts.modify_profile(db, user, UserUpdate(username="", email="", password=""))

    stored = await accounts.get_user_by_email(db, "a@x.com")
    assert stored.username == "alice"
    assert stored.password == old_hash


@pytest.mark.asyncio
async def test_modify_password_is_rehashed(db, create_user, token_config):
    user = await create_user("a@x.com", password="pw1")

    await accounts.modify_profile(db, user, UserUpdate(password="pw2"))

    assert user.password != "pw2"
    assert hashing.verify_password("pw2", user.password)
    await accounts.login(db, UserLogin(email="a@x.com", password="pw2"), token_config)


@pytest.mark.asyncio
async def test_delete_self_removes_user_and_pending_requests(db, create_user):
    alice = await create_user("a@x.com")
    bob = await create_user("b@x.com", username="bob")
    await contacts.submit_friend_request(db, alice, bob.uid)

    await accounts.delete_self(db, alice)

    assert await accounts.get_user_by_email(db, "a@x.com") is None
    assert await db.scalar(select(func.count()).select_from(FriendRequest)) == 0
    assert await count_users(db) == 1


@pytest.mark.asyncio
async def test_modify_email_onto_taken_address_is_storage_error(db, create_user):
    await create_user("a@x.com")
    bob = await create_user("b@x.com", username="bob")

    with pytest.raises(InternalError):
        await accounts.modify_profile(db, bob, UserUpdate(email="a@x.com"))
