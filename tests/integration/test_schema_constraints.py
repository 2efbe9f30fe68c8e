"""
Database-level guarantees: indexes, cascades, deferred self-reference, triggers
"""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import delete, func, text
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.domain.entities import AuthSession, Bookmark, Post, RefreshToken, User


def _token(session_id, clock, value: bytes, **overrides) -> RefreshToken:
    fields = dict(
        session_id=session_id,
        token_hash=value * 32,
        issued_at=clock.now(),
        expires_at=clock.now() + timedelta(hours=1),
    )
    fields.update(overrides)
    return RefreshToken(**fields)


async def _session_id(uow, user_id):
    async with uow:
        session = await uow.auth_sessions.create(AuthSession(user_id=user_id))
        await uow.commit()
        return session.id


@pytest.mark.asyncio
async def test_second_current_token_violates_partial_index(uow, user_id, clock):
    session_id = await _session_id(uow, user_id)

    async with uow:
        await uow.refresh_tokens.create(_token(session_id, clock, b"\x01"))
        with pytest.raises(IntegrityError):
            await uow.refresh_tokens.create(_token(session_id, clock, b"\x02"))


@pytest.mark.asyncio
async def test_non_current_tokens_do_not_count_against_partial_index(
    uow, user_id, clock
):
    session_id = await _session_id(uow, user_id)

    async with uow:
        await uow.refresh_tokens.create(
            _token(session_id, clock, b"\x01", revoked_at=clock.now())
        )
        await uow.refresh_tokens.create(
            _token(session_id, clock, b"\x02", revoked_at=clock.now())
        )
        await uow.refresh_tokens.create(_token(session_id, clock, b"\x03"))
        await uow.commit()

    async with uow:
        current = await uow.refresh_tokens.get_current_by_session_id(session_id)
        assert current.token_hash == b"\x03" * 32


@pytest.mark.asyncio
async def test_token_hash_is_globally_unique(uow, user_id, clock):
    first = await _session_id(uow, user_id)
    second = await _session_id(uow, user_id)

    async with uow:
        await uow.refresh_tokens.create(_token(first, clock, b"\x07"))
        with pytest.raises(IntegrityError):
            await uow.refresh_tokens.create(_token(second, clock, b"\x07"))


@pytest.mark.asyncio
async def test_consume_is_compare_and_set(uow, user_id, clock):
    """Two rotations racing on the same row: only the first update matches"""
    session_id = await _session_id(uow, user_id)

    async with uow:
        token = await uow.refresh_tokens.create(_token(session_id, clock, b"\x01"))
        token_id = token.id
        await uow.commit()

    async with uow:
        successor = _token(session_id, clock, b"\x02")
        assert await uow.refresh_tokens.consume(token_id, successor.id, clock.now()) is True
        assert await uow.refresh_tokens.consume(token_id, uuid4(), clock.now()) is False

        # Deferred self-reference: the successor may be inserted after the link
        await uow.refresh_tokens.create(successor)
        await uow.commit()

    async with uow:
        old = await uow.refresh_tokens.get_by_id(token_id)
        assert old.used_at == clock.now()
        assert old.replaced_by == successor.id


@pytest.mark.asyncio
async def test_dangling_replaced_by_fails_at_commit(uow, user_id, clock):
    session_id = await _session_id(uow, user_id)

    async with uow:
        token = await uow.refresh_tokens.create(_token(session_id, clock, b"\x01"))
        token_id = token.id
        await uow.commit()

    async with uow:
        assert await uow.refresh_tokens.consume(token_id, uuid4(), clock.now()) is True
        with pytest.raises(IntegrityError):
            await uow.commit()


@pytest.mark.asyncio
async def test_find_valid_by_hash_joins_session_state(uow, db_session, user_id, clock):
    session_id = await _session_id(uow, user_id)
    repo = RefreshTokenRepository(db_session)

    async with uow:
        await uow.refresh_tokens.create(_token(session_id, clock, b"\x05"))
        await uow.commit()

    async with uow:
        assert await repo.find_valid_by_hash(b"\x05" * 32, clock.now()) is not None
        assert await repo.find_valid_by_hash(
            b"\x05" * 32, clock.now() + timedelta(hours=1)
        ) is None

        await uow.auth_sessions.revoke(session_id, clock.now())
        await uow.commit()

    async with uow:
        assert await repo.find_valid_by_hash(b"\x05" * 32, clock.now()) is None


@pytest.mark.asyncio
async def test_deleting_user_cascades(uow, db_session, user_id, clock):
    session_id = await _session_id(uow, user_id)

    async with uow:
        await uow.refresh_tokens.create(_token(session_id, clock, b"\x01"))
        db_session.add(Post(title="Hello", content="World", author_id=user_id))
        await uow.commit()

    await db_session.execute(delete(User).where(User.id == user_id))
    await db_session.commit()

    for model in (AuthSession, RefreshToken, Post):
        count = (await db_session.exec(select(func.count()).select_from(model))).one()
        assert count == 0


@pytest.mark.asyncio
async def test_deleting_bookmarked_post_is_rejected(uow, db_session, user_id):
    """ON DELETE SET NULL on a NOT NULL column: the database refuses the delete"""
    async with uow:
        post = Post(title="Hello", content="World", author_id=user_id)
        db_session.add(post)
        await db_session.flush()
        post_id = post.id
        db_session.add(Bookmark(post_id=post_id, user_id=user_id))
        await uow.commit()

    with pytest.raises(IntegrityError):
        await db_session.execute(delete(Post).where(Post.id == post_id))
    await db_session.rollback()


@pytest.mark.asyncio
async def test_updated_at_trigger_fires_on_raw_update(uow, db_session):
    stale = datetime(2020, 1, 1)
    async with uow:
        await uow.users.create(
            User(user_name="carol", created_at=stale, updated_at=stale)
        )
        await uow.commit()

    await db_session.execute(
        text('UPDATE users SET "imageUrl" = :url WHERE "userName" = :name'),
        {"url": "https://example.com/carol.png", "name": "carol"},
    )
    await db_session.commit()

    updated_at = (
        await db_session.exec(select(User.updated_at).where(User.user_name == "carol"))
    ).one()
    assert updated_at > stale


@pytest.mark.asyncio
async def test_user_name_is_unique(uow, user_id):
    async with uow:
        with pytest.raises(IntegrityError):
            await uow.users.create(User(user_name="alice"))

