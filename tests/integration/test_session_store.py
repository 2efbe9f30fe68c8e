"""
Session manager and retention flows against a real SQLite database
"""

from datetime import timedelta
from uuid import UUID, uuid4

import pytest

from src.app.use_cases.maintenance import PurgeExpiredTokensUseCase
from src.app.use_cases.sessions import (
    BindKeyThumbprintUseCase,
    CreateSessionUseCase,
    ListSessionsUseCase,
    RevokeSessionsUseCase,
    StartSessionUseCase,
    TouchSessionUseCase,
)
from src.app.use_cases.tokens import (
    GetTokenChainUseCase,
    RevokeTokenUseCase,
    RotateTokenUseCase,
    ValidateTokenUseCase,
)
from src.domain.entities import TokenState


@pytest.mark.asyncio
async def test_session_lifecycle(uow, user_id, clock):
    created = await CreateSessionUseCase(uow, clock=clock).execute(user_id)
    assert created.is_ok()
    session_id = UUID(created.value.session_id)
    assert created.value.dpop_jkt is None

    bind = BindKeyThumbprintUseCase(uow)
    bound = await bind.execute(session_id, "jkt-A")
    assert bound.is_ok()
    assert bound.value.dpop_jkt == "jkt-A"

    # Same key again is fine, a different one is not
    assert (await bind.execute(session_id, "jkt-A")).is_ok()
    conflict = await bind.execute(session_id, "jkt-B")
    assert conflict.is_err()
    assert conflict.error.code == "ALREADY_BOUND"

    clock.advance(timedelta(minutes=5))
    touched = await TouchSessionUseCase(uow, clock=clock).execute(session_id)
    assert touched.is_ok()
    assert touched.value.last_used_at == clock.now()
    assert touched.value.dpop_jkt == "jkt-A"

    revoked = await RevokeSessionsUseCase(uow, clock=clock).revoke_session(session_id)
    assert revoked.value.revoked is True

    after_touch = await TouchSessionUseCase(uow, clock=clock).execute(session_id)
    assert after_touch.error.code == "SESSION_REVOKED"
    after_bind = await bind.execute(session_id, "jkt-A")
    assert after_bind.error.code == "SESSION_REVOKED"


@pytest.mark.asyncio
async def test_unknown_ids(uow, user_id, clock):
    missing = uuid4()

    created = await CreateSessionUseCase(uow, clock=clock).execute(missing)
    assert created.error.code == "USER_NOT_FOUND"

    touched = await TouchSessionUseCase(uow, clock=clock).execute(missing)
    assert touched.error.code == "SESSION_NOT_FOUND"

    bound = await BindKeyThumbprintUseCase(uow).execute(missing, "jkt-A")
    assert bound.error.code == "SESSION_NOT_FOUND"

    revoked = await RevokeSessionsUseCase(uow, clock=clock).revoke_session(missing)
    assert revoked.error.code == "SESSION_NOT_FOUND"


@pytest.mark.asyncio
async def test_revoke_all_user_sessions(uow, user_id, clock, token_generator):
    start = StartSessionUseCase(uow, token_generator=token_generator, clock=clock)
    tokens = []
    for _ in range(3):
        result = await start.execute(user_id)
        assert result.is_ok()
        tokens.append(result.value.token.refresh_token)

    listed = await ListSessionsUseCase(uow).execute(user_id)
    assert len(listed.value.sessions) == 3

    revoked = await RevokeSessionsUseCase(uow, clock=clock).revoke_all_for_user(user_id)
    assert revoked.value.revoked_count == 3

    validate = ValidateTokenUseCase(uow, token_generator=token_generator, clock=clock)
    for token in tokens:
        assert (await validate.execute(token)).value is False

    assert (await ListSessionsUseCase(uow).execute(user_id)).value.sessions == []
    all_sessions = await ListSessionsUseCase(uow).execute(user_id, active_only=False)
    assert len(all_sessions.value.sessions) == 3

    # Nothing left to revoke
    again = await RevokeSessionsUseCase(uow, clock=clock).revoke_all_for_user(user_id)
    assert again.value.revoked_count == 0


@pytest.mark.asyncio
async def test_start_session_is_atomic(uow, user_id, clock, static_token_generator):
    """A hash collision on the first token also discards the new session"""
    start = StartSessionUseCase(uow, token_generator=static_token_generator, clock=clock)

    first = await start.execute(user_id)
    assert first.is_ok()

    second = await start.execute(user_id)
    assert second.is_err()
    assert second.error.code == "CONSTRAINT_VIOLATION"

    listed = await ListSessionsUseCase(uow).execute(user_id, active_only=False)
    assert [s.session_id for s in listed.value.sessions] == [first.value.session.session_id]


@pytest.mark.asyncio
async def test_purge_removes_dead_chain_but_keeps_current(
    uow, user_id, clock, token_generator
):
    ttl = timedelta(hours=1)
    started = await StartSessionUseCase(
        uow, token_generator=token_generator, clock=clock
    ).execute(user_id, ttl=ttl)
    session_id = UUID(started.value.session.session_id)
    token = started.value.token.refresh_token

    rotate = RotateTokenUseCase(uow, token_generator=token_generator, clock=clock, ttl=ttl)
    for _ in range(2):
        clock.advance(timedelta(minutes=10))
        token = (await rotate.execute(token)).value.refresh_token

    clock.advance(timedelta(days=1))
    purged = await PurgeExpiredTokensUseCase(uow, clock=clock).execute(timedelta(hours=1))

    assert purged.is_ok()
    assert purged.value.purged_count == 2

    # The current token is never purged, even when long expired
    chain = (await GetTokenChainUseCase(uow, clock=clock).execute(session_id)).value
    assert len(chain.tokens) == 1
    assert chain.tokens[0].state == TokenState.expired
    assert chain.tokens[0].replaced_by is None


@pytest.mark.asyncio
async def test_purge_keeps_successor_of_retained_token(
    uow, user_id, clock, token_generator
):
    """A short-lived successor stays while its long-lived predecessor is kept"""
    started = await StartSessionUseCase(
        uow, token_generator=token_generator, clock=clock
    ).execute(user_id, ttl=timedelta(days=10))
    session_id = UUID(started.value.session.session_id)

    clock.advance(timedelta(minutes=1))
    rotated = await RotateTokenUseCase(
        uow, token_generator=token_generator, clock=clock, ttl=timedelta(hours=1)
    ).execute(started.value.token.refresh_token)
    await RevokeTokenUseCase(
        uow, token_generator=token_generator, clock=clock
    ).execute(rotated.value.refresh_token)

    clock.advance(timedelta(days=2))
    purged = await PurgeExpiredTokensUseCase(uow, clock=clock).execute(timedelta(hours=1))

    assert purged.value.purged_count == 0
    chain = (await GetTokenChainUseCase(uow, clock=clock).execute(session_id)).value
    assert len(chain.tokens) == 2
    assert chain.tokens[0].replaced_by == chain.tokens[1].token_id


@pytest.mark.asyncio
async def test_purge_with_nothing_expired(uow, user_id, clock, token_generator):
    await StartSessionUseCase(uow, token_generator=token_generator, clock=clock).execute(
        user_id
    )

    purged = await PurgeExpiredTokensUseCase(uow, clock=clock).execute()

    assert purged.is_ok()
    assert purged.value.purged_count == 0


@pytest.mark.asyncio
async def test_purge_multi_hop_chain_behind_retained_token(
    uow, user_id, clock, token_generator
):
    """Long-lived head, short-lived links: nothing behind the head is deleted until it goes"""
    started = await StartSessionUseCase(
        uow, token_generator=token_generator, clock=clock
    ).execute(user_id, ttl=timedelta(days=10))
    session_id = UUID(started.value.session.session_id)
    token = started.value.token.refresh_token

    rotate = RotateTokenUseCase(
        uow, token_generator=token_generator, clock=clock, ttl=timedelta(hours=1)
    )
    for _ in range(3):
        clock.advance(timedelta(minutes=1))
        token = (await rotate.execute(token)).value.refresh_token

    clock.advance(timedelta(days=2))
    purge = PurgeExpiredTokensUseCase(uow, clock=clock)
    purged = await purge.execute(timedelta(hours=1))

    assert purged.is_ok()
    assert purged.value.purged_count == 0
    chain = (await GetTokenChainUseCase(uow, clock=clock).execute(session_id)).value
    assert len(chain.tokens) == 4

    # Once the head expires too, the whole dead prefix goes; the current row stays
    clock.advance(timedelta(days=10))
    purged = await purge.execute(timedelta(hours=1))

    assert purged.is_ok()
    assert purged.value.purged_count == 3
    chain = (await GetTokenChainUseCase(uow, clock=clock).execute(session_id)).value
    assert len(chain.tokens) == 1
    assert chain.tokens[0].replaced_by is None

    # A later run still works
    again = await purge.execute(timedelta(hours=1))
    assert again.is_ok()
    assert again.value.purged_count == 0
