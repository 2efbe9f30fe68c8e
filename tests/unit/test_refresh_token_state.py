from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from libs.result import Error, Return
from src.domain.entities import RefreshToken, TokenState

NOW = datetime(2026, 1, 1, 12, 0, 0)


def _token(**overrides) -> RefreshToken:
    fields = dict(
        session_id=uuid4(),
        token_hash=b"\x00" * 32,
        issued_at=NOW - timedelta(minutes=10),
        expires_at=NOW + timedelta(minutes=10),
    )
    fields.update(overrides)
    return RefreshToken(**fields)


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({}, TokenState.current),
        ({"used_at": NOW, "replaced_by": uuid4()}, TokenState.used),
        ({"revoked_at": NOW}, TokenState.revoked),
        ({"expires_at": NOW}, TokenState.expired),
        ({"expires_at": NOW - timedelta(seconds=1), "revoked_at": NOW}, TokenState.revoked),
    ],
)
def test_token_state(overrides, expected):
    assert _token(**overrides).state(NOW) == expected


def test_expired_token_is_still_current_until_replaced():
    # "current" only tracks revoked_at/replaced_by; expiry is checked separately
    token = _token(expires_at=NOW - timedelta(days=1))
    assert token.is_current
    assert not token.is_consumed
    assert token.is_expired(NOW)


def test_consumed_flags():
    assert _token(used_at=NOW).is_consumed
    assert _token(revoked_at=NOW).is_consumed
    assert _token(replaced_by=uuid4()).is_consumed
    assert not _token(replaced_by=uuid4()).is_current


def test_result_value_of_error_raises():
    result = Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))
    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    with pytest.raises(ValueError):
        result.value


def test_result_ok():
    result = Return.ok(True)
    assert result.is_ok()
    assert result.value is True
    with pytest.raises(ValueError):
        result.error
