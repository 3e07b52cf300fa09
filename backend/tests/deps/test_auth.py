from datetime import timedelta
from typing import Any

import pytest
from booking_api.config import Settings, get_settings
from booking_api.deps import get_current_user_id
from booking_api.utils.auth import create_access_token, parse_bearer
from fastapi import HTTPException
from sqlalchemy.exc import ProgrammingError


class DummySession:
    def __init__(self, session_exists: bool | Exception) -> None:
        self.session_exists = session_exists
        self.rolled_back = False

    async def scalar(self, *args: Any, **kwargs: Any) -> int | None:
        if isinstance(self.session_exists, Exception):
            raise self.session_exists
        return 1 if self.session_exists else None

    async def rollback(self) -> None:
        self.rolled_back = True


@pytest.fixture(autouse=True)
def _set_auth_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_SECRET", "testsecret")
    get_settings.cache_clear()


def _token(user_id: int = 123, *, expires_delta: timedelta | None = None) -> str:
    settings = Settings(auth_secret="testsecret")
    return create_access_token(
        user_id=user_id,
        secret=settings.auth_secret,
        algorithm=settings.auth_algorithm,
        expires_delta=expires_delta,
    )


@pytest.mark.asyncio
async def test_get_current_user_id_accepts_token_with_active_session() -> None:
    session = DummySession(session_exists=True)
    result = await get_current_user_id(authorization=f"Bearer {_token()}", session=session)  # type: ignore[arg-type]
    assert result == 123
    assert session.rolled_back is True


@pytest.mark.asyncio
async def test_get_current_user_id_rejects_missing_header() -> None:
    session = DummySession(session_exists=True)
    with pytest.raises(HTTPException) as excinfo:
        await get_current_user_id(authorization=None, session=session)  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_id_rejects_non_bearer_scheme() -> None:
    session = DummySession(session_exists=True)
    with pytest.raises(HTTPException) as excinfo:
        await get_current_user_id(authorization=f"Basic {_token()}", session=session)  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_id_rejects_expired_token() -> None:
    session = DummySession(session_exists=True)
    token = _token(1, expires_delta=timedelta(seconds=-1))
    with pytest.raises(HTTPException) as excinfo:
        await get_current_user_id(authorization=f"Bearer {token}", session=session)  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_id_rejects_token_without_session() -> None:
    session = DummySession(session_exists=False)
    with pytest.raises(HTTPException) as excinfo:
        await get_current_user_id(authorization=f"Bearer {_token(99)}", session=session)  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_id_handles_missing_sessions_table() -> None:
    session = DummySession(session_exists=ProgrammingError("missing", None, Exception("cause")))
    with pytest.raises(HTTPException) as excinfo:
        await get_current_user_id(authorization=f"Bearer {_token(1)}", session=session)  # type: ignore[arg-type]
    assert excinfo.value.status_code == 500
    assert session.rolled_back is True


def test_parse_bearer_extracts_token() -> None:
    assert parse_bearer("Bearer abc.def") == "abc.def"
    assert parse_bearer("bearer abc") == "abc"
    assert parse_bearer("Bearer ") is None
    assert parse_bearer(None) is None
