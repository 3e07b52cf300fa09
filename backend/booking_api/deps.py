import logging
from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import async_session
from .models import Session
from .utils.auth import decode_access_token, parse_bearer

logger = logging.getLogger(__name__)

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_UNAUTHORIZED_HEADERS,
    )


async def get_current_user_id(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> int:
    """Resolve the bearer token to a user id; the token must belong to an active session."""
    token = parse_bearer(authorization)
    if token is None:
        raise _unauthorized("Bearer token required")

    settings = get_settings()
    try:
        user_id = decode_access_token(token, secret=settings.auth_secret, algorithms=[settings.auth_algorithm])
    except ValueError as exc:
        raise _unauthorized("Invalid token") from exc

    try:
        session_id = await session.scalar(
            select(Session.id).where(Session.user_id == user_id, Session.token == token)
        )
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("session lookup failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="auth lookup failed") from exc
    # Close the autobegun read so handlers can open their own transaction.
    await session.rollback()
    if session_id is None:
        raise _unauthorized("No active session for token")
    return user_id
