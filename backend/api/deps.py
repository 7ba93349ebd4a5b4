"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_session
from models import User
from services.users import get_user

USER_ID_HEADER = "X-User-Id"


async def get_db() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


async def get_current_user(
    caller_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
    session: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the caller from the opaque id forwarded by the identity provider."""
    if caller_id is None or not caller_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    user = await get_user(session, caller_id.strip())
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user
