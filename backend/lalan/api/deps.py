"""Common API dependencies."""

from __future__ import annotations

import uuid
from typing import Annotated
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lalan.core.config import get_settings
from lalan.core.security import decode_access_token
from lalan.db.session import get_session
from lalan.models.user import User, UserRole, UserStatus
from lalan.security.permissions import require_roles

settings = get_settings()

# Tokens are issued by the separate auth service.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.auth_token_url)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Authenticate request via bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        raise credentials_exception from exc

    subject = payload.get("sub")
    if subject is None:
        raise credentials_exception

    try:
        user_id = uuid.UUID(subject)
    except (ValueError, TypeError) as exc:
        raise credentials_exception from exc

    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or user.status != UserStatus.ACTIVE:
        raise credentials_exception
    return user


async def get_current_customer(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require a renter account."""
    require_roles(current_user, {UserRole.CUSTOMER})
    return current_user


async def get_current_hoster(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require an item owner account."""
    require_roles(current_user, {UserRole.HOSTER})
    return current_user
