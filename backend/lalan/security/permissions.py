"""Role helper for explicit authorization checks."""

from __future__ import annotations

from fastapi import HTTPException, status

from lalan.models.user import User, UserRole


def require_roles(user: User, allowed: set[UserRole]) -> None:
    """Raise HTTP 403 unless the user holds one of the allowed roles."""

    if user.role not in allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )


__all__ = ["require_roles"]
