"""
Authentication Module
=====================

JWT bearer authentication for the wagering API.

Features:
- JWT token generation and validation
- Role-based access control (``admin`` for operator entrypoints)
- FastAPI dependencies for route protection

Usage:
    from arena_shared.auth import create_access_token, get_current_user, require_admin

    token = create_access_token("GBETTOR...", roles=["bettor"])

    @router.post("/bets/commit")
    async def commit(user: User = Depends(get_current_user)):
        ...
"""

from arena_shared.auth.dependencies import (
    User,
    get_current_user,
    oauth2_scheme,
    require_admin,
    require_roles,
)
from arena_shared.auth.jwt import TokenData, create_access_token, decode_token

__all__ = [
    # JWT
    "create_access_token",
    "decode_token",
    "TokenData",
    # Dependencies
    "User",
    "get_current_user",
    "require_roles",
    "require_admin",
    "oauth2_scheme",
]
