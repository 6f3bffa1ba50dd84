"""
Unit tests for authentication module.
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from arena_shared.auth import User, create_access_token, decode_token, get_current_user, require_admin


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_create_access_token(self) -> None:
        """Test access token creation."""
        token = create_access_token("GALICE", roles=["bettor"])

        assert isinstance(token, str)
        assert len(token) > 50

    def test_decode_access_token(self) -> None:
        """Test access token decoding."""
        token = create_access_token("GADMIN", roles=["admin"])

        decoded = decode_token(token)

        assert decoded is not None
        assert decoded.sub == "GADMIN"
        assert "admin" in decoded.roles

    def test_decode_invalid_token(self) -> None:
        """Test that invalid tokens return None."""
        assert decode_token("invalid.token.here") is None

    def test_decode_expired_token(self) -> None:
        """Test that expired tokens return None."""
        token = create_access_token("GALICE", expires_delta=timedelta(seconds=-1))

        assert decode_token(token) is None


class TestDependencies:
    """Tests for route dependencies."""

    @pytest.mark.asyncio
    async def test_get_current_user(self) -> None:
        user = await get_current_user(create_access_token("GALICE", roles=["bettor"]))

        assert user.id == "GALICE"
        assert user.is_admin is False

    @pytest.mark.asyncio
    async def test_missing_token(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(None)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_require_admin(self) -> None:
        admin = User(id="GADMIN", roles=["admin"])
        bettor = User(id="GALICE", roles=["bettor"])

        assert await require_admin(admin) is admin
        with pytest.raises(HTTPException) as exc_info:
            await require_admin(bettor)

        assert exc_info.value.status_code == 403
