"""
JWT Token Management
====================

Bearer tokens for the wagering API. The token subject is the caller's
ledger address; contracts authorize bettors and players by comparing
that address with the one named in the call.

Version: 0.1.0
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from pydantic import BaseModel, Field

from arena_shared.config import settings
from arena_shared.logging import get_logger


logger = get_logger(__name__)


class TokenData(BaseModel):
    """Decoded JWT token payload."""

    sub: str = Field(..., description="Subject (ledger address)")
    roles: list[str] = Field(default_factory=list, description="Caller roles")
    exp: datetime = Field(..., description="Expiration time")
    iat: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Issued at")


def create_access_token(
    address: str,
    roles: list[str] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token for a ledger address.

    Args:
        address: Caller's ledger address (token subject)
        roles: Role names, e.g. ``["admin"]``
        expires_delta: Custom expiration time (default from settings)

    Returns:
        str: Encoded JWT token
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt.access_token_expire_minutes))

    encoded_jwt = jwt.encode(
        {
            "sub": address,
            "roles": roles or [],
            "exp": expire,
            "iat": now,
        },
        settings.jwt.secret_key.get_secret_value(),
        algorithm=settings.jwt.algorithm,
    )

    logger.debug(
        "access_token_created",
        sub=address,
        expires_at=expire.isoformat(),
    )

    return encoded_jwt


def decode_token(token: str) -> TokenData | None:
    """
    Decode and validate a JWT token.

    Returns:
        TokenData: Decoded token data, or None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt.secret_key.get_secret_value(),
            algorithms=[settings.jwt.algorithm],
        )
        return TokenData(
            sub=payload["sub"],
            roles=payload.get("roles", []),
            exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
            iat=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
        )

    except (JWTError, KeyError) as e:
        logger.warning("token_decode_failed", error=str(e))
        return None
