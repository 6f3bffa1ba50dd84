"""
Commitment Scheme
=================

Hash commitments to a match side:

    commitment = SHA256(side_byte || salt)

``side_byte`` is 0 for player 1 and 1 for player 2; ``salt`` is 32
random bytes kept secret until reveal. With only two possible sides the
salt carries all of the hiding entropy, so salts must come from a CSPRNG
and are never logged.

Version: 0.1.0
"""

import hashlib
import hmac
import secrets

from arena_shared.models.wagering import BetSide

SALT_BYTES = 32
COMMITMENT_BYTES = 32


def generate_salt() -> bytes:
    """Fresh full-entropy salt."""
    return secrets.token_bytes(SALT_BYTES)


def commit(side: BetSide | int, salt: bytes) -> bytes:
    """
    Commit to ``side`` under ``salt``.

    Args:
        side: Side being committed to
        salt: 32-byte secret salt

    Returns:
        32-byte SHA-256 commitment

    Raises:
        ValueError: salt is not 32 bytes or side is unknown
    """
    if len(salt) != SALT_BYTES:
        raise ValueError(f"salt must be {SALT_BYTES} bytes, got {len(salt)}")
    side = BetSide(side)
    return hashlib.sha256(side.byte + salt).digest()


def verify_opening(commitment: bytes, side: BetSide | int, salt: bytes) -> bool:
    """Check that ``(side, salt)`` opens ``commitment``."""
    if len(commitment) != COMMITMENT_BYTES or len(salt) != SALT_BYTES:
        return False
    try:
        side = BetSide(side)
    except ValueError:
        return False
    return hmac.compare_digest(commit(side, salt), commitment)
