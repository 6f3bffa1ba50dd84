"""
Public Input Bindings
=====================

Encoding of the public inputs a settlement proof must carry.

A settlement proof for pool ``pool_id`` declaring ``winner_side`` is
only accepted when its public inputs are exactly::

    [match_ref, pool_id, winner_side]

each as a 32-byte big-endian BN254 scalar. Binding all three stops a
valid proof for one pool (or one outcome) from settling another.

A match outcome proof is bound the same way to ``[session_id, winner_side]``.

Version: 0.1.0
"""

import hashlib
from uuid import UUID

from arena_shared.models.wagering import BetSide
from arena_shared.zk.bn254 import SCALAR_BYTES, curve_order

SETTLEMENT_INPUTS = 3
OUTCOME_INPUTS = 2


def scalar_bytes(value: int) -> bytes:
    """Encode a non-negative integer below the group order."""
    if not 0 <= value < curve_order:
        raise ValueError("value is not a valid scalar")
    return value.to_bytes(SCALAR_BYTES, "big")


def is_scalar(data: bytes) -> bool:
    return len(data) == SCALAR_BYTES and int.from_bytes(data, "big") < curve_order


def match_ref_for(match_id: str | UUID) -> bytes:
    """
    32-byte match reference for a match UUID.

    SHA-256 of the id string reduced into the scalar field, so the
    reference can always appear as a proof public input.
    """
    digest = hashlib.sha256(str(match_id).encode()).digest()
    return scalar_bytes(int.from_bytes(digest, "big") % curve_order)


def settlement_inputs(match_ref: bytes, pool_id: int, winner_side: BetSide) -> list[bytes]:
    """Public inputs a proof must carry to settle ``pool_id`` for ``winner_side``."""
    if not is_scalar(match_ref):
        raise ValueError("match_ref is not a valid scalar")
    return [match_ref, scalar_bytes(pool_id), scalar_bytes(int(winner_side))]


def binds_settlement(
    public_inputs: list[bytes],
    match_ref: bytes,
    pool_id: int,
    winner_side: BetSide,
) -> bool:
    """Whether ``public_inputs`` is exactly the settlement triple."""
    if len(public_inputs) != SETTLEMENT_INPUTS:
        return False
    try:
        expected = settlement_inputs(match_ref, pool_id, winner_side)
    except ValueError:
        return False
    return all(bytes(a) == b for a, b in zip(public_inputs, expected))


def outcome_inputs(session_id: int, winner_side: BetSide) -> list[bytes]:
    """Public inputs a proof must carry to name ``winner_side`` the winner of ``session_id``."""
    return [scalar_bytes(session_id), scalar_bytes(int(winner_side))]


def binds_outcome(public_inputs: list[bytes], session_id: int, winner_side: BetSide) -> bool:
    """Whether ``public_inputs`` is exactly the ``[session_id, winner_side]`` pair."""
    if len(public_inputs) != OUTCOME_INPUTS:
        return False
    try:
        expected = outcome_inputs(session_id, winner_side)
    except ValueError:
        return False
    return all(bytes(a) == b for a, b in zip(public_inputs, expected))
