"""
Wagering Models
===============

Records held by the bet pool contract.

Version: 0.1.0
"""

from enum import Enum, IntEnum

from pydantic import BaseModel, Field, field_serializer, field_validator


class BetSide(IntEnum):
    """Match side a bet or slot belongs to; the value is the commitment byte."""

    PLAYER1 = 0
    PLAYER2 = 1

    @property
    def byte(self) -> bytes:
        return bytes([self.value])


class PoolStatus(str, Enum):
    """Pool lifecycle. Transitions only move forward."""

    OPEN = "open"
    LOCKED = "locked"
    SETTLED = "settled"
    REFUNDED = "refunded"

    @property
    def is_terminal(self) -> bool:
        return self in (PoolStatus.SETTLED, PoolStatus.REFUNDED)


def _bytes32(v: bytes) -> bytes:
    if len(v) != 32:
        raise ValueError("expected 32 bytes")
    return v


class BetPool(BaseModel):
    """Betting pool for one match."""

    pool_id: int = Field(..., ge=1)
    match_ref: bytes = Field(..., description="32-byte match identifier")
    status: PoolStatus = PoolStatus.OPEN

    # Revealed totals per side
    player1_total: int = 0
    player2_total: int = 0

    # Escrow totals (fees excluded from total_pool)
    total_pool: int = 0
    total_fees: int = 0

    bet_count: int = 0
    reveal_count: int = 0
    deadline_ts: int = Field(default=0, ge=0, description="0 = no deadline")
    winner_side: BetSide | None = None

    @field_validator("match_ref")
    @classmethod
    def validate_match_ref(cls, v: bytes) -> bytes:
        return _bytes32(v)

    @field_serializer("match_ref", when_used="json")
    def _match_ref_hex(self, v: bytes) -> str:
        return v.hex()

    def side_total(self, side: BetSide) -> int:
        return self.player1_total if side == BetSide.PLAYER1 else self.player2_total


class BetCommit(BaseModel):
    """One bettor's hidden bet in a pool."""

    bettor: str
    commitment: bytes
    amount: int = Field(..., gt=0)
    fee_paid: int = Field(..., ge=0)
    revealed: bool = False
    side: BetSide | None = None
    claimed: bool = False

    @field_validator("commitment")
    @classmethod
    def validate_commitment(cls, v: bytes) -> bytes:
        return _bytes32(v)

    @field_serializer("commitment", when_used="json")
    def _commitment_hex(self, v: bytes) -> str:
        return v.hex()
