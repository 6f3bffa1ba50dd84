"""
Arena Match Models
==================

Records held by the arena match contract: the match itself, per-slot
zk records and the match outcome record.

Version: 0.1.0
"""

from pydantic import BaseModel, Field, field_serializer

from arena_shared.models.wagering import BetSide


class Match(BaseModel):
    """Two-player match session."""

    session_id: int = Field(..., ge=0)
    player1: str
    player2: str
    player1_points: int = 0
    player2_points: int = 0
    winner: str | None = None
    cancelled: bool = False

    # Optional stake layer
    stake_amount: int = 0
    stake_fee: int = 0
    player1_stake_paid: bool = False
    player2_stake_paid: bool = False

    # zk round gate counters
    player1_zk_commits: int = 0
    player2_zk_commits: int = 0
    player1_zk_verified: int = 0
    player2_zk_verified: int = 0

    @property
    def ended(self) -> bool:
        return self.winner is not None or self.cancelled

    def side_of(self, player: str) -> BetSide | None:
        if player == self.player1:
            return BetSide.PLAYER1
        if player == self.player2:
            return BetSide.PLAYER2
        return None

    def player_for(self, side: BetSide) -> str:
        return self.player1 if side == BetSide.PLAYER1 else self.player2

    def stake_paid(self, side: BetSide) -> bool:
        return self.player1_stake_paid if side == BetSide.PLAYER1 else self.player2_stake_paid


class ZkCommitRecord(BaseModel):
    """Per-slot round commitment."""

    player: str
    side: BetSide
    round: int
    turn: int
    commitment: bytes
    submitted_at: int

    @field_serializer("commitment", when_used="json")
    def _commitment_hex(self, v: bytes) -> str:
        return v.hex()


class ZkVerificationRecord(BaseModel):
    """Verified proof opening one slot's commitment."""

    player: str
    side: BetSide
    round: int
    turn: int
    verifier: str
    commitment: bytes
    vk_id: bytes
    verified_at: int

    @field_serializer("commitment", "vk_id", when_used="json")
    def _bytes_hex(self, v: bytes) -> str:
        return v.hex()


class ZkMatchOutcomeRecord(BaseModel):
    """Proof-backed claim of a match winner."""

    winner: str
    verifier: str
    vk_id: bytes
    submitted_at: int

    @field_serializer("vk_id", when_used="json")
    def _vk_id_hex(self, v: bytes) -> str:
        return v.hex()


class ZkCounts(BaseModel):
    """Round gate progress for one match."""

    player1_commits: int = 0
    player2_commits: int = 0
    player1_verified: int = 0
    player2_verified: int = 0
    outcome_submitted: bool = False
