"""
Arena Match Routes
==================

Match lifecycle, stakes and the zk round gate.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from arena_shared.auth import User, get_current_user, require_admin
from arena_shared.logging import get_logger
from arena_shared.models import (
    BaseResponse,
    Match,
    ZkCommitRecord,
    ZkCounts,
    ZkMatchOutcomeRecord,
    ZkVerificationRecord,
)

from arena_services.wagering.models import HexBytes, ProofSubmission
from arena_services.wagering.services import ArenaMatchContract, get_runtime


logger = get_logger(__name__)
router = APIRouter()


def get_arena() -> ArenaMatchContract:
    return get_runtime().arena


Arena = Annotated[ArenaMatchContract, Depends(get_arena)]
Caller = Annotated[User, Depends(get_current_user)]
Admin = Annotated[User, Depends(require_admin)]


# ============================================================================
# Request Models
# ============================================================================


class StartMatchRequest(BaseModel):
    session_id: int = Field(..., ge=0)
    player1: str
    player2: str
    player1_points: int = Field(default=0, ge=0)
    player2_points: int = Field(default=0, ge=0)


class StakeRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Per-player stake in minor units")


class EndMatchRequest(BaseModel):
    player1_won: bool


class ZkCommitRequest(BaseModel):
    round: int = Field(..., description="Round number, from 1")
    turn: int = Field(..., description="Turn number, from 1")
    commitment: HexBytes


class ZkVerifyRequest(ProofSubmission):
    round: int
    turn: int
    commitment: HexBytes


class ZkOutcomeRequest(ProofSubmission):
    winner: str


class ArenaZkConfigRequest(BaseModel):
    verifier: str
    vk_id: HexBytes | None = Field(default=None, description="Required key id, if any")
    outcome_vk_id: HexBytes | None = Field(default=None, description="Key id for match outcome proofs")
    gate_required: bool = False


class MatchResponse(BaseResponse[Match]):
    pass


# ============================================================================
# Match Lifecycle
# ============================================================================


@router.post("", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
async def start_match(request: StartMatchRequest, arena: Arena, admin: Admin) -> MatchResponse:
    """Register a match with the game hub and record it."""
    match = await arena.start_game(
        admin.id,
        request.session_id,
        request.player1,
        request.player2,
        request.player1_points,
        request.player2_points,
    )
    return MatchResponse(data=match, message="Match started")


@router.get("/{session_id}", response_model=MatchResponse)
async def get_match(session_id: int, arena: Arena) -> MatchResponse:
    return MatchResponse(data=arena.get_match(session_id))


@router.post("/{session_id}/stake", response_model=MatchResponse)
async def set_stake(session_id: int, request: StakeRequest, arena: Arena, admin: Admin) -> MatchResponse:
    return MatchResponse(data=await arena.set_match_stake(admin.id, session_id, request.amount))


@router.post("/{session_id}/deposit", response_model=MatchResponse)
async def deposit_stake(session_id: int, arena: Arena, caller: Caller) -> MatchResponse:
    """Pay the caller's stake plus fee into escrow."""
    match = await arena.deposit_stake(caller.id, session_id, caller.id)
    return MatchResponse(data=match, message="Stake deposited")


@router.post("/{session_id}/cancel", response_model=BaseResponse[int])
async def cancel_match(session_id: int, arena: Arena, admin: Admin) -> BaseResponse[int]:
    refunded = await arena.cancel_match(admin.id, session_id)
    return BaseResponse(data=refunded, message="Match cancelled")


@router.post("/{session_id}/end", response_model=MatchResponse)
async def end_match(session_id: int, request: EndMatchRequest, arena: Arena, admin: Admin) -> MatchResponse:
    """
    Finalize a match.

    With the zk gate enabled this fails until both players have a
    verified round and a proven outcome names the same winner.
    """
    match = await arena.end_game(admin.id, session_id, request.player1_won)
    return MatchResponse(data=match, message="Match ended")


# ============================================================================
# zk Round Gate
# ============================================================================


@router.post("/{session_id}/zk/commit", response_model=BaseResponse[ZkCommitRecord])
async def submit_zk_commit(
    session_id: int,
    request: ZkCommitRequest,
    arena: Arena,
    caller: Caller,
) -> BaseResponse[ZkCommitRecord]:
    record = await arena.submit_zk_commit(
        caller.id,
        session_id,
        caller.id,
        request.round,
        request.turn,
        request.commitment,
    )
    return BaseResponse(data=record)


@router.post("/{session_id}/zk/verify", response_model=BaseResponse[ZkVerificationRecord])
async def submit_zk_verification(
    session_id: int,
    request: ZkVerifyRequest,
    arena: Arena,
    caller: Caller,
) -> BaseResponse[ZkVerificationRecord]:
    record = await arena.submit_zk_verification(
        caller.id,
        session_id,
        caller.id,
        request.round,
        request.turn,
        request.commitment,
        request.vk_id,
        request.proof,
        request.public_inputs,
    )
    return BaseResponse(data=record, message="Round verified")


@router.post("/{session_id}/zk/outcome", response_model=BaseResponse[ZkMatchOutcomeRecord])
async def submit_zk_match_outcome(
    session_id: int,
    request: ZkOutcomeRequest,
    arena: Arena,
    caller: Caller,
) -> BaseResponse[ZkMatchOutcomeRecord]:
    """
    Bind the match winner to a proof. Accepted once per match.

    The public inputs must be exactly ``[session_id, winner_side]``.
    """
    record = await arena.submit_zk_match_outcome(
        caller.id,
        session_id,
        request.winner,
        request.vk_id,
        request.proof,
        request.public_inputs,
    )
    return BaseResponse(data=record, message="Outcome recorded")


@router.get("/{session_id}/zk", response_model=BaseResponse[ZkCounts])
async def get_zk_counts(session_id: int, arena: Arena) -> BaseResponse[ZkCounts]:
    return BaseResponse(data=arena.get_zk_counts(session_id))


@router.put("/config/zk", response_model=BaseResponse[None])
async def configure_zk(request: ArenaZkConfigRequest, arena: Arena, admin: Admin) -> BaseResponse[None]:
    await arena.set_zk_verifier(admin.id, request.verifier, request.vk_id, request.outcome_vk_id)
    await arena.set_zk_gate_required(admin.id, request.gate_required)
    return BaseResponse(message="Arena zk gate configured")
