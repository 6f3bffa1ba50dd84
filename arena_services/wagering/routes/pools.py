"""
Bet Pool Routes
===============

Operator endpoints for the bet pool lifecycle.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from arena_shared.auth import User, require_admin
from arena_shared.logging import get_logger
from arena_shared.models import BaseResponse, BetPool, BetSide
from arena_shared.zk import match_ref_for

from arena_services.wagering.models import HexBytes, ProofSubmission
from arena_services.wagering.services import BetPoolEngine, get_runtime


logger = get_logger(__name__)
router = APIRouter()


def get_betting() -> BetPoolEngine:
    return get_runtime().betting


Betting = Annotated[BetPoolEngine, Depends(get_betting)]
Admin = Annotated[User, Depends(require_admin)]


# ============================================================================
# Request Models
# ============================================================================


class CreatePoolRequest(BaseModel):
    """Open a pool for a match.

    Pass either ``match_ref`` directly or a ``match_id`` to derive it from.
    """

    match_ref: HexBytes | None = Field(default=None, description="32-byte match reference")
    match_id: str | None = Field(default=None, description="Off-chain match id")
    deadline_ts: int = Field(default=0, ge=0, description="Ledger timestamp, 0 for none")


class SettleRequest(BaseModel):
    winner_side: BetSide


class SettleZkRequest(ProofSubmission):
    """Settlement backed by a proof over ``[match_ref, pool_id, winner_side]``."""

    winner_side: BetSide


class ZkConfigRequest(BaseModel):
    verifier: str = Field(..., description="Verifier contract address")
    vk_id: HexBytes


class PoolResponse(BaseResponse[BetPool]):
    pass


# ============================================================================
# Endpoints
# ============================================================================


@router.post("", response_model=PoolResponse, status_code=status.HTTP_201_CREATED)
async def create_pool(request: CreatePoolRequest, betting: Betting, admin: Admin) -> PoolResponse:
    """
    Create a pool.

    Requires the admin role.
    """
    match_ref = request.match_ref
    if match_ref is None and request.match_id is not None:
        match_ref = match_ref_for(request.match_id)

    pool_id = await betting.create_pool(admin.id, match_ref or b"", request.deadline_ts)
    return PoolResponse(data=betting.get_pool(pool_id), message=f"Pool {pool_id} created")


@router.get("/{pool_id}", response_model=PoolResponse)
async def get_pool(pool_id: int, betting: Betting) -> PoolResponse:
    return PoolResponse(data=betting.get_pool(pool_id))


@router.get("/{pool_id}/bettors", response_model=BaseResponse[list[str]])
async def list_bettors(pool_id: int, betting: Betting) -> BaseResponse[list[str]]:
    betting.get_pool(pool_id)
    return BaseResponse(data=betting.list_bettors(pool_id))


@router.post("/{pool_id}/lock", response_model=PoolResponse)
async def lock_pool(pool_id: int, betting: Betting, admin: Admin) -> PoolResponse:
    """Close a pool to new bets."""
    return PoolResponse(data=await betting.lock_pool(admin.id, pool_id))


@router.post("/{pool_id}/settle", response_model=PoolResponse)
async def settle_pool(
    pool_id: int,
    request: SettleRequest,
    betting: Betting,
    admin: Admin,
) -> PoolResponse:
    """Settle a pool on the operator's word."""
    return PoolResponse(data=await betting.settle_pool(admin.id, pool_id, request.winner_side))


@router.post("/{pool_id}/settle-zk", response_model=PoolResponse)
async def settle_pool_zk(
    pool_id: int,
    request: SettleZkRequest,
    betting: Betting,
    admin: Admin,
) -> PoolResponse:
    """
    Settle a pool with a Groth16 proof.

    The proof's public inputs must be exactly this pool's match
    reference, pool id and the declared winner side.
    """
    pool = await betting.settle_pool_zk(
        admin.id,
        pool_id,
        request.winner_side,
        request.vk_id,
        request.proof,
        request.public_inputs,
    )
    return PoolResponse(data=pool, message="Pool settled with proof")


@router.post("/{pool_id}/refund", response_model=BaseResponse[int])
async def refund_pool(pool_id: int, betting: Betting, admin: Admin) -> BaseResponse[int]:
    """Cancel a pool and return every deposit including fees."""
    refunded = await betting.refund_pool(admin.id, pool_id)
    return BaseResponse(data=refunded, message="Pool refunded")


@router.put("/config/zk", response_model=BaseResponse[None])
async def configure_zk(request: ZkConfigRequest, betting: Betting, admin: Admin) -> BaseResponse[None]:
    await betting.set_zk_verifier(admin.id, request.verifier, request.vk_id)
    return BaseResponse(message="zk settlement configured")
