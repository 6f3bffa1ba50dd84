"""
Bet Routes
==========

Bettor endpoints: commit, reveal and claim. The caller is the bearer
token subject; operator-assisted variants act on behalf of a bettor.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from arena_shared.auth import User, get_current_user, require_admin
from arena_shared.logging import get_logger
from arena_shared.models import BaseResponse, BetCommit

from arena_services.wagering.models import HexBytes
from arena_services.wagering.routes.pools import Betting


logger = get_logger(__name__)
router = APIRouter()

Caller = Annotated[User, Depends(get_current_user)]
Admin = Annotated[User, Depends(require_admin)]


# ============================================================================
# Request Models
# ============================================================================


class CommitBetRequest(BaseModel):
    """Hidden bet: ``commitment = SHA256(side_byte || salt)``."""

    pool_id: int = Field(..., ge=1)
    commitment: HexBytes = Field(..., description="32-byte commitment")
    amount: int = Field(..., gt=0, description="Stake in minor units, fee charged on top")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "pool_id": 1,
                    "commitment": "5f0c0b1d2e3a4f5061728394a5b6c7d8e9fa0b1c2d3e4f5061728394a5b6c7d8",
                    "amount": 10_000_000,
                }
            ]
        }
    }


class RevealBetRequest(BaseModel):
    pool_id: int = Field(..., ge=1)
    side: int = Field(..., description="0 = player 1, 1 = player 2")
    salt: HexBytes = Field(..., description="32-byte salt used for the commitment")


class AdminRevealRequest(RevealBetRequest):
    bettor: str


class ClaimRequest(BaseModel):
    pool_id: int = Field(..., ge=1)


class AdminClaimRequest(ClaimRequest):
    bettor: str


class BetResponse(BaseResponse[BetCommit]):
    pass


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/commit", response_model=BetResponse, status_code=status.HTTP_201_CREATED)
async def commit_bet(request: CommitBetRequest, betting: Betting, caller: Caller) -> BetResponse:
    """
    Commit a hidden bet.

    ``amount`` plus the protocol fee is moved from the caller into escrow.
    """
    bet = await betting.commit_bet(caller.id, request.pool_id, caller.id, request.commitment, request.amount)
    return BetResponse(data=bet, message="Bet committed")


@router.post("/reveal", response_model=BetResponse)
async def reveal_bet(request: RevealBetRequest, betting: Betting, caller: Caller) -> BetResponse:
    bet = await betting.reveal_bet(caller.id, request.pool_id, caller.id, request.side, request.salt)
    return BetResponse(data=bet, message="Bet revealed")


@router.post("/admin-reveal", response_model=BetResponse)
async def admin_reveal_bet(request: AdminRevealRequest, betting: Betting, admin: Admin) -> BetResponse:
    """Reveal on a bettor's behalf with the salt they handed over."""
    bet = await betting.admin_reveal_bet(admin.id, request.pool_id, request.bettor, request.side, request.salt)
    return BetResponse(data=bet, message="Bet revealed")


@router.post("/claim", response_model=BaseResponse[int])
async def claim_payout(request: ClaimRequest, betting: Betting, caller: Caller) -> BaseResponse[int]:
    """
    Claim a winning bet.

    Losing and unrevealed bets answer with ``no_payout``; the bet is
    closed either way.
    """
    payout = await betting.claim_payout(caller.id, request.pool_id, caller.id)
    return BaseResponse(data=payout, message="Payout claimed")


@router.post("/admin-claim", response_model=BaseResponse[int])
async def admin_claim_payout(request: AdminClaimRequest, betting: Betting, admin: Admin) -> BaseResponse[int]:
    payout = await betting.admin_claim_payout(admin.id, request.pool_id, request.bettor)
    return BaseResponse(data=payout, message="Payout claimed")


@router.get("/{pool_id}/{bettor}", response_model=BetResponse)
async def get_bet(pool_id: int, bettor: str, betting: Betting) -> BetResponse:
    return BetResponse(data=betting.get_bet(pool_id, bettor))
