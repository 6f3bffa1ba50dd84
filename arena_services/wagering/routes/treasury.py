"""
Treasury Routes
===============

Fee balances and sweeps for both contracts.

Version: 0.1.0
"""

from enum import Enum
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from arena_shared.auth import User, require_admin
from arena_shared.logging import get_logger
from arena_shared.models import BaseResponse

from arena_services.wagering.services import WageringRuntime, get_runtime


logger = get_logger(__name__)
router = APIRouter()

Runtime = Annotated[WageringRuntime, Depends(get_runtime)]
Admin = Annotated[User, Depends(require_admin)]


class FeeSource(str, Enum):
    BETTING = "betting"
    ARENA = "arena"


class TreasuryStatus(BaseModel):
    treasury: str
    betting_fees_accrued: int = Field(..., ge=0)
    arena_fees_accrued: int = Field(..., ge=0)


class SweepRequest(BaseModel):
    source: FeeSource = FeeSource.BETTING


class TreasuryAddressRequest(BaseModel):
    treasury: str


@router.get("", response_model=BaseResponse[TreasuryStatus])
async def get_treasury(runtime: Runtime) -> BaseResponse[TreasuryStatus]:
    return BaseResponse(
        data=TreasuryStatus(
            treasury=runtime.betting.get_treasury(),
            betting_fees_accrued=runtime.betting.get_fee_accrued(),
            arena_fees_accrued=runtime.arena.get_fee_accrued(),
        )
    )


@router.post("/sweep", response_model=BaseResponse[int])
async def sweep_treasury(request: SweepRequest, runtime: Runtime, admin: Admin) -> BaseResponse[int]:
    """
    Move accrued fees to the treasury.

    At most one sweep per contract per sweep interval.
    """
    contract = runtime.betting if request.source == FeeSource.BETTING else runtime.arena
    amount = await contract.sweep_treasury(admin.id)
    return BaseResponse(data=amount, message=f"Swept {request.source.value} fees")


@router.put("/address", response_model=BaseResponse[None])
async def set_treasury(request: TreasuryAddressRequest, runtime: Runtime, admin: Admin) -> BaseResponse[None]:
    async with runtime.env.atomic("set_treasury"):
        await runtime.betting.set_treasury(admin.id, request.treasury)
        await runtime.arena.set_treasury(admin.id, request.treasury)
    return BaseResponse(message="Treasury updated")
