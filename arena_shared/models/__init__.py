"""
Shared Models
=============

Pydantic models shared across wagering services.

Models:
- Wagering models (BetPool, BetCommit, BetSide, PoolStatus)
- Arena models (Match, ZkCommitRecord, ZkVerificationRecord, ZkMatchOutcomeRecord)
- Common API models (BaseResponse, ErrorResponse, HealthResponse)
"""

from arena_shared.models.arena import (
    Match,
    ZkCommitRecord,
    ZkCounts,
    ZkMatchOutcomeRecord,
    ZkVerificationRecord,
)
from arena_shared.models.common import (
    BaseResponse,
    ErrorResponse,
    HealthResponse,
)
from arena_shared.models.wagering import (
    BetCommit,
    BetPool,
    BetSide,
    PoolStatus,
)

__all__ = [
    # Wagering
    "BetPool",
    "BetCommit",
    "BetSide",
    "PoolStatus",
    # Arena
    "Match",
    "ZkCommitRecord",
    "ZkVerificationRecord",
    "ZkMatchOutcomeRecord",
    "ZkCounts",
    # Common
    "BaseResponse",
    "ErrorResponse",
    "HealthResponse",
]
