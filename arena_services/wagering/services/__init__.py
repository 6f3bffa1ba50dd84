"""
Wagering Services
=================

Contracts behind the wagering API.

Services:
- BetPoolEngine: Commit-reveal parimutuel pools
- ArenaMatchContract: Match stakes and the zk round gate
- WageringRuntime: Deploys both plus the verifier into one environment

Version: 0.1.0
"""

from arena_services.wagering.services.arena import ArenaMatchContract
from arena_services.wagering.services.betting import BetPoolEngine
from arena_services.wagering.services.runtime import (
    WageringRuntime,
    get_runtime,
    reset_runtime,
    set_runtime,
)


__all__ = [
    # Betting
    "BetPoolEngine",
    # Arena
    "ArenaMatchContract",
    # Runtime
    "WageringRuntime",
    "get_runtime",
    "set_runtime",
    "reset_runtime",
]
