"""
Wagering Runtime
================

Wires the contract environment, ledger, hub and the three contracts
together from settings. Routes share one runtime per process.

Version: 0.1.0
"""

from arena_shared.blockchain import (
    ContractEnv,
    GameHub,
    TokenLedger,
    get_game_hub,
    get_token_ledger,
)
from arena_shared.config import Settings, settings
from arena_shared.logging import get_logger
from arena_shared.zk import Groth16VerifierContract

from arena_services.wagering.services.arena import ArenaMatchContract
from arena_services.wagering.services.betting import BetPoolEngine

logger = get_logger(__name__)


class WageringRuntime:
    """All wagering contracts deployed into one environment."""

    def __init__(
        self,
        config: Settings,
        env: ContractEnv | None = None,
        ledger: TokenLedger | None = None,
        hub: GameHub | None = None,
    ) -> None:
        self.config = config
        self.env = env or ContractEnv()
        self.ledger = ledger or get_token_ledger()
        self.hub = hub or get_game_hub()

        chain = config.chain
        self.verifier = Groth16VerifierContract(
            self.env,
            admin=chain.admin_address,
            address=chain.verifier_contract,
        )
        self.betting = BetPoolEngine(
            self.env,
            self.ledger,
            admin=chain.admin_address,
            treasury=chain.treasury_address,
            address=chain.betting_contract,
            config=config.betting,
        )
        self.arena = ArenaMatchContract(
            self.env,
            self.ledger,
            self.hub,
            admin=chain.admin_address,
            treasury=chain.treasury_address,
            address=chain.arena_contract,
            config=config.arena,
        )

        logger.info(
            "wagering_runtime_ready",
            mode=chain.mode.value,
            betting=chain.betting_contract,
            arena=chain.arena_contract,
            verifier=chain.verifier_contract,
        )


# Global instance
_runtime: WageringRuntime | None = None


def get_runtime() -> WageringRuntime:
    """Get the process-wide runtime, building it on first use."""
    global _runtime

    if _runtime is None:
        _runtime = WageringRuntime(settings)

    return _runtime


def set_runtime(runtime: WageringRuntime) -> None:
    global _runtime
    _runtime = runtime


def reset_runtime() -> None:
    """Drop the runtime so the next call rebuilds it."""
    global _runtime
    _runtime = None
