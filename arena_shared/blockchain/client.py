"""
Ledger Client Interface
=======================

Abstract collaborators used by the wagering contracts:

- :class:`TokenLedger` moves integer minor-unit amounts between addresses
  (escrow intake, payouts, refunds, treasury sweeps).
- :class:`GameHub` is notified when a match session starts and ends.

Both are called synchronously from inside a contract's unit of work;
a raised error aborts the whole entrypoint.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from arena_shared.config import ChainMode, settings
from arena_shared.logging import get_logger

logger = get_logger(__name__)


class TransferRecord(BaseModel):
    """A completed token transfer."""

    tx_hash: str = Field(..., description="Ledger transaction hash")
    from_address: str
    to_address: str
    amount: int = Field(..., ge=0, description="Minor units (stroops)")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class GameSession(BaseModel):
    """Hub-side view of a match session."""

    game_id: str
    session_id: int
    player1: str
    player2: str
    player1_points: int = 0
    player2_points: int = 0
    ended: bool = False
    player1_won: bool | None = None


class TokenLedger(ABC):
    """
    Abstract token ledger.

    Implements the Strategy pattern for different chain modes.
    """

    @property
    @abstractmethod
    def mode(self) -> ChainMode:
        """Get the chain mode."""
        ...

    @abstractmethod
    async def transfer(self, from_address: str, to_address: str, amount: int) -> TransferRecord:
        """
        Move ``amount`` from one address to another.

        Raises:
            InsufficientBalanceError: source balance is too low
            InvalidAmountError: amount is negative
        """
        ...

    @abstractmethod
    async def balance(self, address: str) -> int:
        """Current balance of ``address`` in minor units."""
        ...

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check ledger health."""
        ...


class GameHub(ABC):
    """Session registry notified by game contracts."""

    @abstractmethod
    async def start_game(
        self,
        game_id: str,
        session_id: int,
        player1: str,
        player2: str,
        player1_points: int,
        player2_points: int,
    ) -> None:
        ...

    @abstractmethod
    async def end_game(self, session_id: int, player1_won: bool) -> None:
        ...


# Global instances
_ledger: TokenLedger | None = None
_hub: GameHub | None = None


def get_token_ledger() -> TokenLedger:
    """
    Get the configured token ledger instance.

    Returns:
        TokenLedger instance based on settings
    """
    global _ledger

    if _ledger is None:
        mode = settings.chain.mode

        if mode == ChainMode.MOCK:
            from arena_shared.blockchain.mock import InMemoryTokenLedger

            _ledger = InMemoryTokenLedger()
        elif mode in (ChainMode.TESTNET, ChainMode.MAINNET):
            raise NotImplementedError(
                f"Chain mode '{mode.value}' is not implemented. "
                "Use CHAIN_MODE=mock."
            )
        else:
            raise ValueError(f"Unknown chain mode: {mode}")

        logger.info("token_ledger_initialized", mode=mode.value)

    return _ledger


def get_game_hub() -> GameHub:
    """Get the configured game hub instance."""
    global _hub

    if _hub is None:
        mode = settings.chain.mode
        if mode != ChainMode.MOCK:
            raise NotImplementedError(f"Chain mode '{mode.value}' is not implemented.")

        from arena_shared.blockchain.mock import MockGameHub

        _hub = MockGameHub()
        logger.info("game_hub_initialized", mode=mode.value)

    return _hub


def reset_chain_clients() -> None:
    """Reset the ledger and hub to be re-initialized."""
    global _ledger, _hub
    _ledger = None
    _hub = None
