"""
Mock Ledger Collaborators
=========================

In-memory token ledger and game hub for development and testing.

Both take part in contract units of work, so a failed entrypoint also
undoes the transfers and hub notifications it made.

Version: 0.1.0
"""

import hashlib
import uuid
from typing import Any

from arena_shared.blockchain.client import GameHub, GameSession, TokenLedger, TransferRecord
from arena_shared.config import ChainMode
from arena_shared.errors import (
    HubCallFailedError,
    InsufficientBalanceError,
    InvalidAmountError,
    MatchNotFoundError,
)
from arena_shared.logging import get_logger

logger = get_logger(__name__)


class InMemoryTokenLedger(TokenLedger):
    """
    In-memory token ledger.

    Balances are plain integers in minor units. Data is lost on restart.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._transfers: list[TransferRecord] = []
        logger.debug("mock_ledger_initialized")

    @property
    def mode(self) -> ChainMode:
        return ChainMode.MOCK

    async def health_check(self) -> dict[str, Any]:
        """Check mock ledger health."""
        return {
            "status": "healthy",
            "mode": self.mode.value,
            "accounts": len(self._balances),
            "transfers": len(self._transfers),
        }

    def _generate_tx_hash(self) -> str:
        return "0x" + hashlib.sha256(uuid.uuid4().bytes).hexdigest()

    async def transfer(self, from_address: str, to_address: str, amount: int) -> TransferRecord:
        if amount < 0:
            raise InvalidAmountError("Transfer amount must not be negative", amount=amount)

        available = self._balances.get(from_address, 0)
        if available < amount:
            raise InsufficientBalanceError(
                address=from_address,
                available=available,
                required=amount,
            )

        self._balances[from_address] = available - amount
        self._balances[to_address] = self._balances.get(to_address, 0) + amount

        record = TransferRecord(
            tx_hash=self._generate_tx_hash(),
            from_address=from_address,
            to_address=to_address,
            amount=amount,
        )
        self._transfers.append(record)

        logger.debug(
            "mock_transfer",
            from_address=from_address,
            to_address=to_address,
            amount=amount,
        )
        return record

    async def balance(self, address: str) -> int:
        return self._balances.get(address, 0)

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def mint(self, address: str, amount: int) -> int:
        """Credit ``amount`` to ``address`` out of thin air."""
        if amount < 0:
            raise InvalidAmountError("Mint amount must not be negative", amount=amount)
        self._balances[address] = self._balances.get(address, 0) + amount
        return self._balances[address]

    def transfers(self, address: str | None = None) -> list[TransferRecord]:
        """Transfer history, optionally limited to one address."""
        if address is None:
            return list(self._transfers)
        return [
            t for t in self._transfers
            if address in (t.from_address, t.to_address)
        ]

    def snapshot(self) -> tuple[dict[str, int], int]:
        return dict(self._balances), len(self._transfers)

    def restore(self, state: tuple[dict[str, int], int]) -> None:
        balances, transfer_count = state
        self._balances = dict(balances)
        del self._transfers[transfer_count:]

    def clear_all(self) -> None:
        """Clear all mock data (for testing)."""
        self._balances.clear()
        self._transfers.clear()
        logger.debug("mock_ledger_cleared")

    def get_stats(self) -> dict[str, int]:
        """Get storage statistics."""
        return {
            "accounts": len(self._balances),
            "transfers": len(self._transfers),
            "supply": sum(self._balances.values()),
        }


class MockGameHub(GameHub):
    """
    In-memory game hub.

    Set ``reject_end_game`` to simulate a hub that refuses to record
    results.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, GameSession] = {}
        self.reject_end_game = False

    async def start_game(
        self,
        game_id: str,
        session_id: int,
        player1: str,
        player2: str,
        player1_points: int,
        player2_points: int,
    ) -> None:
        if session_id in self._sessions and not self._sessions[session_id].ended:
            raise HubCallFailedError("Session already active", session_id=session_id)

        self._sessions[session_id] = GameSession(
            game_id=game_id,
            session_id=session_id,
            player1=player1,
            player2=player2,
            player1_points=player1_points,
            player2_points=player2_points,
        )
        logger.debug("mock_hub_game_started", session_id=session_id)

    async def end_game(self, session_id: int, player1_won: bool) -> None:
        if self.reject_end_game:
            raise HubCallFailedError(session_id=session_id)

        session = self._sessions.get(session_id)
        if session is None:
            raise MatchNotFoundError("Hub has no such session", session_id=session_id)
        if session.ended:
            raise HubCallFailedError("Session already ended", session_id=session_id)

        self._sessions[session_id] = session.model_copy(
            update={"ended": True, "player1_won": player1_won}
        )
        logger.debug("mock_hub_game_ended", session_id=session_id, player1_won=player1_won)

    def get_session(self, session_id: int) -> GameSession | None:
        return self._sessions.get(session_id)

    def snapshot(self) -> dict[int, GameSession]:
        # Sessions are replaced, never mutated in place
        return dict(self._sessions)

    def restore(self, state: dict[int, GameSession]) -> None:
        self._sessions = dict(state)
