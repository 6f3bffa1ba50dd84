"""
Unit tests for the in-memory ledger and game hub.
"""

import pytest

from arena_shared.blockchain import (
    InMemoryTokenLedger,
    MockGameHub,
    get_game_hub,
    get_token_ledger,
    reset_chain_clients,
)
from arena_shared.config import ChainMode
from arena_shared.errors import (
    HubCallFailedError,
    InsufficientBalanceError,
    InvalidAmountError,
    MatchNotFoundError,
)


class TestInMemoryTokenLedger:
    """Tests for InMemoryTokenLedger."""

    @pytest.fixture
    def ledger(self) -> InMemoryTokenLedger:
        """Create a fresh ledger for each test."""
        ledger = InMemoryTokenLedger()
        ledger.mint("GALICE", 1_000)
        return ledger

    def test_ledger_mode(self, ledger: InMemoryTokenLedger) -> None:
        assert ledger.mode == ChainMode.MOCK

    @pytest.mark.asyncio
    async def test_transfer(self, ledger: InMemoryTokenLedger) -> None:
        record = await ledger.transfer("GALICE", "CBETTING", 400)

        assert record.tx_hash.startswith("0x")
        assert record.amount == 400
        assert await ledger.balance("GALICE") == 600
        assert await ledger.balance("CBETTING") == 400

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, ledger: InMemoryTokenLedger) -> None:
        with pytest.raises(InsufficientBalanceError):
            await ledger.transfer("GALICE", "CBETTING", 1_001)

        assert await ledger.balance("GALICE") == 1_000

    @pytest.mark.asyncio
    async def test_negative_amount(self, ledger: InMemoryTokenLedger) -> None:
        with pytest.raises(InvalidAmountError):
            await ledger.transfer("GALICE", "CBETTING", -1)

    @pytest.mark.asyncio
    async def test_transfer_history(self, ledger: InMemoryTokenLedger) -> None:
        await ledger.transfer("GALICE", "CBETTING", 100)
        await ledger.transfer("CBETTING", "GBOB", 50)

        assert len(ledger.transfers()) == 2
        assert len(ledger.transfers("GBOB")) == 1

    @pytest.mark.asyncio
    async def test_snapshot_restore(self, ledger: InMemoryTokenLedger) -> None:
        state = ledger.snapshot()
        await ledger.transfer("GALICE", "CBETTING", 100)

        ledger.restore(state)

        assert await ledger.balance("GALICE") == 1_000
        assert ledger.transfers() == []

    @pytest.mark.asyncio
    async def test_health_check(self, ledger: InMemoryTokenLedger) -> None:
        health = await ledger.health_check()

        assert health["status"] == "healthy"
        assert health["mode"] == "mock"

    def test_stats(self, ledger: InMemoryTokenLedger) -> None:
        assert ledger.get_stats()["supply"] == 1_000

        ledger.clear_all()
        assert ledger.get_stats() == {"accounts": 0, "transfers": 0, "supply": 0}


class TestMockGameHub:
    """Tests for MockGameHub."""

    @pytest.mark.asyncio
    async def test_session_lifecycle(self) -> None:
        hub = MockGameHub()
        await hub.start_game("CARENA", 1, "GALICE", "GBOB", 10, 20)
        await hub.end_game(1, player1_won=False)

        session = hub.get_session(1)
        assert session is not None
        assert session.ended is True
        assert session.player1_won is False

    @pytest.mark.asyncio
    async def test_active_session_cannot_restart(self) -> None:
        hub = MockGameHub()
        await hub.start_game("CARENA", 1, "GALICE", "GBOB", 0, 0)

        with pytest.raises(HubCallFailedError):
            await hub.start_game("CARENA", 1, "GALICE", "GBOB", 0, 0)

    @pytest.mark.asyncio
    async def test_end_unknown_session(self) -> None:
        with pytest.raises(MatchNotFoundError):
            await MockGameHub().end_game(9, player1_won=True)

    @pytest.mark.asyncio
    async def test_rejecting_hub(self) -> None:
        hub = MockGameHub()
        await hub.start_game("CARENA", 1, "GALICE", "GBOB", 0, 0)
        hub.reject_end_game = True

        with pytest.raises(HubCallFailedError):
            await hub.end_game(1, player1_won=True)
        assert hub.get_session(1).ended is False


class TestChainClients:
    """Tests for the module-level ledger and hub singletons."""

    def test_mock_mode_singletons(self) -> None:
        reset_chain_clients()
        ledger = get_token_ledger()

        assert isinstance(ledger, InMemoryTokenLedger)
        assert get_token_ledger() is ledger
        assert isinstance(get_game_hub(), MockGameHub)

        reset_chain_clients()
        assert get_token_ledger() is not ledger
        reset_chain_clients()
