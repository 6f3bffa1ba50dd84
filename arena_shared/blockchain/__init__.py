"""
Blockchain Module
=================

Runtime and collaborators for the wagering contracts.

Supports:
- Mock (development/testing)

Features:
- Contract environment with all-or-nothing units of work
- Persistent keyed storage with retention windows
- Token ledger and game hub interfaces

Usage:
    from arena_shared.blockchain import ContractEnv, ContractStore, InMemoryTokenLedger

    env = ContractEnv()
    ledger = InMemoryTokenLedger()
    env.register(ledger)

    async with env.atomic("commit_bet"):
        await ledger.transfer("GBETTOR", "CBETTING", 10_100_000)
"""

from arena_shared.blockchain.client import (
    GameHub,
    GameSession,
    TokenLedger,
    TransferRecord,
    get_game_hub,
    get_token_ledger,
    reset_chain_clients,
)
from arena_shared.blockchain.env import ContractEnv, ContractEvent, EventLog, Transactional
from arena_shared.blockchain.mock import InMemoryTokenLedger, MockGameHub
from arena_shared.blockchain.storage import ContractStore


__all__ = [
    # Runtime
    "ContractEnv",
    "ContractEvent",
    "EventLog",
    "Transactional",
    "ContractStore",
    # Collaborators
    "TokenLedger",
    "GameHub",
    "TransferRecord",
    "GameSession",
    "get_token_ledger",
    "get_game_hub",
    "reset_chain_clients",
    # Implementations
    "InMemoryTokenLedger",
    "MockGameHub",
]
