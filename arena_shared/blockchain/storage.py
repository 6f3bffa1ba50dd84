"""
Persistent Contract Storage
===========================

Keyed record store owned by a single contract.

Keys are small frozen dataclasses (one class per record kind), so each
key variant maps to exactly one record schema. Records may carry a
retention window: once it elapses on the ledger clock the record reads
as absent until it is written again. Reading a record does not extend
its window; contracts call :meth:`ContractStore.extend_ttl` explicitly.

Values are copied on the way in and on the way out, so callers can
mutate what they read without touching stored state until they write
it back.

Version: 0.1.0
"""

import copy
from dataclasses import dataclass
from typing import Any, Hashable, TypeVar

from arena_shared.blockchain.env import ContractEnv
from arena_shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StoredEntry:
    """A stored value with its expiry (ledger seconds, None = never)."""

    value: Any
    expires_at: int | None = None


class ContractStore:
    """
    Typed keyed store for one contract.

    The store registers itself with the environment so that every unit
    of work can snapshot and roll it back.
    """

    def __init__(self, env: ContractEnv, contract_id: str) -> None:
        self._env = env
        self.contract_id = contract_id
        self._entries: dict[Hashable, StoredEntry] = {}
        env.register(self)

    def _live(self, key: Hashable) -> StoredEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at < self._env.timestamp():
            return None
        return entry

    def get(self, key: Hashable, default: T | None = None) -> Any | T | None:
        """Read a copy of the record under ``key``."""
        entry = self._live(key)
        if entry is None:
            return default
        return copy.deepcopy(entry.value)

    def has(self, key: Hashable) -> bool:
        return self._live(key) is not None

    def set(self, key: Hashable, value: Any, ttl_seconds: int | None = None) -> None:
        """
        Write a record.

        Args:
            key: Typed record key
            value: Record value (copied)
            ttl_seconds: Retention window from now; None keeps it forever
        """
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._env.timestamp() + ttl_seconds
        self._entries[key] = StoredEntry(copy.deepcopy(value), expires_at)

    def extend_ttl(self, key: Hashable, ttl_seconds: int) -> bool:
        """Push a live record's expiry out to ``now + ttl_seconds``."""
        entry = self._live(key)
        if entry is None:
            return False
        if entry.expires_at is None:
            return True
        target = self._env.timestamp() + ttl_seconds
        if target > entry.expires_at:
            self._entries[key] = StoredEntry(entry.value, target)
        return True

    def remove(self, key: Hashable) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self, kind: type | None = None) -> list[Hashable]:
        """Live keys, optionally filtered by key class."""
        return [
            k for k in self._entries
            if (kind is None or isinstance(k, kind)) and self._live(k) is not None
        ]

    def __len__(self) -> int:
        return len(self.keys())

    # =========================================================================
    # Unit of work participation
    # =========================================================================

    def snapshot(self) -> dict[Hashable, StoredEntry]:
        # Stored values are never mutated in place, a shallow copy is enough
        return dict(self._entries)

    def restore(self, state: dict[Hashable, StoredEntry]) -> None:
        self._entries = dict(state)
        logger.debug("contract_store_restored", contract=self.contract_id)
