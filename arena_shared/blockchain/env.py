"""
Contract Environment
====================

Execution environment shared by every contract deployed on one ledger.

Each entrypoint runs inside :meth:`ContractEnv.atomic`, which

- serializes calls across all contracts of the environment,
- snapshots every registered participant (stores, in-memory ledgers,
  hubs, the event log) before the call,
- restores all of them if the call raises, so a failed entrypoint leaves
  no partial state behind.

Cross-contract calls made from inside a unit of work join it instead of
opening a new one, so a failing nested call rolls back the caller too.

Version: 0.1.0
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from arena_shared.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class Transactional(Protocol):
    """State that can be captured and rolled back by a unit of work."""

    def snapshot(self) -> Any:
        ...

    def restore(self, state: Any) -> None:
        ...


class ContractEvent(BaseModel):
    """Structured event published by a contract on success."""

    contract: str
    topic: str
    key: Any = None
    data: Any = None
    ledger_timestamp: int
    published_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class EventLog:
    """Append-only event buffer; events of rolled-back calls are dropped."""

    def __init__(self) -> None:
        self._events: list[ContractEvent] = []

    def append(self, event: ContractEvent) -> None:
        self._events.append(event)

    def all(self) -> list[ContractEvent]:
        return list(self._events)

    def by_topic(self, topic: str, contract: str | None = None) -> list[ContractEvent]:
        return [
            e for e in self._events
            if e.topic == topic and (contract is None or e.contract == contract)
        ]

    def snapshot(self) -> int:
        return len(self._events)

    def restore(self, state: int) -> None:
        del self._events[state:]

    def __len__(self) -> int:
        return len(self._events)


class ContractEnv:
    """
    Shared ledger environment.

    Holds the ledger clock, the serialization lock and the set of
    transactional participants touched by contract calls.
    """

    def __init__(self, timestamp: int | None = None) -> None:
        self._lock = asyncio.Lock()
        self._in_unit: ContextVar[bool] = ContextVar(f"contract_env_{id(self)}", default=False)
        self._participants: list[Transactional] = []
        self._timestamp = timestamp
        self._contracts: dict[str, Any] = {}
        self.events = EventLog()
        self.register(self.events)

    # =========================================================================
    # Clock
    # =========================================================================

    def timestamp(self) -> int:
        """Current ledger timestamp (unix seconds)."""
        if self._timestamp is not None:
            return self._timestamp
        return int(time.time())

    def set_timestamp(self, timestamp: int) -> None:
        """Pin the ledger clock (tests, replays)."""
        self._timestamp = timestamp

    def advance(self, seconds: int) -> int:
        """Move a pinned clock forward."""
        self._timestamp = self.timestamp() + seconds
        return self._timestamp

    # =========================================================================
    # Contract registry
    # =========================================================================

    def deploy(self, address: str, contract: Any) -> None:
        """Make ``contract`` reachable by address for cross-contract calls."""
        self._contracts[address] = contract
        logger.info("contract_deployed", address=address, contract=type(contract).__name__)

    def resolve(self, address: str) -> Any | None:
        return self._contracts.get(address)

    # =========================================================================
    # Units of work
    # =========================================================================

    def register(self, participant: Transactional) -> None:
        """Enlist state that must roll back with failed calls."""
        if not isinstance(participant, Transactional):
            raise TypeError(f"{type(participant).__name__} cannot take part in units of work")
        if participant not in self._participants:
            self._participants.append(participant)

    @property
    def in_unit(self) -> bool:
        return self._in_unit.get()

    @asynccontextmanager
    async def atomic(self, operation: str) -> AsyncIterator[None]:
        """
        Run one entrypoint as an all-or-nothing unit of work.

        Args:
            operation: Entrypoint name, used for logging
        """
        if self._in_unit.get():
            yield
            return

        async with self._lock:
            snapshots = [(p, p.snapshot()) for p in self._participants]
            token = self._in_unit.set(True)
            try:
                yield
            except BaseException as e:
                for participant, state in reversed(snapshots):
                    participant.restore(state)
                logger.debug(
                    "unit_of_work_rolled_back",
                    operation=operation,
                    error_type=type(e).__name__,
                )
                raise
            finally:
                self._in_unit.reset(token)

    def publish(self, contract: str, topic: str, key: Any = None, data: Any = None) -> ContractEvent:
        """Publish an event for observers."""
        event = ContractEvent(
            contract=contract,
            topic=topic,
            key=key,
            data=data,
            ledger_timestamp=self.timestamp(),
        )
        self.events.append(event)
        logger.info(
            "contract_event",
            contract=contract,
            topic=topic,
            key=key,
        )
        return event
