"""
Fee Ledger
==========

Basis-point fee math plus accrual and sweep bookkeeping.

Fees are charged on top of a deposit and always rounded up, so no
deposit above zero is ever fee-free:

    fee = ceil(amount * bps / 10_000)

Accrued fees live in the owning contract's store and are swept to the
treasury at most once per sweep interval.

Version: 0.1.0
"""

from dataclasses import dataclass

from arena_shared.blockchain.storage import ContractStore
from arena_shared.errors import NothingToSweepError, SweepTooEarlyError

BPS_DENOMINATOR = 10_000


@dataclass(frozen=True)
class FeeAccruedKey:
    pass


@dataclass(frozen=True)
class LastSweepKey:
    pass


def calc_fee(amount: int, bps: int) -> int:
    """
    Fee owed on ``amount`` at ``bps`` basis points, rounded up.

    Example:
        >>> calc_fee(10_000_000, 100)
        100000
        >>> calc_fee(1, 10)
        1
    """
    if amount <= 0 or bps <= 0:
        return 0
    return (amount * bps + BPS_DENOMINATOR - 1) // BPS_DENOMINATOR


class FeeLedger:
    """Accrued-fee counter and sweep clock for one contract."""

    def __init__(self, store: ContractStore, bps: int, sweep_interval_seconds: int) -> None:
        self._store = store
        self.bps = bps
        self.sweep_interval_seconds = sweep_interval_seconds

    def fee_for(self, amount: int) -> int:
        return calc_fee(amount, self.bps)

    def accrued(self) -> int:
        return self._store.get(FeeAccruedKey(), 0)

    def last_sweep(self) -> int:
        return self._store.get(LastSweepKey(), 0)

    def accrue(self, amount: int) -> int:
        """Add collected fees to the accrual counter; returns the new total."""
        total = self.accrued() + amount
        self._store.set(FeeAccruedKey(), total)
        return total

    def sweepable(self, now: int) -> int:
        """
        Amount that may be swept at ``now``.

        Raises:
            SweepTooEarlyError: last sweep is within the sweep interval
            NothingToSweepError: nothing has accrued
        """
        last = self.last_sweep()
        if last > 0 and max(now - last, 0) < self.sweep_interval_seconds:
            raise SweepTooEarlyError(
                last_sweep=last,
                next_sweep=last + self.sweep_interval_seconds,
            )

        accrued = self.accrued()
        if accrued <= 0:
            raise NothingToSweepError()
        return accrued

    def mark_swept(self, now: int) -> None:
        self._store.set(FeeAccruedKey(), 0)
        self._store.set(LastSweepKey(), now)
