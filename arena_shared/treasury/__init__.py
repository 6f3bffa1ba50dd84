"""
Treasury Module
===============

Protocol fee computation and accrual.

Usage:
    from arena_shared.treasury import FeeLedger, calc_fee

    fee = calc_fee(10_000_000, bps=100)  # 100_000
"""

from arena_shared.treasury.fees import BPS_DENOMINATOR, FeeLedger, calc_fee


__all__ = [
    "BPS_DENOMINATOR",
    "FeeLedger",
    "calc_fee",
]
