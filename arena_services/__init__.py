"""
Veilstar Arena Services
=======================

HTTP services for the Veilstar Arena wagering contracts.

Services:
- wagering: bet pools, zk settlement, arena matches and the verifier
"""

__all__ = [
    "wagering",
]
