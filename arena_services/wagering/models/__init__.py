"""
Wagering API Models
===================

Request fragments shared by the wagering routes.

Version: 0.1.0
"""

from arena_services.wagering.models.requests import HexBytes, ProofSubmission


__all__ = [
    "HexBytes",
    "ProofSubmission",
]
