"""
Veilstar Arena Shared Library
=============================

Runtime, cryptography and ambient utilities shared by the wagering
contracts and their HTTP service.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - errors: Contract error taxonomy
    - auth: JWT authentication and authorization
    - blockchain: Contract environment, storage, ledger and hub collaborators
    - treasury: Fee math and accrual
    - zk: Commitments, BN254 codecs and Groth16 verification
    - models: Shared Pydantic models

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Veilstar Arena Team"

from arena_shared.config import settings
from arena_shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
