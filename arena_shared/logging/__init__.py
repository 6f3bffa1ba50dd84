"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and colored console output for development.

Usage:
    from arena_shared.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context
    logger.info("bet_committed", pool_id=7, bettor="GABC...", amount=10_000_000)
    logger.warning("reveal_rejected", pool_id=7, bettor="GABC...")
"""

from arena_shared.logging.logger import bind_context, clear_context, get_logger, scrub_event, setup_logging


__all__ = [
    "get_logger",
    "setup_logging",
    "bind_context",
    "clear_context",
    "scrub_event",
]
