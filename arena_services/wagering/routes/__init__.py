"""
Wagering Routes
===============

API route handlers for the Wagering Service.
"""

from arena_services.wagering.routes import bets, matches, pools, treasury, verifier


__all__ = ["bets", "matches", "pools", "treasury", "verifier"]
