"""
Wagering Service
================

Commit-reveal bet pools, Groth16 settlement and arena matches behind
one FastAPI application.

Features:
- Bet pool lifecycle (create, commit, lock, reveal, settle, claim, refund)
- zk-gated settlement bound to the pool's match reference
- Arena match stakes and the zk round gate
- Verification key registry
- Treasury fee sweeps

Port: 8010
"""

__version__ = "0.1.0"
