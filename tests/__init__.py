"""
Veilstar Arena Test Suite
=========================

Test organization:
- tests/unit/               - Unit tests (codecs, storage, fees, verifier)
- tests/services/wagering/  - Contract scenarios and HTTP API tests

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=arena_shared       # With coverage
"""
