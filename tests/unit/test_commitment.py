"""
Unit tests for bet commitments and settlement input bindings.
"""

import hashlib
import uuid

import pytest

from arena_shared.models import BetSide
from arena_shared.zk import (
    binds_settlement,
    commit,
    generate_salt,
    match_ref_for,
    scalar_bytes,
    settlement_inputs,
    verify_opening,
)
from arena_shared.zk.bn254 import curve_order


class TestCommit:
    """Tests for commit and verify_opening."""

    def test_commit_is_sha256_of_side_byte_and_salt(self) -> None:
        salt = bytes(range(32))
        expected = hashlib.sha256(b"\x01" + salt).digest()

        assert commit(BetSide.PLAYER2, salt) == expected

    def test_generate_salt_is_fresh(self) -> None:
        assert len(generate_salt()) == 32
        assert generate_salt() != generate_salt()

    def test_commit_rejects_short_salt(self) -> None:
        with pytest.raises(ValueError):
            commit(BetSide.PLAYER1, b"short")

    def test_commit_rejects_unknown_side(self) -> None:
        with pytest.raises(ValueError):
            commit(2, bytes(32))

    def test_opening_binds_side(self) -> None:
        """Only the committed (side, salt) pair opens the commitment."""
        salt = generate_salt()
        commitment = commit(BetSide.PLAYER1, salt)

        assert verify_opening(commitment, BetSide.PLAYER1, salt) is True
        assert verify_opening(commitment, BetSide.PLAYER2, salt) is False
        assert verify_opening(commitment, BetSide.PLAYER1, generate_salt()) is False

    def test_opening_never_raises_on_bad_input(self) -> None:
        salt = generate_salt()
        commitment = commit(0, salt)

        assert verify_opening(commitment, 7, salt) is False
        assert verify_opening(commitment[:31], 0, salt) is False
        assert verify_opening(commitment, 0, salt[:16]) is False


class TestSettlementInputs:
    """Tests for the [match_ref, pool_id, winner_side] binding."""

    def test_match_ref_is_a_scalar(self) -> None:
        ref = match_ref_for(uuid.UUID("6f1c1d0e-8b2a-4a59-9c55-2f1f0b7d3e21"))

        assert len(ref) == 32
        assert int.from_bytes(ref, "big") < curve_order

    def test_match_ref_is_deterministic(self) -> None:
        assert match_ref_for("match-1") == match_ref_for("match-1")
        assert match_ref_for("match-1") != match_ref_for("match-2")

    def test_settlement_inputs_layout(self) -> None:
        ref = match_ref_for("match-1")
        inputs = settlement_inputs(ref, 7, BetSide.PLAYER2)

        assert inputs == [ref, scalar_bytes(7), scalar_bytes(1)]

    def test_binds_only_exact_triple(self) -> None:
        ref = match_ref_for("match-1")
        inputs = settlement_inputs(ref, 7, BetSide.PLAYER1)

        assert binds_settlement(inputs, ref, 7, BetSide.PLAYER1) is True
        assert binds_settlement(inputs, ref, 8, BetSide.PLAYER1) is False
        assert binds_settlement(inputs, ref, 7, BetSide.PLAYER2) is False
        assert binds_settlement(inputs, match_ref_for("match-2"), 7, BetSide.PLAYER1) is False

    def test_binding_rejects_extra_or_missing_inputs(self) -> None:
        ref = match_ref_for("match-1")
        inputs = settlement_inputs(ref, 7, BetSide.PLAYER1)

        assert binds_settlement(inputs[:2], ref, 7, BetSide.PLAYER1) is False
        assert binds_settlement(inputs + [scalar_bytes(0)], ref, 7, BetSide.PLAYER1) is False

    def test_binding_fails_closed_for_oversized_match_ref(self) -> None:
        ref = b"\xff" * 32
        inputs = [ref, scalar_bytes(1), scalar_bytes(0)]

        assert binds_settlement(inputs, ref, 1, BetSide.PLAYER1) is False

    def test_scalar_bytes_range(self) -> None:
        with pytest.raises(ValueError):
            scalar_bytes(-1)
        with pytest.raises(ValueError):
            scalar_bytes(curve_order)
