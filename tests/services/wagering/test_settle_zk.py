"""
Tests for proof-gated pool settlement.
"""

import pytest
import pytest_asyncio

from arena_shared.errors import (
    PoolAlreadySettledError,
    UnauthorizedError,
    ZkProofInvalidError,
    ZkVerifierNotConfiguredError,
)
from arena_shared.models import BetSide, PoolStatus
from arena_shared.zk import match_ref_for, scalar_bytes, settlement_inputs

from tests.conftest import ADMIN, ALICE, VERIFIER_ADDRESS, TrapdoorKey

MATCH_REF = match_ref_for("b3a7c2d4-1e5f-4a6b-8c9d-0e1f2a3b4c5d")


@pytest_asyncio.fixture
async def zk_betting(betting, verifier, settlement_key: TrapdoorKey):
    await settlement_key.install(verifier)
    await betting.set_zk_verifier(ADMIN, VERIFIER_ADDRESS, settlement_key.vk_id)
    return betting


class TestSettlePoolZk:
    """Tests for settle_pool_zk."""

    @pytest.mark.asyncio
    async def test_valid_proof_settles(self, zk_betting, settlement_key: TrapdoorKey) -> None:
        pool_id = await zk_betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, pool_id, BetSide.PLAYER2)

        pool = await zk_betting.settle_pool_zk(
            ADMIN,
            pool_id,
            BetSide.PLAYER2,
            settlement_key.vk_id,
            settlement_key.prove(inputs),
            inputs,
        )

        assert pool.status == PoolStatus.SETTLED
        assert pool.winner_side == BetSide.PLAYER2

    @pytest.mark.asyncio
    async def test_proof_for_other_pool_is_rejected(self, zk_betting, settlement_key: TrapdoorKey) -> None:
        """A valid proof for pool 1 cannot settle pool 2."""
        first = await zk_betting.create_pool(ADMIN, MATCH_REF)
        second = await zk_betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, first, BetSide.PLAYER1)

        with pytest.raises(ZkProofInvalidError):
            await zk_betting.settle_pool_zk(
                ADMIN,
                second,
                BetSide.PLAYER1,
                settlement_key.vk_id,
                settlement_key.prove(inputs),
                inputs,
            )
        assert zk_betting.get_pool(second).status == PoolStatus.OPEN

    @pytest.mark.asyncio
    async def test_proof_for_other_winner_is_rejected(self, zk_betting, settlement_key: TrapdoorKey) -> None:
        pool_id = await zk_betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, pool_id, BetSide.PLAYER1)

        with pytest.raises(ZkProofInvalidError):
            await zk_betting.settle_pool_zk(
                ADMIN,
                pool_id,
                BetSide.PLAYER2,
                settlement_key.vk_id,
                settlement_key.prove(inputs),
                inputs,
            )

    @pytest.mark.asyncio
    async def test_bound_inputs_with_bad_proof(self, zk_betting, settlement_key: TrapdoorKey) -> None:
        pool_id = await zk_betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, pool_id, BetSide.PLAYER1)
        forged = settlement_key.prove([MATCH_REF, scalar_bytes(pool_id), scalar_bytes(1)])

        with pytest.raises(ZkProofInvalidError):
            await zk_betting.settle_pool_zk(ADMIN, pool_id, BetSide.PLAYER1, settlement_key.vk_id, forged, inputs)
        assert zk_betting.get_pool(pool_id).status == PoolStatus.OPEN

    @pytest.mark.asyncio
    async def test_malformed_submission(self, zk_betting, settlement_key: TrapdoorKey) -> None:
        pool_id = await zk_betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, pool_id, BetSide.PLAYER1)
        proof = settlement_key.prove(inputs)

        with pytest.raises(ZkProofInvalidError):
            await zk_betting.settle_pool_zk(ADMIN, pool_id, BetSide.PLAYER1, settlement_key.vk_id, proof[:200], inputs)
        with pytest.raises(ZkProofInvalidError):
            await zk_betting.settle_pool_zk(ADMIN, pool_id, BetSide.PLAYER1, settlement_key.vk_id, proof, [])
        with pytest.raises(ZkProofInvalidError):
            await zk_betting.settle_pool_zk(ADMIN, pool_id, BetSide.PLAYER1, b"\x00" * 32, proof, inputs)

    @pytest.mark.asyncio
    async def test_not_configured(self, betting, settlement_key: TrapdoorKey) -> None:
        pool_id = await betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, pool_id, BetSide.PLAYER1)

        with pytest.raises(ZkVerifierNotConfiguredError):
            await betting.settle_pool_zk(
                ADMIN,
                pool_id,
                BetSide.PLAYER1,
                settlement_key.vk_id,
                settlement_key.prove(inputs),
                inputs,
            )

    @pytest.mark.asyncio
    async def test_requires_admin(self, zk_betting, settlement_key: TrapdoorKey) -> None:
        pool_id = await zk_betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, pool_id, BetSide.PLAYER1)

        with pytest.raises(UnauthorizedError):
            await zk_betting.settle_pool_zk(
                ALICE,
                pool_id,
                BetSide.PLAYER1,
                settlement_key.vk_id,
                settlement_key.prove(inputs),
                inputs,
            )

    @pytest.mark.asyncio
    async def test_replay_on_settled_pool(self, zk_betting, settlement_key: TrapdoorKey) -> None:
        pool_id = await zk_betting.create_pool(ADMIN, MATCH_REF)
        inputs = settlement_inputs(MATCH_REF, pool_id, BetSide.PLAYER1)
        await zk_betting.settle_pool(ADMIN, pool_id, BetSide.PLAYER1)

        with pytest.raises(PoolAlreadySettledError):
            await zk_betting.settle_pool_zk(
                ADMIN,
                pool_id,
                BetSide.PLAYER1,
                settlement_key.vk_id,
                settlement_key.prove(inputs),
                inputs,
            )
