"""
Groth16 Verifier Contract
=========================

Holds Groth16 verification keys by id and checks proofs against them
with the BN254 pairing equation::

    e(-A, B) * e(alpha, beta) * e(vk_x, gamma) * e(C, delta) == 1

where ``vk_x = ic[0] + sum(input_i * ic[i + 1])``.

Verification is a normal outcome, not an exceptional one: an unknown
key, a malformed proof or a failing pairing all return ``False``.

Version: 0.1.0
"""

import asyncio
import time
from dataclasses import dataclass

from pydantic import ValidationError

from arena_shared.blockchain.env import ContractEnv
from arena_shared.blockchain.storage import ContractStore
from arena_shared.errors import (
    InvalidVerificationKeyError,
    UnauthorizedError,
    VerificationKeyNotFoundError,
)
from arena_shared.logging import get_logger
from arena_shared.zk import bn254
from arena_shared.zk.models import PROOF_BYTES, VK_ID_BYTES, VerificationKey

logger = get_logger(__name__)


@dataclass(frozen=True)
class AdminKey:
    pass


@dataclass(frozen=True)
class VkKey:
    vk_id: bytes


@dataclass(frozen=True)
class VkUsedKey:
    vk_id: bytes


def groth16_verify(vk: VerificationKey, proof: bytes, public_inputs: list[bytes]) -> bool:
    """
    Check one proof against a key.

    Key points are trusted to have passed installation checks; only the
    proof points and scalars are fully validated here.

    Raises:
        ValueError: malformed proof, key or public inputs
    """
    if len(proof) != PROOF_BYTES:
        raise ValueError(f"proof must be {PROOF_BYTES} bytes")
    if len(vk.ic) != len(public_inputs) + 1:
        raise ValueError("public input count does not match the key")

    proof_a = bn254.decode_g1(proof[0:64])
    proof_b = bn254.decode_g2(proof[64:192])
    proof_c = bn254.decode_g1(proof[192:256])

    vk_x = bn254.decode_g1(vk.ic[0])
    for raw_input, ic_point in zip(public_inputs, vk.ic[1:]):
        scalar = bn254.decode_scalar(bytes(raw_input))
        term = bn254.multiply(bn254.decode_g1(ic_point), scalar)
        vk_x = bn254.add(vk_x, term)

    return bn254.pairing_check([
        (bn254.neg(proof_a), proof_b),
        (bn254.decode_g1(vk.alpha_g1), bn254.decode_g2(vk.beta_g2, check_subgroup=False)),
        (vk_x, bn254.decode_g2(vk.gamma_g2, check_subgroup=False)),
        (proof_c, bn254.decode_g2(vk.delta_g2, check_subgroup=False)),
    ])


class Groth16VerifierContract:
    """
    Verification key registry and proof checker.

    Other contracts call :meth:`verify_round_proof` by address through
    the shared :class:`ContractEnv`.
    """

    def __init__(self, env: ContractEnv, admin: str, address: str) -> None:
        self._env = env
        self.address = address
        self._store = ContractStore(env, address)
        self._store.set(AdminKey(), admin)
        env.deploy(address, self)

    def get_admin(self) -> str:
        return self._store.get(AdminKey())

    def _require_admin(self, caller: str) -> None:
        if caller != self.get_admin():
            raise UnauthorizedError(caller=caller)

    async def set_verification_key(
        self,
        caller: str,
        vk_id: bytes,
        alpha_g1: bytes,
        beta_g2: bytes,
        gamma_g2: bytes,
        delta_g2: bytes,
        ic: list[bytes],
    ) -> VerificationKey:
        """
        Install a verification key under ``vk_id`` (admin only).

        Every point is decoded and checked on the curve (G2 points also in
        the prime-order subgroup) before the key is stored. A key that has
        already verified a proof cannot be replaced.

        Raises:
            UnauthorizedError: caller is not the admin
            InvalidVerificationKeyError: malformed id or key material
        """
        async with self._env.atomic("set_verification_key"):
            self._require_admin(caller)

            if len(vk_id) != VK_ID_BYTES:
                raise InvalidVerificationKeyError("vk_id must be 32 bytes")
            if not ic:
                raise InvalidVerificationKeyError("ic must contain at least one point")
            if self._store.has(VkUsedKey(vk_id)):
                raise InvalidVerificationKeyError(
                    "Key has verified proofs and cannot be replaced",
                    vk_id=vk_id.hex(),
                )

            try:
                vk = VerificationKey(
                    alpha_g1=alpha_g1,
                    beta_g2=beta_g2,
                    gamma_g2=gamma_g2,
                    delta_g2=delta_g2,
                    ic=ic,
                )
                await asyncio.to_thread(self._check_points, vk)
            except (ValidationError, ValueError) as e:
                raise InvalidVerificationKeyError(str(e), vk_id=vk_id.hex()) from e

            self._store.set(VkKey(vk_id), vk)

        logger.info(
            "verification_key_installed",
            vk_id=vk_id.hex(),
            n_public=vk.n_public,
        )
        return vk

    @staticmethod
    def _check_points(vk: VerificationKey) -> None:
        bn254.decode_g1(vk.alpha_g1)
        for point in (vk.beta_g2, vk.gamma_g2, vk.delta_g2):
            bn254.decode_g2(point)
        for point in vk.ic:
            bn254.decode_g1(point)

    def get_verification_key(self, vk_id: bytes) -> VerificationKey:
        vk = self._store.get(VkKey(bytes(vk_id)))
        if vk is None:
            raise VerificationKeyNotFoundError(vk_id=bytes(vk_id).hex())
        return vk

    async def verify_round_proof(
        self,
        vk_id: bytes,
        proof: bytes,
        public_inputs: list[bytes],
    ) -> bool:
        """
        Verify ``proof`` for ``public_inputs`` under key ``vk_id``.

        Returns:
            True only if the key exists, the proof and inputs are well
            formed and the pairing equation holds. Never raises.
        """
        async with self._env.atomic("verify_round_proof"):
            vk: VerificationKey | None = self._store.get(VkKey(bytes(vk_id)))
            if vk is None:
                logger.info("zk_proof_rejected", vk_id=bytes(vk_id).hex(), reason="unknown_key")
                return False

            start_time = time.time()
            try:
                valid = await asyncio.to_thread(groth16_verify, vk, bytes(proof), list(public_inputs))
            except ValueError as e:
                logger.info("zk_proof_rejected", vk_id=bytes(vk_id).hex(), reason=str(e))
                return False

            verification_time_ms = int((time.time() - start_time) * 1000)
            if valid:
                self._store.set(VkUsedKey(bytes(vk_id)), True)

        logger.info(
            "zk_proof_verified",
            vk_id=bytes(vk_id).hex(),
            valid=valid,
            public_inputs=len(public_inputs),
            verification_time_ms=verification_time_ms,
        )
        return valid
