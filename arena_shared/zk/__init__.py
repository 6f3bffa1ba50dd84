"""
ZK-SNARK Integration Module
===========================

Commitments, BN254 codecs and Groth16 verification for the wagering
contracts.

Usage:
    from arena_shared.zk import Groth16VerifierContract, commit, generate_salt

    salt = generate_salt()
    commitment = commit(BetSide.PLAYER1, salt)

    verifier = Groth16VerifierContract(env, admin="GADMIN", address="CVERIFIER")
    ok = await verifier.verify_round_proof(vk_id, proof_bytes, public_inputs)

Version: 0.1.0
"""

from arena_shared.zk.commitment import commit, generate_salt, verify_opening
from arena_shared.zk.inputs import (
    binds_outcome,
    binds_settlement,
    is_scalar,
    match_ref_for,
    outcome_inputs,
    scalar_bytes,
    settlement_inputs,
)
from arena_shared.zk.models import (
    PROOF_BYTES,
    Groth16Proof,
    VerificationKey,
    VerificationResult,
    derive_vk_id,
)
from arena_shared.zk.verifier import Groth16VerifierContract, groth16_verify


__all__ = [
    # Commitments
    "commit",
    "verify_opening",
    "generate_salt",
    # Public inputs
    "scalar_bytes",
    "match_ref_for",
    "settlement_inputs",
    "binds_settlement",
    "is_scalar",
    "outcome_inputs",
    "binds_outcome",
    # Verifier
    "Groth16VerifierContract",
    "groth16_verify",
    # Models
    "PROOF_BYTES",
    "Groth16Proof",
    "VerificationKey",
    "VerificationResult",
    "derive_vk_id",
]
