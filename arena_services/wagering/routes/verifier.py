"""
Verifier Routes
===============

Verification key registry and standalone proof checks.

Version: 0.1.0
"""

import json
import time
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from arena_shared.auth import User, require_admin
from arena_shared.logging import get_logger
from arena_shared.models import BaseResponse
from arena_shared.zk import (
    Groth16Proof,
    Groth16VerifierContract,
    VerificationKey,
    VerificationResult,
    derive_vk_id,
    scalar_bytes,
)

from arena_services.wagering.models import HexBytes, ProofSubmission
from arena_services.wagering.services import get_runtime


logger = get_logger(__name__)
router = APIRouter()


def get_verifier() -> Groth16VerifierContract:
    return get_runtime().verifier


Verifier = Annotated[Groth16VerifierContract, Depends(get_verifier)]
Admin = Annotated[User, Depends(require_admin)]


# ============================================================================
# Request Models
# ============================================================================


class InstallKeyRequest(BaseModel):
    """Key material in on-chain byte layout."""

    vk_id: HexBytes
    alpha_g1: HexBytes
    beta_g2: HexBytes
    gamma_g2: HexBytes
    delta_g2: HexBytes
    ic: list[HexBytes]


class InstallSnarkjsKeyRequest(BaseModel):
    """A snarkjs ``verification_key.json`` file, passed as its raw text.

    Without ``vk_id`` the id is the SHA-256 of that text, the same id
    the key file hashes to on disk.
    """

    vk_id: HexBytes | None = None
    verification_key_json: str = Field(..., description="Raw verification_key.json contents")


class SnarkjsVerifyRequest(BaseModel):
    """A snarkjs ``proof.json`` document with its ``public.json`` signals."""

    vk_id: HexBytes
    proof: dict[str, Any] = Field(..., description="snarkjs Groth16 proof")
    public_signals: list[str] = Field(..., description="Decimal public signals")


class KeyResponse(BaseResponse[VerificationKey]):
    vk_id: str


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/keys", response_model=KeyResponse, status_code=status.HTTP_201_CREATED)
async def install_key(request: InstallKeyRequest, verifier: Verifier, admin: Admin) -> KeyResponse:
    vk = await verifier.set_verification_key(
        admin.id,
        request.vk_id,
        request.alpha_g1,
        request.beta_g2,
        request.gamma_g2,
        request.delta_g2,
        request.ic,
    )
    return KeyResponse(data=vk, vk_id=request.vk_id.hex(), message="Verification key installed")


@router.post("/keys/snarkjs", response_model=KeyResponse, status_code=status.HTTP_201_CREATED)
async def install_snarkjs_key(
    request: InstallSnarkjsKeyRequest,
    verifier: Verifier,
    admin: Admin,
) -> KeyResponse:
    """Install a key exported by ``snarkjs zkey export verificationkey``."""
    try:
        parsed = VerificationKey.from_snarkjs(json.loads(request.verification_key_json))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning("snarkjs_key_rejected", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid snarkjs verification key: {e}",
        ) from e

    vk_id = request.vk_id or derive_vk_id(request.verification_key_json)

    vk = await verifier.set_verification_key(
        admin.id,
        vk_id,
        parsed.alpha_g1,
        parsed.beta_g2,
        parsed.gamma_g2,
        parsed.delta_g2,
        parsed.ic,
    )
    return KeyResponse(data=vk, vk_id=vk_id.hex(), message="Verification key installed")


@router.get("/keys/{vk_id}", response_model=KeyResponse)
async def get_key(vk_id: str, verifier: Verifier) -> KeyResponse:
    try:
        raw = bytes.fromhex(vk_id.removeprefix("0x"))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="vk_id must be hex",
        ) from e
    return KeyResponse(data=verifier.get_verification_key(raw), vk_id=raw.hex())


@router.post("/verify", response_model=VerificationResult)
async def verify_proof(request: ProofSubmission, verifier: Verifier) -> VerificationResult:
    """
    Check a proof without touching any pool or match.

    Returns ``valid: false`` for unknown keys and malformed proofs.
    """
    start_time = time.time()
    valid = await verifier.verify_round_proof(request.vk_id, request.proof, request.public_inputs)

    return VerificationResult(
        valid=valid,
        vk_id=request.vk_id.hex(),
        public_inputs=len(request.public_inputs),
        verification_time_ms=int((time.time() - start_time) * 1000),
    )


@router.post("/verify/snarkjs", response_model=VerificationResult)
async def verify_snarkjs_proof(request: SnarkjsVerifyRequest, verifier: Verifier) -> VerificationResult:
    """Check a proof exported by ``snarkjs groth16 prove``."""
    try:
        proof = Groth16Proof.from_snarkjs(request.proof).to_bytes()
        public_inputs = [scalar_bytes(int(signal)) for signal in request.public_signals]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning("snarkjs_proof_rejected", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid snarkjs proof: {e}",
        ) from e

    start_time = time.time()
    valid = await verifier.verify_round_proof(request.vk_id, proof, public_inputs)

    return VerificationResult(
        valid=valid,
        vk_id=request.vk_id.hex(),
        public_inputs=len(public_inputs),
        verification_time_ms=int((time.time() - start_time) * 1000),
    )
