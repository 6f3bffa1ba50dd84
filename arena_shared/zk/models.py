"""
ZK-SNARK Data Models
====================

Pydantic models for Groth16 verification keys and proofs in their
on-chain byte layout, with importers for snarkjs JSON artifacts.

Version: 0.1.0
"""

import hashlib
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from arena_shared.zk.bn254 import FIELD_BYTES, G1_BYTES, G2_BYTES

PROOF_BYTES = 2 * G1_BYTES + G2_BYTES
VK_ID_BYTES = 32


def _int_bytes(value: Any) -> bytes:
    n = int(str(value))
    if n < 0:
        raise ValueError("negative field element")
    return n.to_bytes(FIELD_BYTES, "big")


def _snarkjs_g1(point: list[Any]) -> bytes:
    if len(point) < 2:
        raise ValueError("G1 point needs x and y")
    if len(point) > 2 and int(str(point[2])) == 0:
        return bytes(G1_BYTES)
    return _int_bytes(point[0]) + _int_bytes(point[1])


def _snarkjs_g2(point: list[list[Any]]) -> bytes:
    if len(point) < 2 or len(point[0]) != 2 or len(point[1]) != 2:
        raise ValueError("G2 point needs x and y over Fq2")
    if len(point) > 2 and all(int(str(c)) == 0 for c in point[2]):
        return bytes(G2_BYTES)
    (x_c0, x_c1), (y_c0, y_c1) = point[0], point[1]
    # snarkjs lists c0 first, the precompile layout wants c1 first
    return b"".join(_int_bytes(c) for c in (x_c1, x_c0, y_c1, y_c0))


def derive_vk_id(verification_key_json: bytes | str) -> bytes:
    """
    Derive the 32-byte key id from a verification key file.

    The id is the SHA-256 of the raw file contents, so the same file
    always installs under the same id.
    """
    if isinstance(verification_key_json, str):
        verification_key_json = verification_key_json.encode()
    return hashlib.sha256(verification_key_json).digest()


class VerificationKey(BaseModel):
    """
    Groth16 verification key in byte form.

    ``ic`` holds one point per public input plus the constant term, so a
    key supports exactly ``len(ic) - 1`` public inputs.
    """

    alpha_g1: bytes = Field(..., description="alpha (G1, 64 bytes)")
    beta_g2: bytes = Field(..., description="beta (G2, 128 bytes)")
    gamma_g2: bytes = Field(..., description="gamma (G2, 128 bytes)")
    delta_g2: bytes = Field(..., description="delta (G2, 128 bytes)")
    ic: list[bytes] = Field(..., description="Input coefficients (G1, 64 bytes each)")

    installed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("alpha_g1")
    @classmethod
    def validate_g1_length(cls, v: bytes) -> bytes:
        if len(v) != G1_BYTES:
            raise ValueError(f"G1 point must be {G1_BYTES} bytes")
        return v

    @field_validator("beta_g2", "gamma_g2", "delta_g2")
    @classmethod
    def validate_g2_length(cls, v: bytes) -> bytes:
        if len(v) != G2_BYTES:
            raise ValueError(f"G2 point must be {G2_BYTES} bytes")
        return v

    @field_validator("ic")
    @classmethod
    def validate_ic(cls, v: list[bytes]) -> list[bytes]:
        if not v:
            raise ValueError("ic must contain at least one point")
        for point in v:
            if len(point) != G1_BYTES:
                raise ValueError(f"ic points must be {G1_BYTES} bytes")
        return v

    @field_serializer("alpha_g1", "beta_g2", "gamma_g2", "delta_g2", when_used="json")
    def _point_hex(self, v: bytes) -> str:
        return v.hex()

    @field_serializer("ic", when_used="json")
    def _ic_hex(self, v: list[bytes]) -> list[str]:
        return [p.hex() for p in v]

    @property
    def n_public(self) -> int:
        return len(self.ic) - 1

    @classmethod
    def from_snarkjs(cls, data: dict[str, Any]) -> "VerificationKey":
        """Build from a snarkjs ``verification_key.json`` document."""
        if data.get("protocol", "groth16") != "groth16":
            raise ValueError(f"Unsupported protocol: {data.get('protocol')}")

        return cls(
            alpha_g1=_snarkjs_g1(data["vk_alpha_1"]),
            beta_g2=_snarkjs_g2(data["vk_beta_2"]),
            gamma_g2=_snarkjs_g2(data["vk_gamma_2"]),
            delta_g2=_snarkjs_g2(data["vk_delta_2"]),
            ic=[_snarkjs_g1(p) for p in data["IC"]],
        )


class Groth16Proof(BaseModel):
    """
    A Groth16 proof.

    Compatible with snarkjs Groth16 proof format.
    """

    # Proof points (G1 and G2 elements)
    pi_a: list[str] = Field(..., description="Proof point A (G1)")
    pi_b: list[list[str]] = Field(..., description="Proof point B (G2)")
    pi_c: list[str] = Field(..., description="Proof point C (G1)")

    # Protocol info
    protocol: str = Field(default="groth16")
    curve: str = Field(default="bn128")

    def to_bytes(self) -> bytes:
        """Serialize as ``A || B || C`` (256 bytes)."""
        data = _snarkjs_g1(self.pi_a) + _snarkjs_g2(self.pi_b) + _snarkjs_g1(self.pi_c)
        if len(data) != PROOF_BYTES:
            raise ValueError(f"Serialized proof must be {PROOF_BYTES} bytes")
        return data

    def to_hex(self) -> str:
        return self.to_bytes().hex()

    @classmethod
    def from_snarkjs(cls, data: dict[str, Any]) -> "Groth16Proof":
        """Build from a snarkjs ``proof.json`` document."""
        if not all(k in data for k in ("pi_a", "pi_b", "pi_c")):
            raise ValueError("Invalid Groth16 proof JSON shape")
        return cls(
            pi_a=[str(c) for c in data["pi_a"]],
            pi_b=[[str(c) for c in pair] for pair in data["pi_b"]],
            pi_c=[str(c) for c in data["pi_c"]],
            protocol=data.get("protocol", "groth16"),
            curve=data.get("curve", "bn128"),
        )


class VerificationResult(BaseModel):
    """Result of proof verification."""

    valid: bool
    vk_id: str
    public_inputs: int = Field(..., ge=0)
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    verification_time_ms: int = Field(..., ge=0)
