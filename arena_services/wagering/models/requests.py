"""
Request Fragments
=================

Binary fields travel as hex strings (an optional ``0x`` prefix is
accepted) and are handed to the contracts as ``bytes``.

Version: 0.1.0
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer


def _from_hex(value: Any) -> Any:
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise ValueError("expected a hex string") from e
    return value


HexBytes = Annotated[
    bytes,
    BeforeValidator(_from_hex),
    PlainSerializer(lambda v: v.hex(), return_type=str, when_used="json"),
]


class ProofSubmission(BaseModel):
    """A Groth16 proof with its public inputs."""

    vk_id: HexBytes = Field(..., description="Verification key id (32 bytes)")
    proof: HexBytes = Field(..., description="A || B || C (256 bytes)")
    public_inputs: list[HexBytes] = Field(..., description="32-byte big-endian scalars")
