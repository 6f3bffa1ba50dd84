"""
BN254 Codec and Pairing Check
=============================

Byte codecs for BN254 (alt_bn128) points and scalars plus the
multi-pairing check used by Groth16 verification.

Encodings follow the Ethereum precompile layout:

- G1: 64 bytes, ``x || y`` big-endian; all zero bytes is the point at
  infinity.
- G2: 128 bytes, ``x.c1 || x.c0 || y.c1 || y.c0`` big-endian (imaginary
  part first); all zero bytes is the point at infinity.
- Scalars: 32 bytes big-endian, strictly below the group order.

Every decoder raises ``ValueError`` on malformed input; callers that
must fail closed catch it.

Version: 0.1.0
"""

from typing import Any

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    FQ12,
    G1,
    G2,
    Z1,
    Z2,
    add,
    b,
    b2,
    curve_order,
    field_modulus,
    final_exponentiate,
    is_inf,
    is_on_curve,
    multiply,
    neg,
    normalize,
    pairing,
)

G1_BYTES = 64
G2_BYTES = 128
SCALAR_BYTES = 32
FIELD_BYTES = 32

# Points are py_ecc projective tuples
G1Point = tuple[Any, Any, Any]
G2Point = tuple[Any, Any, Any]

__all__ = [
    "G1",
    "G2",
    "Z1",
    "Z2",
    "G1_BYTES",
    "G2_BYTES",
    "SCALAR_BYTES",
    "curve_order",
    "field_modulus",
    "add",
    "multiply",
    "neg",
    "decode_g1",
    "decode_g2",
    "decode_scalar",
    "encode_g1",
    "encode_g2",
    "encode_scalar",
    "pairing_check",
]


def _field_element(data: bytes) -> int:
    value = int.from_bytes(data, "big")
    if value >= field_modulus:
        raise ValueError("coordinate is not a field element")
    return value


def _coeff(c: Any) -> int:
    return int(getattr(c, "n", c))


def decode_g1(data: bytes) -> G1Point:
    """Decode and validate a 64-byte G1 point."""
    if len(data) != G1_BYTES:
        raise ValueError(f"G1 point must be {G1_BYTES} bytes, got {len(data)}")

    x = _field_element(data[:32])
    y = _field_element(data[32:])
    if x == 0 and y == 0:
        return Z1

    point = (FQ(x), FQ(y), FQ.one())
    if not is_on_curve(point, b):
        raise ValueError("G1 point is not on the curve")
    return point


def decode_g2(data: bytes, check_subgroup: bool = True) -> G2Point:
    """
    Decode and validate a 128-byte G2 point.

    Args:
        data: Encoded point
        check_subgroup: Also require membership in the order-r subgroup.
            Costs a full scalar multiplication.
    """
    if len(data) != G2_BYTES:
        raise ValueError(f"G2 point must be {G2_BYTES} bytes, got {len(data)}")

    x_c1 = _field_element(data[0:32])
    x_c0 = _field_element(data[32:64])
    y_c1 = _field_element(data[64:96])
    y_c0 = _field_element(data[96:128])
    if x_c0 == x_c1 == y_c0 == y_c1 == 0:
        return Z2

    point = (FQ2([x_c0, x_c1]), FQ2([y_c0, y_c1]), FQ2.one())
    if not is_on_curve(point, b2):
        raise ValueError("G2 point is not on the curve")
    if check_subgroup and not is_inf(multiply(point, curve_order)):
        raise ValueError("G2 point is not in the prime-order subgroup")
    return point


def decode_scalar(data: bytes) -> int:
    """Decode a 32-byte big-endian scalar; values >= r are rejected."""
    if len(data) != SCALAR_BYTES:
        raise ValueError(f"scalar must be {SCALAR_BYTES} bytes, got {len(data)}")
    value = int.from_bytes(data, "big")
    if value >= curve_order:
        raise ValueError("scalar is not below the group order")
    return value


def encode_g1(point: G1Point) -> bytes:
    if is_inf(point):
        return bytes(G1_BYTES)
    x, y = normalize(point)
    return _coeff(x).to_bytes(FIELD_BYTES, "big") + _coeff(y).to_bytes(FIELD_BYTES, "big")


def encode_g2(point: G2Point) -> bytes:
    if is_inf(point):
        return bytes(G2_BYTES)
    x, y = normalize(point)
    x_c0, x_c1 = (_coeff(c) for c in x.coeffs)
    y_c0, y_c1 = (_coeff(c) for c in y.coeffs)
    return b"".join(
        v.to_bytes(FIELD_BYTES, "big") for v in (x_c1, x_c0, y_c1, y_c0)
    )


def encode_scalar(value: int) -> bytes:
    if not 0 <= value < curve_order:
        raise ValueError("scalar out of range")
    return value.to_bytes(SCALAR_BYTES, "big")


def pairing_check(pairs: list[tuple[G1Point, G2Point]]) -> bool:
    """
    Check ``prod e(P_i, Q_i) == 1`` over all ``(P_i, Q_i)`` pairs.

    Miller loops are multiplied first and a single final exponentiation
    is applied to the product.
    """
    acc = FQ12.one()
    for p1, q2 in pairs:
        acc *= pairing(q2, p1, final_exponentiate=False)
    return final_exponentiate(acc) == FQ12.one()
