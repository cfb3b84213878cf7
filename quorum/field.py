"""
Field Arithmetic
Modular arithmetic over the scalar field of secp256k1.

Every share, coefficient and secret is an integer in [0, ORDER).
Scalars cross process boundaries as fixed 32-byte big-endian strings.
"""

import secrets

from quorum.errors import MalformedScalar

# secp256k1 group order (a 256-bit prime)
ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SCALAR_SIZE = 32


def reduce(a: int) -> int:
    return a % ORDER


def add(a: int, b: int) -> int:
    return (a + b) % ORDER


def sub(a: int, b: int) -> int:
    return (a - b) % ORDER


def neg(a: int) -> int:
    return -a % ORDER


def mul(a: int, b: int) -> int:
    return (a * b) % ORDER


def inverse(a: int) -> int:
    """
    Modular multiplicative inverse using Fermat's little theorem.

    Raises:
        ZeroDivisionError: If a is zero in the field.
    """
    a %= ORDER
    if a == 0:
        raise ZeroDivisionError("Zero has no multiplicative inverse")
    return pow(a, ORDER - 2, ORDER)


def random_scalar(rng=None) -> int:
    """Draw a uniform field element. Defaults to the OS CSPRNG."""
    if rng is None:
        return secrets.randbelow(ORDER)
    return rng.randrange(ORDER)


def encode_scalar(value: int) -> bytes:
    """Encode a field element as 32 big-endian bytes."""
    return (value % ORDER).to_bytes(SCALAR_SIZE, "big")


def decode_scalar(data: bytes, strict: bool = False) -> int:
    """
    Decode 32 big-endian bytes into a field element.

    Args:
        data: Exactly SCALAR_SIZE bytes.
        strict: Reject values >= ORDER instead of reducing them.

    Returns:
        The field element.

    Raises:
        MalformedScalar: On a wrong length, or an out-of-range value in strict mode.
    """
    if len(data) != SCALAR_SIZE:
        raise MalformedScalar(f"Scalar must be {SCALAR_SIZE} bytes, got {len(data)}")

    value = int.from_bytes(data, "big")
    if value >= ORDER:
        if strict:
            raise MalformedScalar("Scalar is not below the field order")
        # Lossy decode: out-of-range input folds into the field
        value %= ORDER
    return value
