"""
Shamir's Secret Sharing
Split a secret scalar into N shares where any K can reconstruct it.

The secret is the constant term of a random polynomial of degree K-1 over
the secp256k1 scalar field. Each custodian receives one point on that
polynomial. Any K points pin the polynomial down; K-1 points are consistent
with every possible secret, so they reveal nothing.
"""

import logging
import secrets
from dataclasses import dataclass

from quorum import field
from quorum.errors import (
    DuplicateShareIndex,
    InsufficientShares,
    InvalidThreshold,
    MalformedScalar,
    QuorumError,
)

logger = logging.getLogger(__name__)

MIN_THRESHOLD = 2


@dataclass(frozen=True)
class Share:
    """A single share of a split secret."""
    x: int                  # The evaluation index (1-indexed, never 0)
    y: int                  # The polynomial value at x
    threshold: int = None   # K, when known from the splitting

    def to_bytes(self) -> bytes:
        """Serialize to 64 bytes: x || y."""
        return field.encode_scalar(self.x) + field.encode_scalar(self.y)

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> "Share":
        """Deserialize from the 64-byte form produced by to_bytes."""
        if len(data) != 2 * field.SCALAR_SIZE:
            raise MalformedScalar(f"Share must be {2 * field.SCALAR_SIZE} bytes, got {len(data)}")
        return cls(
            x=field.decode_scalar(data[:field.SCALAR_SIZE], strict),
            y=field.decode_scalar(data[field.SCALAR_SIZE:], strict),
        )


def evaluate_polynomial(coefficients: list[int], x: int) -> int:
    """
    Evaluate a polynomial at x with Horner's method.

    Coefficients are ordered lowest degree first: [a0, a1, a2, ...],
    so the result is a0 + a1*x + a2*x^2 + ...
    """
    result = 0
    for coeff in reversed(coefficients):
        result = field.add(field.mul(result, x), coeff)
    return result


def random_coefficients(threshold: int, secret: int, rng=None) -> list[int]:
    """
    Build the coefficients of a fresh random polynomial with f(0) = secret.

    Args:
        threshold: Number of coefficients (the polynomial has degree threshold-1).
        secret: The constant term.
        rng: Object with a randrange method. Defaults to the OS CSPRNG.

    Returns:
        [secret, r1, ..., r(threshold-1)] with each r uniform in the field.
    """
    rng = rng or secrets.SystemRandom()
    coefficients = [field.reduce(secret)]
    for _ in range(threshold - 1):
        coefficients.append(field.random_scalar(rng))
    return coefficients


def split_secret(secret: int, threshold: int, total_shares: int, rng=None) -> list[Share]:
    """
    Split a secret into shares using Shamir's Secret Sharing.

    Args:
        secret: The secret field element (reduced mod the field order).
        threshold: Minimum shares needed to reconstruct (K).
        total_shares: Total shares to generate (N).
        rng: Optional randomness source for the coefficients.

    Returns:
        List of N shares with x = 1..N. Any K can reconstruct the secret.

    Raises:
        InvalidThreshold: Unless 2 <= threshold <= total_shares.
    """
    if threshold < MIN_THRESHOLD:
        raise InvalidThreshold(f"Threshold must be at least {MIN_THRESHOLD}")
    if threshold > total_shares:
        raise InvalidThreshold("Threshold cannot exceed number of shares")

    # f(x) = secret + a1*x + ... + a(k-1)*x^(k-1)
    coefficients = random_coefficients(threshold, secret, rng)

    shares = []
    for i in range(1, total_shares + 1):
        y = evaluate_polynomial(coefficients, i)
        shares.append(Share(x=i, y=y, threshold=threshold))

    return shares


def interpolate_at(points: list[tuple[int, int]], x: int) -> int:
    """
    Evaluate the unique polynomial through `points` at `x`.

    Raises:
        InsufficientShares: If no points are given.
        DuplicateShareIndex: If two points share an x-coordinate.
    """
    if not points:
        raise InsufficientShares("Need at least one point to interpolate")

    seen = set()
    for xi, _ in points:
        xi = field.reduce(xi)
        if xi in seen:
            raise DuplicateShareIndex(xi)
        seen.add(xi)

    result = 0
    for i, (xi, yi) in enumerate(points):
        numerator = 1
        denominator = 1
        for j, (xj, _) in enumerate(points):
            if i == j:
                continue
            numerator = field.mul(numerator, field.sub(x, xj))
            denominator = field.mul(denominator, field.sub(xi, xj))

        try:
            basis = field.mul(numerator, field.inverse(denominator))
        except ZeroDivisionError:
            raise DuplicateShareIndex(field.reduce(xi)) from None
        result = field.add(result, field.mul(yi, basis))

    return result


def lagrange_interpolate(points: list[tuple[int, int]]) -> int:
    """
    Recover f(0) from (x, y) points.

    Each basis value is L_i(0) = prod_{j != i} (-x_j) / (x_i - x_j).
    """
    return interpolate_at(points, 0)


def _required_shares(shares: list[Share], threshold: int | None) -> int:
    if threshold is not None:
        return threshold

    recorded = {share.threshold for share in shares if share.threshold is not None}
    if len(recorded) > 1:
        raise InvalidThreshold(f"Shares disagree on the threshold: {sorted(recorded)}")
    if recorded:
        return recorded.pop()

    logger.warning(
        "Recovering without a known threshold; only %d shares are required",
        MIN_THRESHOLD,
    )
    return MIN_THRESHOLD


def recover_secret(shares: list[Share], threshold: int = None) -> int:
    """
    Reconstruct a secret from K or more shares using Lagrange interpolation.

    Args:
        shares: At least K shares (where K is the threshold).
        threshold: K. Taken from the shares when omitted.

    Returns:
        The reconstructed secret.

    Raises:
        InvalidThreshold: If K is below 2 or the shares disagree on it.
        InsufficientShares: If fewer than K shares are provided.
        MalformedScalar: If a share has index 0.
        DuplicateShareIndex: If two shares have the same index.
    """
    required = _required_shares(shares, threshold)
    if required < MIN_THRESHOLD:
        raise InvalidThreshold(f"Threshold must be at least {MIN_THRESHOLD}")
    if len(shares) < required:
        raise InsufficientShares(f"Need at least {required} shares, got {len(shares)}")

    points = []
    for share in shares:
        if field.reduce(share.x) == 0:
            raise MalformedScalar("Share index 0 is reserved for the secret")
        points.append((share.x, share.y))

    return lagrange_interpolate(points)


def verify_shares(shares: list[Share], secret: int, threshold: int = None) -> bool:
    """Verify that a set of shares correctly reconstructs the secret."""
    try:
        return recover_secret(shares, threshold) == field.reduce(secret)
    except QuorumError:
        return False
