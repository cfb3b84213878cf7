"""
Quorum — Threshold Custody of Secrets
Shamir's Secret Sharing over the secp256k1 scalar field, with shares held by
independent custodian nodes.

A secret is split into N shares. Each custodian node holds one share per
ceremony. Any K custodians can hand their shares back and the secret is
rebuilt exactly; K-1 of them together learn nothing about it.

Usage:
    from quorum import split_secret, recover_secret
    shares = split_secret(secret, threshold=3, total_shares=5)
    assert recover_secret(shares[:3]) == secret
"""

from quorum.shamir import (
    Share,
    split_secret,
    recover_secret,
    lagrange_interpolate,
    evaluate_polynomial,
    verify_shares,
)
from quorum.storage import ShareStore
from quorum.service import CustodianService, create_app
from quorum.coordinator import Coordinator, NodeState
from quorum.errors import (
    QuorumError,
    InvalidThreshold,
    InsufficientShares,
    DuplicateShareIndex,
    MalformedScalar,
    ShareNotFound,
    CustodianError,
    CustodianUnavailable,
    CeremonyAborted,
)

__version__ = "0.1.0"
__all__ = [
    "Share",
    "split_secret",
    "recover_secret",
    "lagrange_interpolate",
    "evaluate_polynomial",
    "verify_shares",
    "ShareStore",
    "CustodianService",
    "create_app",
    "Coordinator",
    "NodeState",
    "QuorumError",
    "InvalidThreshold",
    "InsufficientShares",
    "DuplicateShareIndex",
    "MalformedScalar",
    "ShareNotFound",
    "CustodianError",
    "CustodianUnavailable",
    "CeremonyAborted",
]
