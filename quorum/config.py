"""
Configuration for custodian nodes and the coordinator.
Defaults describe a local three-node, 2-of-3 demonstration network.
Environment variables override the defaults.
"""

import os
from dataclasses import dataclass, field

DEFAULT_PORT = 50051
DEFAULT_THRESHOLD = 2
DEFAULT_TOTAL_SHARES = 3
DEFAULT_CEREMONY_ID = "ceremony-001"
DEFAULT_ENDPOINTS = [
    "http://127.0.0.1:50051",
    "http://127.0.0.1:50052",
    "http://127.0.0.1:50053",
]


@dataclass
class NodeConfig:
    """Configuration for a single custodian node process."""
    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"
    strict: bool = False  # reject out-of-range scalars instead of reducing them

    @property
    def node_id(self) -> str:
        return f"node-{self.port}"

    @classmethod
    def from_env(cls, port: int = DEFAULT_PORT) -> "NodeConfig":
        return cls(
            port=port,
            host=os.environ.get("QUORUM_HOST", "0.0.0.0"),
            strict=os.environ.get("QUORUM_STRICT", "").lower() in ("1", "true", "yes"),
        )


@dataclass
class CoordinatorConfig:
    """Configuration for one coordinator run."""
    endpoints: list[str] = field(default_factory=lambda: list(DEFAULT_ENDPOINTS))
    threshold: int = DEFAULT_THRESHOLD
    total_shares: int = DEFAULT_TOTAL_SHARES
    ceremony_id: str = DEFAULT_CEREMONY_ID
    timeout: float = None  # seconds per request; None waits indefinitely

    @classmethod
    def from_env(cls) -> "CoordinatorConfig":
        endpoints = os.environ.get("QUORUM_ENDPOINTS")
        timeout = os.environ.get("QUORUM_TIMEOUT")
        return cls(
            endpoints=[e.strip() for e in endpoints.split(",") if e.strip()] if endpoints else list(DEFAULT_ENDPOINTS),
            threshold=int(os.environ.get("QUORUM_THRESHOLD", DEFAULT_THRESHOLD)),
            total_shares=int(os.environ.get("QUORUM_TOTAL_SHARES", DEFAULT_TOTAL_SHARES)),
            ceremony_id=os.environ.get("QUORUM_CEREMONY_ID", DEFAULT_CEREMONY_ID),
            timeout=float(timeout) if timeout else None,
        )
