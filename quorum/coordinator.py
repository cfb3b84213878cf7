"""
Coordinator — Share Distribution and Recovery
Drives one ceremony across a set of custodian nodes.

Protocol:
  1. Generate (or accept) a secret scalar
  2. Split it into N shares with threshold K
  3. Visit the N custodians in order: join, then store one share each
  4. Retrieve shares back from K custodians
  5. Recombine via Lagrange interpolation and compare with the original

Distribution is strictly sequential. The first unreachable or failing node
aborts the run; shares already stored on earlier nodes stay where they are.
Every node carries an explicit state so a partial run can be diagnosed:

  PENDING → CONNECTED → STORED
      └─────────┴──────→ FAILED
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum

from quorum import field
from quorum.config import CoordinatorConfig
from quorum.connectors.base import CustodianConnector
from quorum.connectors.remote import HttpCustodianConnector
from quorum.errors import CeremonyAborted, QuorumError
from quorum.shamir import Share, recover_secret, split_secret

logger = logging.getLogger(__name__)


class NodeState(Enum):
    """Where a custodian stands in the current ceremony."""
    PENDING = "pending"
    CONNECTED = "connected"
    STORED = "stored"
    FAILED = "failed"


@dataclass
class NodeStatus:
    """Progress of a single custodian node."""
    endpoint: str
    state: NodeState = NodeState.PENDING
    share_index: int = None
    error: str = ""

    def to_dict(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "state": self.state.value,
            "share_index": self.share_index,
            "error": self.error,
        }


def _endpoint_of(connector: CustodianConnector) -> str:
    return getattr(connector, "endpoint", connector.__class__.__name__)


class Coordinator:
    """
    Client-side orchestrator for split → distribute → retrieve → recover.

    Args:
        connectors: One connector per custodian, in distribution order.
        threshold: K — shares needed to recover.
        total_shares: N — shares to create. Defaults to one per connector.
        coordinator_id: Name announced to custodians when joining.
    """

    def __init__(
        self,
        connectors: list[CustodianConnector],
        threshold: int,
        total_shares: int = None,
        coordinator_id: str = "coordinator",
    ):
        self.connectors = list(connectors)
        self.threshold = threshold
        self.total_shares = total_shares if total_shares is not None else len(self.connectors)
        self.coordinator_id = coordinator_id

        if self.total_shares > len(self.connectors):
            raise ValueError(
                f"Need {self.total_shares} custodians, only {len(self.connectors)} configured"
            )

        self.nodes = [NodeStatus(endpoint=_endpoint_of(c)) for c in self.connectors[:self.total_shares]]

    @classmethod
    def from_config(cls, config: CoordinatorConfig) -> "Coordinator":
        """Build a coordinator talking HTTP to the configured endpoints."""
        connectors = [
            HttpCustodianConnector(endpoint, timeout=config.timeout)
            for endpoint in config.endpoints
        ]
        return cls(connectors, config.threshold, config.total_shares)

    def _fail(self, node: NodeStatus, error: Exception, action: str):
        node.state = NodeState.FAILED
        node.error = str(error)
        logger.error("%s failed on %s: %s", action, node.endpoint, error)
        raise CeremonyAborted(
            f"{action} aborted at {node.endpoint}: {error}",
            nodes=[n.to_dict() for n in self.nodes],
        ) from error

    def distribute(self, ceremony_id: str, shares: list[Share]) -> list[dict]:
        """
        Store one share per custodian, in order.

        Returns:
            Status of every node after a complete distribution.

        Raises:
            CeremonyAborted: On the first node that cannot be reached or refuses.
        """
        if len(shares) != len(self.nodes):
            raise ValueError(f"Expected {len(self.nodes)} shares, got {len(shares)}")

        self.nodes = [NodeStatus(endpoint=n.endpoint) for n in self.nodes]

        for connector, node, share in zip(self.connectors, self.nodes, shares):
            try:
                connector.join_ceremony(self.coordinator_id)
            except QuorumError as e:
                self._fail(node, e, "Connection")
            node.state = NodeState.CONNECTED
            logger.info("Connected to %s", node.endpoint)

            try:
                connector.store_share(ceremony_id, share)
            except QuorumError as e:
                self._fail(node, e, "Distribution")
            node.state = NodeState.STORED
            node.share_index = share.x
            logger.info("Stored share %d on %s", share.x, node.endpoint)

        return [n.to_dict() for n in self.nodes]

    def recover(self, ceremony_id: str, threshold: int = None) -> int:
        """
        Retrieve shares from K custodians and reconstruct the secret.

        Nodes that stored a share in this coordinator's last distribution are
        asked first, in order. Without a prior distribution, the first K
        connectors are used.

        Raises:
            CeremonyAborted: On the first node that cannot deliver its share.
        """
        threshold = threshold or self.threshold
        pairs = list(zip(self.connectors, self.nodes))
        stored = [(c, n) for c, n in pairs if n.state == NodeState.STORED]
        candidates = stored or pairs

        if len(candidates) < threshold:
            raise CeremonyAborted(
                f"Could not reach threshold: {len(candidates)} of {threshold} required custodians",
                nodes=[n.to_dict() for n in self.nodes],
            )

        shares = []
        for connector, node in candidates[:threshold]:
            try:
                shares.append(connector.retrieve_share(ceremony_id))
            except QuorumError as e:
                self._fail(node, e, "Retrieval")
            logger.info("Retrieved share from %s", node.endpoint)

        return recover_secret(shares, threshold)

    def run_ceremony(self, ceremony_id: str, secret: int = None) -> dict:
        """
        Run a full ceremony end to end.

        Args:
            ceremony_id: Identifier grouping this run's shares on each node.
            secret: Secret to share. A random scalar is generated if omitted.

        Returns:
            Ceremony report with the per-node status and verification result.
        """
        if secret is None:
            secret = field.random_scalar()

        shares = split_secret(secret, self.threshold, self.total_shares)
        nodes = self.distribute(ceremony_id, shares)
        recovered = self.recover(ceremony_id)

        return {
            "ceremony_id": ceremony_id,
            "threshold": self.threshold,
            "total_shares": self.total_shares,
            "secret": field.reduce(secret),
            "recovered": recovered,
            "verified": recovered == field.reduce(secret),
            "nodes": nodes,
        }


def main(config: CoordinatorConfig = None) -> int:
    """Demonstration run against the configured custodian nodes."""
    print("=== quorum client coordinator ===\n")

    try:
        config = config or CoordinatorConfig.from_env()
    except ValueError as e:
        print(f"failed: invalid configuration: {e}")
        return 1

    print("step 1: generating random secret...")
    secret = field.random_scalar()
    print(f"secret (hex): {field.encode_scalar(secret).hex()}\n")

    print(f"step 2: splitting secret into {config.total_shares} shares (threshold: {config.threshold})...")
    try:
        coordinator = Coordinator.from_config(config)
        shares = split_secret(secret, config.threshold, config.total_shares)
    except ValueError as e:
        print(f"failed: {e}")
        return 1
    print(f"generated {len(shares)} shares\n")

    print("step 3: distributing shares to custodian nodes...")
    try:
        for node in coordinator.distribute(config.ceremony_id, shares):
            print(f"  {node['endpoint']}: {node['state']} (share {node['share_index']})")
    except CeremonyAborted as e:
        print(f"failed: {e}")
        return 1
    print()

    print(f"step 4: retrieving shares from {config.threshold} nodes for recovery...")
    print("step 5: recovering secret using lagrange interpolation...")
    try:
        recovered = coordinator.recover(config.ceremony_id)
    except QuorumError as e:
        print(f"failed: {e}")
        return 1
    print(f"recovered (hex): {field.encode_scalar(recovered).hex()}\n")

    print("step 6: verifying...")
    if recovered == secret:
        print("success! recovered secret matches the original")
        return 0
    print("error! secrets do not match")
    return 1


if __name__ == "__main__":
    sys.exit(main())
