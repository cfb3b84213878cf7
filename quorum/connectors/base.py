"""
Base class for all custodian connectors.
Every way of reaching a custodian node implements this interface.
"""

from abc import ABC, abstractmethod

from quorum.shamir import Share


class CustodianConnector(ABC):
    """Abstract base class for the client side of the custodian protocol."""

    @abstractmethod
    def join_ceremony(self, node_id: str) -> dict:
        """
        Announce a participant to the custodian.

        Returns:
            {"success", "assigned_index", "message"} from the node.
        """

    @abstractmethod
    def store_share(self, ceremony_id: str, share: Share) -> dict:
        """
        Hand one share to the custodian for a ceremony.

        Returns:
            {"success", "message"} from the node.

        Raises:
            CustodianError: If the node rejects the share.
            CustodianUnavailable: If the node cannot be reached.
        """

    @abstractmethod
    def retrieve_share(self, ceremony_id: str) -> Share:
        """
        Fetch the share the custodian holds for a ceremony.

        Raises:
            ShareNotFound: If the node holds no share for the ceremony.
            CustodianUnavailable: If the node cannot be reached.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this custodian is reachable."""

    @abstractmethod
    def get_info(self) -> dict:
        """Get metadata about this custodian (endpoint, node id, status)."""
