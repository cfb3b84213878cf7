"""
In-process custodian connector.
Talks to a CustodianService object directly, with no transport in between.
Useful for single-process ceremonies and tests.
"""

from quorum import field
from quorum.connectors.base import CustodianConnector
from quorum.errors import CustodianError
from quorum.service import CustodianService
from quorum.shamir import Share


class LocalCustodianConnector(CustodianConnector):
    """Connector bound to a CustodianService living in this process."""

    def __init__(self, service: CustodianService):
        self.service = service

    def join_ceremony(self, node_id: str) -> dict:
        return self.service.join_ceremony(node_id)

    def store_share(self, ceremony_id: str, share: Share) -> dict:
        result = self.service.store_share(
            ceremony_id,
            field.encode_scalar(share.x),
            field.encode_scalar(share.y),
        )
        if not result["success"]:
            raise CustodianError(result["message"])
        return result

    def retrieve_share(self, ceremony_id: str) -> Share:
        data = self.service.retrieve_share(ceremony_id)
        return Share(
            x=field.decode_scalar(data["x"]),
            y=field.decode_scalar(data["y"]),
        )

    def is_available(self) -> bool:
        return True

    def get_info(self) -> dict:
        info = {"endpoint": "local", "available": True}
        info.update(self.service.info())
        return info
