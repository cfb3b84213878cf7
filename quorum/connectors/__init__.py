"""
Custodian connectors.
Each connector implements the client side of the custodian protocol for one node.
"""

from quorum.connectors.base import CustodianConnector
from quorum.connectors.remote import HttpCustodianConnector
from quorum.connectors.local import LocalCustodianConnector

__all__ = [
    "CustodianConnector",
    "HttpCustodianConnector",
    "LocalCustodianConnector",
]
