"""
HTTP custodian connector.
Reaches a custodian node served by quorum.service.create_app.

No retries and, unless configured, no timeout: a stalled node blocks the
caller, and any transport failure is reported as CustodianUnavailable.
"""

import requests

from quorum import field
from quorum.connectors.base import CustodianConnector
from quorum.errors import CustodianError, CustodianUnavailable, MalformedScalar, ShareNotFound
from quorum.shamir import Share


class HttpCustodianConnector(CustodianConnector):
    """
    Connects to one custodian node over HTTP/JSON.

    Args:
        endpoint: Base URL of the node, e.g. http://127.0.0.1:50051
        session: requests.Session to use. A new one is created if omitted.
        timeout: Per-request timeout in seconds. None waits indefinitely.
    """

    def __init__(self, endpoint: str, session: requests.Session = None, timeout: float = None):
        self.endpoint = endpoint.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _call(self, method: str, path: str, payload: dict = None) -> requests.Response:
        url = f"{self.endpoint}{path}"
        try:
            return self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise CustodianUnavailable(f"{self.endpoint} unreachable: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> dict:
        try:
            return response.json()
        except ValueError:
            raise CustodianError(
                f"Unexpected response from custodian (HTTP {response.status_code})"
            ) from None

    def join_ceremony(self, node_id: str) -> dict:
        response = self._call("POST", "/custodian/join", {"node_id": node_id})
        body = self._json(response)
        if not response.ok:
            raise CustodianError(body.get("message", f"HTTP {response.status_code}"))
        return body

    def store_share(self, ceremony_id: str, share: Share) -> dict:
        response = self._call("POST", "/custodian/store", {
            "ceremony_id": ceremony_id,
            "x": field.encode_scalar(share.x).hex(),
            "y": field.encode_scalar(share.y).hex(),
        })
        body = self._json(response)
        if not response.ok or not body.get("success", False):
            raise CustodianError(body.get("message", f"HTTP {response.status_code}"))
        return body

    def retrieve_share(self, ceremony_id: str) -> Share:
        response = self._call("POST", "/custodian/retrieve", {"ceremony_id": ceremony_id})
        if response.status_code == 404:
            raise ShareNotFound(ceremony_id)
        body = self._json(response)
        if not response.ok:
            raise CustodianError(body.get("message", f"HTTP {response.status_code}"))

        try:
            x = bytes.fromhex(body["x"])
            y = bytes.fromhex(body["y"])
        except (KeyError, TypeError, ValueError):
            raise MalformedScalar("Custodian returned a malformed share") from None
        return Share(x=field.decode_scalar(x), y=field.decode_scalar(y))

    def is_available(self) -> bool:
        """A node is available if its info route answers."""
        try:
            return self._call("GET", "/custodian/info").ok
        except CustodianUnavailable:
            return False

    def get_info(self) -> dict:
        info = {"endpoint": self.endpoint, "available": False}
        try:
            response = self._call("GET", "/custodian/info")
        except CustodianUnavailable as e:
            info["error"] = str(e)
            return info

        if response.ok:
            info["available"] = True
            info.update(self._json(response))
        else:
            info["error"] = f"HTTP {response.status_code}"
        return info
