"""
Custodian Service
The request/response surface each custodian node exposes.

A custodian holds one share per ceremony and hands it back on request.
CustodianService implements the three protocol operations on top of a
ShareStore. create_app() binds them to HTTP routes with JSON bodies;
scalars travel as 32-byte big-endian values, hex encoded.
"""

import logging

from flask import Flask, jsonify, request

from quorum import field
from quorum.errors import MalformedScalar, ShareNotFound
from quorum.shamir import Share
from quorum.storage import ShareStore

logger = logging.getLogger(__name__)


class CustodianService:
    """
    Protocol handlers for one custodian node.

    Args:
        store: The node's share store.
        node_id: Name used in logs and node info.
        strict: Reject scalars >= the field order instead of reducing them.
    """

    def __init__(self, store: ShareStore = None, node_id: str = "node", strict: bool = False):
        self.store = store if store is not None else ShareStore()
        self.node_id = node_id
        self.strict = strict

    def join_ceremony(self, node_id: str) -> dict:
        """Acknowledge a participant. Index assignment is left to the coordinator."""
        logger.info("[%s] node %s joined ceremony", self.node_id, node_id)
        return {
            "success": True,
            "assigned_index": 0,
            "message": f"welcome to the ceremony, {node_id}",
        }

    def store_share(self, ceremony_id: str, x: bytes, y: bytes) -> dict:
        """Decode and store a share. Malformed input yields success=False."""
        try:
            share = Share(
                x=field.decode_scalar(x, self.strict),
                y=field.decode_scalar(y, self.strict),
            )
        except MalformedScalar as e:
            logger.warning("[%s] rejected share for ceremony '%s': %s", self.node_id, ceremony_id, e)
            return {"success": False, "message": str(e)}

        if share.x == 0:
            logger.warning("[%s] rejected share with index 0 for ceremony '%s'", self.node_id, ceremony_id)
            return {"success": False, "message": "share index 0 is reserved for the secret"}

        self.store.store(ceremony_id, share)
        logger.info("[%s] stored share for ceremony '%s'", self.node_id, ceremony_id)
        return {"success": True, "message": "share stored successfully"}

    def retrieve_share(self, ceremony_id: str) -> dict:
        """
        Return the encoded share held for a ceremony.

        Raises:
            ShareNotFound: If this node holds no share for the ceremony.
        """
        share = self.store.retrieve(ceremony_id)
        if share is None:
            raise ShareNotFound(ceremony_id)

        logger.info("[%s] retrieved share for ceremony '%s'", self.node_id, ceremony_id)
        return {
            "ceremony_id": ceremony_id,
            "x": field.encode_scalar(share.x),
            "y": field.encode_scalar(share.y),
        }

    def info(self) -> dict:
        return {"node_id": self.node_id, "ceremonies": len(self.store)}


def _decode_hex(value) -> bytes:
    if not isinstance(value, str):
        raise MalformedScalar("Scalar must be a hex string")
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise MalformedScalar("Scalar is not valid hex") from None


def _bad_request(message: str):
    return jsonify({"success": False, "message": message}), 400


def create_app(service: CustodianService) -> Flask:
    """Build the Flask app serving one custodian node."""
    app = Flask(__name__)

    @app.post("/custodian/join")
    def join():
        body = request.get_json(silent=True) or {}
        node_id = body.get("node_id")
        if not isinstance(node_id, str):
            return _bad_request("node_id is required")
        return jsonify(service.join_ceremony(node_id))

    @app.post("/custodian/store")
    def store():
        body = request.get_json(silent=True) or {}
        ceremony_id = body.get("ceremony_id")
        if not isinstance(ceremony_id, str):
            return _bad_request("ceremony_id is required")
        try:
            x = _decode_hex(body.get("x"))
            y = _decode_hex(body.get("y"))
        except MalformedScalar as e:
            return _bad_request(str(e))

        result = service.store_share(ceremony_id, x, y)
        if not result["success"]:
            return jsonify(result), 400
        return jsonify(result)

    @app.post("/custodian/retrieve")
    def retrieve():
        body = request.get_json(silent=True) or {}
        ceremony_id = body.get("ceremony_id")
        if not isinstance(ceremony_id, str):
            return _bad_request("ceremony_id is required")
        try:
            data = service.retrieve_share(ceremony_id)
        except ShareNotFound as e:
            return jsonify({"error": "not_found", "message": str(e)}), 404
        return jsonify({
            "ceremony_id": data["ceremony_id"],
            "x": data["x"].hex(),
            "y": data["y"].hex(),
        })

    @app.get("/custodian/info")
    def info():
        return jsonify(service.info())

    return app
