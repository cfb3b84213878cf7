"""Tests for the custodian protocol: service handlers and the HTTP routes."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from quorum import field
from quorum.errors import ShareNotFound
from quorum.service import CustodianService, create_app
from quorum.storage import ShareStore


def make_service(strict=False):
    return CustodianService(ShareStore(), node_id="node-test", strict=strict)


def test_join_always_succeeds():
    service = make_service()
    result = service.join_ceremony("coordinator")
    assert result["success"]
    assert result["assigned_index"] == 0
    assert "coordinator" in result["message"]


def test_store_then_retrieve_roundtrip():
    """What goes in comes back byte for byte."""
    print("  Testing protocol roundtrip...", end=" ")
    service = make_service()
    x = field.encode_scalar(3)
    y = field.encode_scalar(field.ORDER - 12345)

    result = service.store_share("ceremony-001", x, y)
    assert result["success"]

    data = service.retrieve_share("ceremony-001")
    assert data == {"ceremony_id": "ceremony-001", "x": x, "y": y}
    print("PASS")


def test_retrieve_unknown_ceremony():
    service = make_service()
    with pytest.raises(ShareNotFound) as excinfo:
        service.retrieve_share("never-stored")
    assert excinfo.value.ceremony_id == "never-stored"


def test_store_reduces_out_of_range():
    service = make_service()
    y = (field.ORDER + 7).to_bytes(32, "big")
    assert service.store_share("c", field.encode_scalar(1), y)["success"]
    assert service.retrieve_share("c")["y"] == field.encode_scalar(7)


def test_strict_store_rejects_out_of_range():
    service = make_service(strict=True)
    y = (field.ORDER + 7).to_bytes(32, "big")
    result = service.store_share("c", field.encode_scalar(1), y)
    assert not result["success"]
    assert not service.store.exists("c")


def test_store_rejects_malformed_input():
    """Malformed shares come back as failures, never as exceptions."""
    service = make_service()

    assert not service.store_share("c", b"\x01" * 31, field.encode_scalar(1))["success"]
    assert not service.store_share("c", field.encode_scalar(1), b"")["success"]
    assert not service.store_share("c", field.encode_scalar(0), field.encode_scalar(1))["success"]
    assert not service.store.exists("c")


def test_http_routes():
    """Flask binding: join, store, retrieve, info."""
    print("  Testing HTTP routes...", end=" ")
    client = create_app(make_service()).test_client()
    x = field.encode_scalar(2).hex()
    y = field.encode_scalar(987654321).hex()

    response = client.post("/custodian/join", json={"node_id": "coordinator"})
    assert response.status_code == 200
    assert response.get_json()["success"]

    response = client.post("/custodian/store", json={"ceremony_id": "c1", "x": x, "y": y})
    assert response.status_code == 200
    assert response.get_json() == {"success": True, "message": "share stored successfully"}

    response = client.post("/custodian/retrieve", json={"ceremony_id": "c1"})
    assert response.status_code == 200
    assert response.get_json() == {"ceremony_id": "c1", "x": x, "y": y}

    response = client.get("/custodian/info")
    assert response.get_json() == {"node_id": "node-test", "ceremonies": 1}
    print("PASS")


def test_lone_surrogate_ceremony_id():
    """Any string is a valid ceremony id, even one that is not valid UTF-8."""
    service = make_service()
    ceremony_id = "\ud800"
    x = field.encode_scalar(4)
    y = field.encode_scalar(31337)

    assert service.store_share(ceremony_id, x, y)["success"]
    assert service.retrieve_share(ceremony_id) == {"ceremony_id": ceremony_id, "x": x, "y": y}

    client = create_app(make_service()).test_client()
    body = {"ceremony_id": ceremony_id, "x": x.hex(), "y": y.hex()}
    response = client.post("/custodian/store", json=body)
    assert response.status_code == 200
    assert response.get_json()["success"]

    response = client.post("/custodian/retrieve", json={"ceremony_id": ceremony_id})
    assert response.status_code == 200
    assert response.get_json() == body


def test_http_not_found():
    client = create_app(make_service()).test_client()
    response = client.post("/custodian/retrieve", json={"ceremony_id": "missing"})
    assert response.status_code == 404
    body = response.get_json()
    assert body["error"] == "not_found"
    assert "missing" in body["message"]


def test_http_bad_requests():
    client = create_app(make_service()).test_client()
    good = field.encode_scalar(1).hex()

    bad_bodies = [
        {"x": good, "y": good},
        {"ceremony_id": "c", "x": "zz" * 32, "y": good},
        {"ceremony_id": "c", "x": good[:-2], "y": good},
        {"ceremony_id": "c", "x": 5, "y": good},
        {"ceremony_id": "c", "x": good},
    ]
    for body in bad_bodies:
        response = client.post("/custodian/store", json=body)
        assert response.status_code == 400, body
        assert response.get_json()["success"] is False

    response = client.post("/custodian/store", data="not json", content_type="text/plain")
    assert response.status_code == 400

    assert client.post("/custodian/join", json={}).status_code == 400
    assert client.post("/custodian/retrieve", json={}).status_code == 400


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
