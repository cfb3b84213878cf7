"""Shared fixtures: custodian nodes reachable over HTTP without opening sockets."""

import sys
from pathlib import Path
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

sys.path.insert(0, str(Path(__file__).parent.parent))

from quorum.connectors.remote import HttpCustodianConnector
from quorum.service import CustodianService, create_app
from quorum.storage import ShareStore


class FlaskAdapter(BaseAdapter):
    """Routes requests.Session traffic into a Flask test client."""

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()
        self.calls = 0

    def send(self, request, **kwargs):
        self.calls += 1
        parts = urlsplit(request.url)
        result = self.client.open(
            parts.path,
            method=request.method,
            data=request.body,
            content_type=request.headers.get("Content-Type"),
        )

        response = requests.Response()
        response.status_code = result.status_code
        response.headers = CaseInsensitiveDict(result.headers)
        response._content = result.get_data()
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class DownAdapter(BaseAdapter):
    """Every request fails as if the node were unreachable."""

    def send(self, request, **kwargs):
        raise requests.ConnectionError(f"connection refused: {request.url}")

    def close(self):
        pass


def http_node(port: int, strict: bool = False):
    """Return (service, connector) for one in-memory custodian node."""
    service = CustodianService(ShareStore(), node_id=f"node-{port}", strict=strict)
    endpoint = f"http://127.0.0.1:{port}"
    session = requests.Session()
    session.mount("http://", FlaskAdapter(create_app(service)))
    return service, HttpCustodianConnector(endpoint, session=session)


def down_node(port: int):
    endpoint = f"http://127.0.0.1:{port}"
    session = requests.Session()
    session.mount("http://", DownAdapter())
    return HttpCustodianConnector(endpoint, session=session)


@pytest.fixture
def network():
    """Three HTTP custodian nodes: (services, connectors)."""
    nodes = [http_node(port) for port in (50051, 50052, 50053)]
    services = [service for service, _ in nodes]
    connectors = [connector for _, connector in nodes]
    return services, connectors
