"""
Custodian node process.
Run several instances on different ports to form a custodian network:

    quorum-node 50051
    quorum-node --port 50052
    quorum-node -p 50053
"""

import logging
import sys

from quorum.config import DEFAULT_PORT, NodeConfig
from quorum.service import CustodianService, create_app
from quorum.storage import ShareStore

logger = logging.getLogger(__name__)


def parse_port(argv: list[str]) -> int:
    """
    Read the listen port from command-line arguments.

    Accepts `--port N`, `-p N` or a single positional `N`. A missing or
    unparsable value falls back to DEFAULT_PORT.
    """
    for i, arg in enumerate(argv):
        if arg in ("--port", "-p"):
            if i + 1 < len(argv):
                return _to_port(argv[i + 1])
            return DEFAULT_PORT
        if i == 0 and not arg.startswith("-"):
            return _to_port(arg)
    return DEFAULT_PORT


def _to_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        return DEFAULT_PORT
    return port if 0 < port < 65536 else DEFAULT_PORT


def build_node(config: NodeConfig):
    """Create the Flask app for one custodian node with an empty share store."""
    service = CustodianService(ShareStore(), config.node_id, strict=config.strict)
    return create_app(service)


def main(argv: list[str] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = NodeConfig.from_env(parse_port(argv))
    app = build_node(config)

    logger.info("[%s] listening on %s:%d", config.node_id, config.host, config.port)
    app.run(host=config.host, port=config.port, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
