"""
Quorum — Basic Usage Example

Runs a full 3-of-5 ceremony against five custodian nodes living in this
process. Replace the local connectors with HttpCustodianConnector to talk
to real `quorum-node` processes.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quorum import Coordinator, CustodianService, ShareStore, recover_secret, split_secret
from quorum.connectors import LocalCustodianConnector
from quorum.field import encode_scalar, random_scalar


def main():
    print("=" * 50)
    print("  Quorum — 3-of-5 Secret Custody")
    print("=" * 50)

    # Five independent custodians, each with its own share store
    services = [CustodianService(ShareStore(), node_id=f"custodian-{i}") for i in range(1, 6)]
    connectors = [LocalCustodianConnector(s) for s in services]

    coordinator = Coordinator(connectors, threshold=3)
    report = coordinator.run_ceremony("example-ceremony")

    print(f"\nSecret:    {encode_scalar(report['secret']).hex()}")
    print(f"Recovered: {encode_scalar(report['recovered']).hex()}")
    print(f"Verified:  {report['verified']}")
    for node in report["nodes"]:
        print(f"  {node['endpoint']}: share {node['share_index']} {node['state']}")

    # Any three shares rebuild the secret; two are not enough
    secret = random_scalar()
    shares = split_secret(secret, 3, 5)
    print(f"\nShares 2, 4, 5 recover the secret: {recover_secret([shares[1], shares[3], shares[4]]) == secret}")
    try:
        recover_secret(shares[:2])
    except ValueError as e:
        print(f"Two shares are rejected: {e}")


if __name__ == "__main__":
    main()
