"""
Errors raised by the sharing scheme, the custodian protocol and the coordinator.

The scheme errors subclass ValueError so callers that already guard
split/recover with `except ValueError` keep working.
"""


class QuorumError(Exception):
    """Base class for every error raised by quorum."""


class InvalidThreshold(QuorumError, ValueError):
    """Threshold below 2, above the number of shares, or inconsistent across shares."""


class InsufficientShares(QuorumError, ValueError):
    """Fewer shares than the threshold were supplied for recovery."""


class DuplicateShareIndex(QuorumError, ValueError):
    """Two shares carry the same x-coordinate."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Duplicate share index: {index}")


class MalformedScalar(QuorumError, ValueError):
    """Byte input that does not decode to a usable field element."""


class ShareNotFound(QuorumError, LookupError):
    """A custodian holds no share for the requested ceremony."""

    def __init__(self, ceremony_id: str):
        self.ceremony_id = ceremony_id
        super().__init__(f"No share found for ceremony '{ceremony_id}'")


class CustodianError(QuorumError, RuntimeError):
    """A custodian node rejected a request."""


class CustodianUnavailable(CustodianError):
    """A custodian node could not be reached."""


class CeremonyAborted(QuorumError, RuntimeError):
    """A ceremony stopped on the first failing node.

    `nodes` holds the per-node status at the moment of failure.
    """

    def __init__(self, message: str, nodes: list = None):
        self.nodes = nodes or []
        super().__init__(message)
