"""Exception hierarchy for the connector.

Infeasible swaps and quotes are never exceptions: they are reported through
SwapOutcome / QuoteResult. Exceptions are reserved for infrastructure
failures, administrative misuse, reentrancy and malformed requests.
"""


class ConnectorError(Exception):
    """Base class for connector errors."""


class CollaboratorError(ConnectorError):
    """An external collaborator (router, registry, token) failed or was unreachable."""

    def __init__(self, collaborator: str, operation: str, message: str) -> None:
        self.collaborator = collaborator
        self.operation = operation
        super().__init__(f"{collaborator}.{operation} failed: {message}")


class MalformedResponseError(CollaboratorError):
    """A collaborator answered, but with a value of the wrong shape."""


class ExecutionError(CollaboratorError):
    """The router rejected or failed a swap execution."""


class UnauthorizedError(ConnectorError):
    """A non-administrator attempted an administrative operation."""

    def __init__(self, caller: str, operation: str) -> None:
        self.caller = caller
        self.operation = operation
        super().__init__(f"{caller} is not authorized to call {operation}")


class ReentrantSwapError(ConnectorError):
    """A swap was requested while another swap is in flight."""


class InvalidSwapRequestError(ConnectorError, ValueError):
    """A swap request is structurally invalid (bad path, addresses or amounts)."""


__all__ = [
    "ConnectorError",
    "CollaboratorError",
    "MalformedResponseError",
    "ExecutionError",
    "UnauthorizedError",
    "ReentrantSwapError",
    "InvalidSwapRequestError",
]
