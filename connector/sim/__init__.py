"""In-memory host environment for local dry-runs and tests."""

from connector.sim.chain import InMemoryChain
from connector.sim.ledger import LedgerError, LedgerToken, TokenLedger
from connector.sim.pools import InMemoryPoolRegistry, SimPool
from connector.sim.router import ExecutedCall, InMemoryRouter, RouterRevert

__all__ = [
    "InMemoryChain",
    "TokenLedger",
    "LedgerToken",
    "LedgerError",
    "InMemoryPoolRegistry",
    "SimPool",
    "InMemoryRouter",
    "RouterRevert",
    "ExecutedCall",
]
