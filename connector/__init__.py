"""AMM connector: swap feasibility, quoting and dispatch over a constant-product router."""

from connector.connector import AmmConnector
from connector.models.swap import QuoteError, QuoteResult, SwapOutcome, SwapRequest

__version__ = "0.1.0"
__all__ = [
    "AmmConnector",
    "SwapRequest",
    "SwapOutcome",
    "QuoteResult",
    "QuoteError",
    "__version__",
]
