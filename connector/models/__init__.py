"""Data models for the connector."""

from connector.models.swap import (
    Feasibility,
    NativeWrapperChanged,
    Notification,
    PoolFactoryRefreshed,
    QuoteError,
    QuoteResult,
    RejectReason,
    ReservePair,
    RouterChanged,
    SwapExecuted,
    SwapOutcome,
    SwapRequest,
)
from connector.models.types import (
    NULL_ADDRESS,
    UINT256_MAX,
    Address,
    Uint256,
    is_null_address,
    is_valid_address,
    normalize_address,
)

__all__ = [
    "Address",
    "Uint256",
    "UINT256_MAX",
    "NULL_ADDRESS",
    "is_null_address",
    "is_valid_address",
    "normalize_address",
    "SwapRequest",
    "ReservePair",
    "QuoteError",
    "QuoteResult",
    "RejectReason",
    "Feasibility",
    "SwapOutcome",
    "SwapExecuted",
    "RouterChanged",
    "PoolFactoryRefreshed",
    "NativeWrapperChanged",
    "Notification",
]
