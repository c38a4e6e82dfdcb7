"""Value objects for quotes and swaps.

Requests and notifications are pydantic models so they can be validated at
the boundary and serialized for external consumers (indexers, audit logs).
Internal per-call values are plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from connector.models.types import Address, Uint256


class SwapRequest(BaseModel):
    """A caller's swap request.

    For a fixed-input swap, input_amount is the exact amount to sell and
    output_amount is the minimum acceptable output. For a fixed-output swap,
    output_amount is the exact amount to buy and input_amount is the maximum
    the caller is willing to spend.
    """

    input_amount: Uint256 = Field(alias="inputAmount")
    output_amount: Uint256 = Field(alias="outputAmount")
    path: list[Address] = Field(min_length=2, description="Token path; path[0] is sold")
    recipient: Address
    deadline: int = Field(ge=0, description="Unix timestamp after which the swap is infeasible")
    is_fixed_input: bool = Field(alias="isFixedInput")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("path")
    @classmethod
    def _no_self_hops(cls, path: list[str]) -> list[str]:
        for i in range(len(path) - 1):
            if path[i] == path[i + 1]:
                raise ValueError(f"path[{i}] and path[{i + 1}] are the same token")
        return path

    @property
    def token_in(self) -> str:
        return self.path[0]

    @property
    def token_out(self) -> str:
        return self.path[-1]

    @property
    def is_multi_hop(self) -> bool:
        return len(self.path) > 2


@dataclass(frozen=True)
class ReservePair:
    """Pool reserves oriented for a swap direction."""

    reserve_in: int
    reserve_out: int


class QuoteError(str, Enum):
    """Why a quote could not be produced."""

    NO_POOL = "no_pool"
    ZERO_AMOUNT = "zero_amount"
    IDENTICAL_TOKENS = "identical_tokens"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"


@dataclass(frozen=True)
class QuoteResult:
    """Result of a quote: a success flag plus the quoted amount (0 on failure)."""

    ok: bool
    amount: int = 0
    error: QuoteError | None = None

    @classmethod
    def success(cls, amount: int) -> QuoteResult:
        return cls(ok=True, amount=amount)

    @classmethod
    def failure(cls, error: QuoteError) -> QuoteResult:
        return cls(ok=False, amount=0, error=error)

    def as_tuple(self) -> tuple[bool, int]:
        return self.ok, self.amount


class RejectReason(str, Enum):
    """Feasibility check stage that rejected a swap."""

    DEADLINE_PASSED = "deadline_passed"
    NO_POOL = "no_pool"
    INSUFFICIENT_RESERVE = "insufficient_reserve"
    ZERO_AMOUNT = "zero_amount"
    INSUFFICIENT_INPUT = "insufficient_input"
    INSUFFICIENT_OUTPUT = "insufficient_output"


@dataclass(frozen=True)
class Feasibility:
    """Outcome of the feasibility check.

    amount is what moves downstream on acceptance: the quoted required input
    for fixed-output swaps, the caller's input for fixed-input swaps.
    """

    accepted: bool
    amount: int = 0
    reason: RejectReason | None = None

    @classmethod
    def accept(cls, amount: int) -> Feasibility:
        return cls(accepted=True, amount=amount)

    @classmethod
    def reject(cls, reason: RejectReason) -> Feasibility:
        return cls(accepted=False, amount=0, reason=reason)


@dataclass
class SwapOutcome:
    """Result of a swap call: (succeeded, per-hop amounts)."""

    succeeded: bool
    amounts: list[int] = field(default_factory=list)
    reason: RejectReason | None = None

    @classmethod
    def rejected(cls, reason: RejectReason | None) -> SwapOutcome:
        return cls(succeeded=False, amounts=[], reason=reason)

    def as_tuple(self) -> tuple[bool, list[int]]:
        return self.succeeded, list(self.amounts)


class SwapExecuted(BaseModel):
    """Notification emitted after a completed swap."""

    kind: str = "swap_executed"
    path: list[Address]
    amounts: list[int]
    recipient: Address

    model_config = {"frozen": True}


class RouterChanged(BaseModel):
    """Notification emitted when the administrator points the connector at a new router."""

    kind: str = "router_changed"
    router_address: Address = Field(alias="routerAddress")
    pool_factory_address: Address = Field(alias="poolFactoryAddress")

    model_config = {"populate_by_name": True, "frozen": True}


class PoolFactoryRefreshed(BaseModel):
    """Notification emitted when the pool factory is re-read from the router."""

    kind: str = "pool_factory_refreshed"
    pool_factory_address: Address = Field(alias="poolFactoryAddress")

    model_config = {"populate_by_name": True, "frozen": True}


class NativeWrapperChanged(BaseModel):
    """Notification emitted when the native-wrapper token changes."""

    kind: str = "native_wrapper_changed"
    native_wrapper_token: Address = Field(alias="nativeWrapperToken")

    model_config = {"populate_by_name": True, "frozen": True}


Notification = SwapExecuted | RouterChanged | PoolFactoryRefreshed | NativeWrapperChanged
