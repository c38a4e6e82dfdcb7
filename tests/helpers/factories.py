"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_request

    request = make_request(input_amount=100, path=[TOKEN_A, TOKEN_B])
"""

from dataclasses import dataclass, field

from connector.models.swap import SwapRequest
from connector.pricing import constant_product
from tests.helpers.constants import ALICE, TOKEN_A, TOKEN_B

# Fixed "now" used by FixedClock unless overridden
NOW = 1_700_000_000


class FixedClock:
    """Deterministic clock; advance it by assigning to `now`."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return float(self.now)


def make_request(
    input_amount: int = 100,
    output_amount: int = 0,
    path: list[str] | None = None,
    recipient: str = ALICE,
    deadline: int = NOW + 600,
    is_fixed_input: bool = True,
) -> SwapRequest:
    """Create a swap request with sensible defaults.

    Defaults to a fixed-input swap of 100 TOKEN_A for TOKEN_B with no
    minimum output, a deadline ten minutes after NOW, and ALICE as recipient.
    """
    return SwapRequest(
        input_amount=input_amount,
        output_amount=output_amount,
        path=path if path is not None else [TOKEN_A, TOKEN_B],
        recipient=recipient,
        deadline=deadline,
        is_fixed_input=is_fixed_input,
    )


@dataclass
class CountingOracle:
    """Pricing oracle that delegates to the constant-product formula and records calls."""

    calls: list[tuple[str, int, int, int]] = field(default_factory=list)

    def amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        self.calls.append(("amount_in", amount_out, reserve_in, reserve_out))
        return constant_product.amount_in(amount_out, reserve_in, reserve_out)

    def amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        self.calls.append(("amount_out", amount_in, reserve_in, reserve_out))
        return constant_product.amount_out(amount_in, reserve_in, reserve_out)
