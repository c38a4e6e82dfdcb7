"""In-memory UniswapV2-style router.

Executes multi-hop swaps against InMemoryPoolRegistry pools and a
TokenLedger. Every check runs before the first ledger mutation, so a
reverted call leaves balances, allowances and reserves untouched.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from connector.dispatch import EntryPoint
from connector.encoding import encode_router_call
from connector.interfaces import PricingOracle
from connector.models.types import normalize_address, short
from connector.pricing import constant_product
from connector.sim.ledger import TokenLedger
from connector.sim.pools import InMemoryPoolRegistry, SimPool

logger = structlog.get_logger()

# Gas reported per hop in the fixed-input receipts
SWAP_GAS_PER_HOP = 60_000


class RouterRevert(RuntimeError):
    """The router rejected a call (in-memory equivalent of a revert)."""


@dataclass
class ExecutedCall:
    """Record of one execution entry point call."""

    entry_point: EntryPoint
    sender: str
    calldata: str
    amounts: list[int]


class InMemoryRouter:
    """Router over an in-memory pool registry.

    Args:
        address: Router address (the spender tokens are approved to)
        registry: Pools the router trades against (its pool factory)
        ledger: Token balances
        native_wrapper: Token unwrapped by the *_eth entry points
        oracle: Pricing formula, constant product 0.3% by default
        clock: Unix time source for deadline enforcement
    """

    def __init__(
        self,
        address: str,
        registry: InMemoryPoolRegistry,
        ledger: TokenLedger,
        native_wrapper: str,
        oracle: PricingOracle = constant_product,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.address = normalize_address(address, validate=True)
        self.registry = registry
        self.ledger = ledger
        self.native_wrapper = normalize_address(native_wrapper, validate=True)
        self.oracle = oracle
        self.clock = clock
        self.calls: list[ExecutedCall] = []
        # Invoked before settlement; lets tests simulate callbacks into the caller
        self.before_settle: Callable[[EntryPoint], None] | None = None

    # --- Views ---

    def pool_factory(self) -> str:
        return self.registry.address

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        pool = self.registry.get_pool(token_a, token_b)
        if pool is None:
            return 0, 0
        return pool.get_reserves(token_a)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        if amount_out <= 0:
            raise RouterRevert("INSUFFICIENT_OUTPUT_AMOUNT")
        if reserve_in <= 0 or reserve_out <= 0:
            raise RouterRevert("INSUFFICIENT_LIQUIDITY")
        return self.oracle.amount_in(amount_out, reserve_in, reserve_out)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        if amount_in <= 0:
            raise RouterRevert("INSUFFICIENT_INPUT_AMOUNT")
        if reserve_in <= 0 or reserve_out <= 0:
            raise RouterRevert("INSUFFICIENT_LIQUIDITY")
        return self.oracle.amount_out(amount_in, reserve_in, reserve_out)

    def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        """Per-hop amounts for selling amount_in along path."""
        if len(path) < 2:
            raise RouterRevert("INVALID_PATH")
        amounts = [amount_in]
        for token_in, token_out in zip(path, path[1:]):
            reserve_in, reserve_out = self._hop(token_in, token_out).get_reserves(token_in)
            amounts.append(self.get_amount_out(amounts[-1], reserve_in, reserve_out))
        return amounts

    def get_amounts_in(self, amount_out: int, path: list[str]) -> list[int]:
        """Per-hop amounts for buying amount_out at the end of path."""
        if len(path) < 2:
            raise RouterRevert("INVALID_PATH")
        amounts = [amount_out]
        for token_in, token_out in reversed(list(zip(path, path[1:]))):
            reserve_in, reserve_out = self._hop(token_in, token_out).get_reserves(token_in)
            if amounts[0] >= reserve_out:
                raise RouterRevert("INSUFFICIENT_LIQUIDITY")
            amounts.insert(0, self.get_amount_in(amounts[0], reserve_in, reserve_out))
        return amounts

    # --- Execution ---

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[list[int], int]:
        self._ensure(deadline)
        amounts = self.get_amounts_out(amount_in, path)
        if amounts[-1] < amount_out_min:
            raise RouterRevert("INSUFFICIENT_OUTPUT_AMOUNT")
        self._settle(
            EntryPoint.EXACT_TOKENS_FOR_TOKENS,
            amounts,
            amount_out_min,
            path,
            recipient,
            deadline,
            sender,
        )
        return amounts, SWAP_GAS_PER_HOP * (len(path) - 1)

    def swap_exact_tokens_for_eth(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[list[int], int]:
        self._ensure(deadline)
        self._ensure_native_destination(path)
        amounts = self.get_amounts_out(amount_in, path)
        if amounts[-1] < amount_out_min:
            raise RouterRevert("INSUFFICIENT_OUTPUT_AMOUNT")
        self._settle(
            EntryPoint.EXACT_TOKENS_FOR_ETH,
            amounts,
            amount_out_min,
            path,
            recipient,
            deadline,
            sender,
        )
        return amounts, SWAP_GAS_PER_HOP * (len(path) - 1)

    def swap_tokens_for_exact_tokens(
        self,
        amount_out: int,
        amount_in_max: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]:
        self._ensure(deadline)
        amounts = self.get_amounts_in(amount_out, path)
        if amounts[0] > amount_in_max:
            raise RouterRevert("EXCESSIVE_INPUT_AMOUNT")
        self._settle(
            EntryPoint.TOKENS_FOR_EXACT_TOKENS,
            amounts,
            amount_in_max,
            path,
            recipient,
            deadline,
            sender,
        )
        return amounts

    def swap_tokens_for_exact_eth(
        self,
        amount_out: int,
        amount_in_max: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]:
        self._ensure(deadline)
        self._ensure_native_destination(path)
        amounts = self.get_amounts_in(amount_out, path)
        if amounts[0] > amount_in_max:
            raise RouterRevert("EXCESSIVE_INPUT_AMOUNT")
        self._settle(
            EntryPoint.TOKENS_FOR_EXACT_ETH,
            amounts,
            amount_in_max,
            path,
            recipient,
            deadline,
            sender,
        )
        return amounts

    # --- Internals ---

    def _hop(self, token_in: str, token_out: str) -> SimPool:
        pool = self.registry.get_pool(token_in, token_out)
        if pool is None:
            raise RouterRevert(f"NO_PAIR {short(token_in)}/{short(token_out)}")
        return pool

    def _ensure(self, deadline: int) -> None:
        if deadline < int(self.clock()):
            raise RouterRevert("EXPIRED")

    def _ensure_native_destination(self, path: list[str]) -> None:
        if normalize_address(path[-1]) != self.native_wrapper:
            raise RouterRevert("INVALID_PATH")

    def _settle(
        self,
        entry_point: EntryPoint,
        amounts: list[int],
        bound: int,
        path: list[str],
        recipient: str,
        deadline: int,
        sender: str,
    ) -> None:
        if self.before_settle is not None:
            self.before_settle(entry_point)

        pools = [self._hop(a, b) for a, b in zip(path, path[1:])]
        # Only fallible mutation; everything after it is covered by pool balances
        self.ledger.transfer_from(path[0], self.address, sender, pools[0].address, amounts[0])

        for i, pool in enumerate(pools):
            pool.apply_swap(path[i], amounts[i], amounts[i + 1])
            if i + 1 < len(pools):
                self.ledger.transfer(
                    path[i + 1], pool.address, pools[i + 1].address, amounts[i + 1]
                )

        to_native = entry_point in (
            EntryPoint.EXACT_TOKENS_FOR_ETH,
            EntryPoint.TOKENS_FOR_EXACT_ETH,
        )
        if to_native:
            self.ledger.burn(path[-1], pools[-1].address, amounts[-1])
            self.ledger.native_balances[normalize_address(recipient)] += amounts[-1]
        else:
            self.ledger.transfer(path[-1], pools[-1].address, recipient, amounts[-1])

        amount = amounts[-1] if not entry_point.is_fixed_input else amounts[0]
        calldata = encode_router_call(entry_point, amount, bound, list(path), recipient, deadline)
        self.calls.append(
            ExecutedCall(
                entry_point=entry_point,
                sender=normalize_address(sender),
                calldata=calldata,
                amounts=list(amounts),
            )
        )
        logger.debug(
            "router_swap_settled",
            entry_point=entry_point.value,
            amounts=amounts,
            recipient=short(recipient),
        )
