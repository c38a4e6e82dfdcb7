"""Swap feasibility check and directional dispatch.

A swap request walks

    DEADLINE_CHECK -> POOL_CHECK -> LIQUIDITY_CHECK -> AMOUNT_CHECK

and is either rejected with no side effects, or accepted and then executed:

    TRANSFER_IN -> DIRECTIONAL_DISPATCH -> EMIT

Pre-validation on multi-hop paths is first-hop only: the pool check uses
(path[0], path[-1]) but reserves come from (path[0], path[1]). The router
still executes the full path, so a multi-hop request that passes here can
fail at execution, in which case the transfer-in is unwound.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from enum import Enum

import structlog

from connector.collaborators import call_collaborator, expect_amounts
from connector.config import ConnectorConfig
from connector.errors import (
    CollaboratorError,
    ExecutionError,
    MalformedResponseError,
    ReentrantSwapError,
)
from connector.events import EventBus
from connector.gate import PoolExistenceGate
from connector.interfaces import CollaboratorResolver, Router, Token
from connector.models.swap import (
    Feasibility,
    RejectReason,
    SwapExecuted,
    SwapOutcome,
    SwapRequest,
)
from connector.models.types import normalize_address, short
from connector.quote import QuoteEngine

logger = structlog.get_logger()


class EntryPoint(str, Enum):
    """Router execution entry points, keyed by direction and destination."""

    TOKENS_FOR_EXACT_TOKENS = "swap_tokens_for_exact_tokens"
    TOKENS_FOR_EXACT_ETH = "swap_tokens_for_exact_eth"
    EXACT_TOKENS_FOR_TOKENS = "swap_exact_tokens_for_tokens"
    EXACT_TOKENS_FOR_ETH = "swap_exact_tokens_for_eth"

    @property
    def is_fixed_input(self) -> bool:
        return self in (EntryPoint.EXACT_TOKENS_FOR_TOKENS, EntryPoint.EXACT_TOKENS_FOR_ETH)


def select_entry_point(is_fixed_input: bool, to_native: bool) -> EntryPoint:
    """Pick the router entry point for a (direction, destination) combination."""
    if is_fixed_input:
        return EntryPoint.EXACT_TOKENS_FOR_ETH if to_native else EntryPoint.EXACT_TOKENS_FOR_TOKENS
    return EntryPoint.TOKENS_FOR_EXACT_ETH if to_native else EntryPoint.TOKENS_FOR_EXACT_TOKENS


class SwapController:
    """Pre-validates swap requests and executes the accepted ones.

    At most one swap may be in flight per controller. A swap entered while
    another is running (a reentrant callback from a collaborator, or a
    second thread) raises ReentrantSwapError without touching any state.

    Args:
        config: Shared connector configuration
        resolver: Resolves router and token collaborators
        gate: Pool existence gate
        quotes: Quote engine used for reserve fetches and pricing
        events: Bus receiving SwapExecuted notifications
        address: The connector's own account (custodian of pulled tokens)
        clock: Returns the current unix time; defaults to time.time
    """

    def __init__(
        self,
        config: ConnectorConfig,
        resolver: CollaboratorResolver,
        gate: PoolExistenceGate,
        quotes: QuoteEngine,
        events: EventBus,
        address: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.gate = gate
        self.quotes = quotes
        self.events = events
        self.address = normalize_address(address, validate=True)
        self.clock = clock
        self._in_flight = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def check_feasibility(self, request: SwapRequest) -> Feasibility:
        """Decide whether a request can succeed, without side effects.

        Raises:
            CollaboratorError: A collaborator needed for the decision failed.
        """
        now = int(self.clock())
        if request.deadline < now:
            return self._reject(
                request, RejectReason.DEADLINE_PASSED, deadline=request.deadline, now=now
            )

        if not self.gate.pool_exists(request.token_in, request.token_out):
            return self._reject(request, RejectReason.NO_POOL)

        # First hop only, see module docstring
        reserves = self.quotes.fetch_reserves(request.path[0], request.path[1])
        if (
            reserves.reserve_in == 0
            or reserves.reserve_out == 0
            or request.output_amount > reserves.reserve_out
        ):
            return self._reject(
                request,
                RejectReason.INSUFFICIENT_RESERVE,
                output_amount=request.output_amount,
                reserve_out=reserves.reserve_out,
            )

        if request.is_fixed_input:
            if request.input_amount == 0:
                return self._reject(request, RejectReason.ZERO_AMOUNT)
            exchanged = self.quotes.amount_out_for(reserves, request.input_amount)
            if exchanged < request.output_amount:
                return self._reject(
                    request,
                    RejectReason.INSUFFICIENT_OUTPUT,
                    exchanged_output=exchanged,
                    min_output=request.output_amount,
                )
            return Feasibility.accept(request.input_amount)

        if request.output_amount == 0:
            return self._reject(request, RejectReason.ZERO_AMOUNT)
        # Draining the pool prices at max uint256, so reject before a max-uint bound can match it
        if request.output_amount >= reserves.reserve_out:
            return self._reject(
                request,
                RejectReason.INSUFFICIENT_RESERVE,
                output_amount=request.output_amount,
                reserve_out=reserves.reserve_out,
            )
        required = self.quotes.amount_in_for(reserves, request.output_amount)
        if request.input_amount < required:
            return self._reject(
                request,
                RejectReason.INSUFFICIENT_INPUT,
                required_input=required,
                max_input=request.input_amount,
            )
        return Feasibility.accept(required)

    def swap(self, caller: str, request: SwapRequest) -> SwapOutcome:
        """Validate and, if feasible, execute a swap on behalf of caller.

        Returns:
            SwapOutcome(True, amounts) on success, SwapOutcome(False, []) if infeasible.

        Raises:
            ReentrantSwapError: Another swap is in flight on this controller.
            CollaboratorError: A collaborator failed. Any tokens already
                pulled from the caller are returned before this propagates.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.warning("swap_reentrancy_rejected", caller=short(caller))
            raise ReentrantSwapError("a swap is already in flight on this connector")
        try:
            feasibility = self.check_feasibility(request)
            if not feasibility.accepted:
                return SwapOutcome.rejected(feasibility.reason)
            return self._execute(normalize_address(caller), request, feasibility.amount)
        finally:
            self._in_flight.release()

    def _execute(self, caller: str, request: SwapRequest, amount_in: int) -> SwapOutcome:
        router = self.resolver.router(self.config.router_address)
        token = self.resolver.token(request.token_in)

        pulled = False
        approved = False
        try:
            self._pull(token, caller, amount_in)
            pulled = True
            self._authorize(token, amount_in)
            approved = True
            amounts = self._dispatch(router, request, amount_in)
        except Exception:
            logger.warning(
                "swap_unwinding",
                caller=short(caller),
                token=short(request.token_in),
                amount=amount_in,
                pulled=pulled,
                approved=approved,
            )
            self._unwind(token, caller, amount_in, pulled=pulled, approved=approved)
            raise

        self.events.publish(
            SwapExecuted(path=list(request.path), amounts=amounts, recipient=request.recipient)
        )
        return SwapOutcome(succeeded=True, amounts=amounts)

    def _pull(self, token: Token, caller: str, amount: int) -> None:
        ok = call_collaborator(
            "token",
            "transfer_from",
            token.transfer_from,
            self.address,
            caller,
            self.address,
            amount,
        )
        if not ok:
            raise CollaboratorError("token", "transfer_from", "transfer returned false")

    def _authorize(self, token: Token, amount: int) -> None:
        ok = call_collaborator(
            "token", "approve", token.approve, self.address, self.config.router_address, amount
        )
        if not ok:
            raise CollaboratorError("token", "approve", "approve returned false")

    def _unwind(
        self, token: Token, caller: str, amount: int, *, pulled: bool, approved: bool
    ) -> None:
        """Revoke the router allowance and refund the caller.

        Each step is attempted on its own so a failed revoke never blocks the
        refund. Step failures are logged; the caller re-raises the original error.
        """
        if approved:
            try:
                call_collaborator(
                    "token", "approve", token.approve, self.address, self.config.router_address, 0
                )
            except CollaboratorError as e:
                logger.error("swap_unwind_step_failed", step="revoke_approval", error=str(e))
        if pulled:
            try:
                call_collaborator(
                    "token", "transfer", token.transfer, self.address, caller, amount
                )
            except CollaboratorError as e:
                logger.error(
                    "swap_unwind_step_failed",
                    step="refund",
                    caller=short(caller),
                    amount=amount,
                    error=str(e),
                )

    def _dispatch(self, router: Router, request: SwapRequest, amount_in: int) -> list[int]:
        entry_point = select_entry_point(
            request.is_fixed_input, self.config.is_native_wrapper(request.token_out)
        )
        if entry_point.is_fixed_input:
            amount, bound = request.input_amount, request.output_amount
        else:
            amount, bound = request.output_amount, amount_in

        logger.info(
            "swap_dispatch",
            entry_point=entry_point.value,
            amount=amount,
            bound=bound,
            hops=len(request.path) - 1,
            recipient=short(request.recipient),
        )
        result = call_collaborator(
            "router",
            entry_point.value,
            getattr(router, entry_point.value),
            amount,
            bound,
            list(request.path),
            request.recipient,
            request.deadline,
            sender=self.address,
            error_cls=ExecutionError,
        )
        if entry_point.is_fixed_input:
            if not isinstance(result, (tuple, list)) or len(result) != 2:
                raise MalformedResponseError(
                    "router", entry_point.value, f"expected (amounts, extra), got {result!r}"
                )
            amounts, _extra = result
        else:
            amounts = result
        return expect_amounts("router", entry_point.value, amounts)

    def _reject(self, request: SwapRequest, reason: RejectReason, **context: object) -> Feasibility:
        logger.info(
            "swap_rejected",
            reason=reason.value,
            token_in=short(request.token_in),
            token_out=short(request.token_out),
            fixed_input=request.is_fixed_input,
            **context,
        )
        return Feasibility.reject(reason)


__all__ = ["SwapController", "EntryPoint", "select_entry_point"]
