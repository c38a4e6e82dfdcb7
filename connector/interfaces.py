"""Interfaces of the external collaborators the connector depends on.

The connector never talks to a chain directly. It drives a router, a pool
registry and tokens through these protocols, so the same core runs against
web3 bindings (connector.chain) or the in-memory host (connector.sim).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PricingOracle(Protocol):
    """Authoritative AMM pricing function.

    The connector sequences calls to the oracle but never second-guesses
    its results.
    """

    def amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Input required to receive amount_out from a pool with these reserves."""
        ...

    def amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output received for amount_in into a pool with these reserves."""
        ...


@runtime_checkable
class PoolRegistry(Protocol):
    """Liquidity-pool registry (the AMM's factory)."""

    def get_liquidity_pool(self, token_a: str, token_b: str) -> str | None:
        """Pool address for the unordered pair, or None / the null address if absent."""
        ...


@runtime_checkable
class Router(Protocol):
    """AMM router: reserve lookup, pricing and the four swap entry points.

    Execution entry points take (amount, bound, path, recipient, deadline).
    For exact-output calls amount is the output and bound the maximum input;
    for exact-input calls amount is the input and bound the minimum output.
    sender is the account the router pulls the input from.
    """

    def pool_factory(self) -> str: ...

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Reserves ordered as (reserve of token_a, reserve of token_b)."""
        ...

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int: ...

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int: ...

    def swap_tokens_for_exact_tokens(
        self,
        amount_out: int,
        amount_in_max: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]: ...

    def swap_tokens_for_exact_eth(
        self,
        amount_out: int,
        amount_in_max: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]: ...

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[list[int], int]: ...

    def swap_exact_tokens_for_eth(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[list[int], int]: ...


@runtime_checkable
class Token(Protocol):
    """ERC20-style token: transfers and allowances."""

    def balance_of(self, owner: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool: ...


@runtime_checkable
class CollaboratorResolver(Protocol):
    """Turns configured addresses into collaborator objects."""

    def router(self, address: str) -> Router: ...

    def registry(self, address: str) -> PoolRegistry: ...

    def token(self, address: str) -> Token: ...


__all__ = [
    "PricingOracle",
    "PoolRegistry",
    "Router",
    "Token",
    "CollaboratorResolver",
]
