"""AmmConnector: the public surface of the connector.

Wires the pool gate, quote engine and swap controller around one shared
ConnectorConfig, and owns the administrator-gated configuration setters.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError

from connector.chain import Web3Chain
from connector.collaborators import call_collaborator
from connector.config import ConnectorConfig, Settings
from connector.dispatch import SwapController
from connector.errors import InvalidSwapRequestError, MalformedResponseError
from connector.events import EventBus
from connector.gate import PoolExistenceGate
from connector.interfaces import CollaboratorResolver, PricingOracle
from connector.log_config import configure_logging
from connector.models.swap import (
    NativeWrapperChanged,
    PoolFactoryRefreshed,
    QuoteResult,
    RouterChanged,
    SwapOutcome,
    SwapRequest,
)
from connector.models.types import is_null_address, is_valid_address, normalize_address, short
from connector.quote import QuoteEngine

logger = structlog.get_logger()


class AmmConnector:
    """Adapter exposing quotes and swaps against a constant-product AMM router.

    Use `create` to build a connector: it reads the pool factory from the
    router so the factory/router invariant holds from the start.

    Args:
        config: Runtime configuration (shared with all components)
        resolver: Resolves router, registry and token addresses to collaborators
        address: The connector's own account
        oracle: Pricing oracle override. If None, the configured router prices swaps.
        clock: Current unix time source for deadline checks
        events: Notification bus. A fresh one is created if None.
    """

    def __init__(
        self,
        config: ConnectorConfig,
        resolver: CollaboratorResolver,
        address: str,
        oracle: PricingOracle | None = None,
        clock: Callable[[], float] = time.time,
        events: EventBus | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.address = normalize_address(address, validate=True)
        self.events = events or EventBus()
        self.gate = PoolExistenceGate(config, resolver)
        self.quotes = QuoteEngine(config, resolver, self.gate, oracle)
        self.controller = SwapController(
            config, resolver, self.gate, self.quotes, self.events, self.address, clock
        )

    @classmethod
    def create(
        cls,
        resolver: CollaboratorResolver,
        *,
        name: str,
        router_address: str,
        native_wrapper_token: str,
        admin: str,
        address: str,
        **kwargs: Any,
    ) -> AmmConnector:
        """Build a connector, deriving the pool factory from the router."""
        router_address = normalize_address(router_address, validate=True)
        factory = _read_pool_factory(resolver, router_address)
        config = ConnectorConfig(
            name=name,
            router_address=router_address,
            pool_factory_address=factory,
            native_wrapper_token=native_wrapper_token,
            admin=admin,
        )
        logger.info(
            "connector_created",
            name=name,
            router=short(router_address),
            pool_factory=short(factory),
            native_wrapper=short(config.native_wrapper_token),
        )
        return cls(config, resolver, address, **kwargs)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        resolver: CollaboratorResolver | None = None,
        **kwargs: Any,
    ) -> AmmConnector:
        """Build a connector from environment settings (see config.get_settings).

        Configures logging at settings.LOG_LEVEL. Without a resolver, the
        connector talks to the chain behind settings.RPC_URL.

        Raises:
            ValueError: No resolver was given and RPC_URL is empty.
        """
        configure_logging(settings.LOG_LEVEL)
        if resolver is None:
            if not settings.RPC_URL:
                raise ValueError("CONNECTOR_RPC_URL is required when no resolver is given")
            resolver = Web3Chain.from_rpc(settings.RPC_URL)
        return cls.create(
            resolver,
            name=settings.CONNECTOR_NAME,
            router_address=settings.ROUTER_ADDRESS,
            native_wrapper_token=settings.NATIVE_WRAPPER_TOKEN,
            admin=settings.CONNECTOR_ADMIN,
            address=settings.CONNECTOR_ADDRESS,
            **kwargs,
        )

    # --- Administration ---

    def change_router(self, caller: str, router_address: str) -> None:
        """Point the connector at a new router and re-derive its pool factory.

        Raises:
            UnauthorizedError: caller is not the administrator (nothing changes).
            CollaboratorError: the new router could not report its factory
                (nothing changes).
        """
        self.config.require_admin(caller, "change_router")
        router_address = normalize_address(router_address, validate=True)
        factory = _read_pool_factory(self.resolver, router_address)

        self.config.router_address = router_address
        self.config.pool_factory_address = factory
        logger.info("router_changed", router=short(router_address), pool_factory=short(factory))
        self.events.publish(
            RouterChanged(router_address=router_address, pool_factory_address=factory)
        )

    def refresh_pool_factory(self, caller: str) -> None:
        """Re-read the pool factory from the current router."""
        self.config.require_admin(caller, "refresh_pool_factory")
        factory = _read_pool_factory(self.resolver, self.config.router_address)

        self.config.pool_factory_address = factory
        logger.info("pool_factory_refreshed", pool_factory=short(factory))
        self.events.publish(PoolFactoryRefreshed(pool_factory_address=factory))

    def change_native_wrapper(self, caller: str, token: str) -> None:
        """Change the token treated as the wrapped native asset."""
        self.config.require_admin(caller, "change_native_wrapper")
        token = normalize_address(token, validate=True)

        self.config.native_wrapper_token = token
        logger.info("native_wrapper_changed", token=short(token))
        self.events.publish(NativeWrapperChanged(native_wrapper_token=token))

    # --- Quotes ---

    def quote_input_for(self, amount_out: int, token_in: str, token_out: str) -> QuoteResult:
        """Input of token_in required to receive amount_out of token_out."""
        return self.quotes.quote_input_for(amount_out, token_in, token_out)

    def quote_output_for(self, amount_in: int, token_in: str, token_out: str) -> QuoteResult:
        """Output of token_out received for amount_in of token_in."""
        return self.quotes.quote_output_for(amount_in, token_in, token_out)

    # --- Swaps ---

    def swap(self, caller: str, request: SwapRequest | dict[str, Any]) -> SwapOutcome:
        """Swap on behalf of caller.

        Args:
            caller: Account whose tokens are pulled (must have approved the connector)
            request: SwapRequest, or a dict validated into one

        Returns:
            SwapOutcome: (True, per-hop amounts) or (False, []) when infeasible

        Raises:
            InvalidSwapRequestError: request failed validation.
            ReentrantSwapError: another swap is in flight.
            CollaboratorError: infrastructure failure (state left untouched).
        """
        if not isinstance(request, SwapRequest):
            try:
                request = SwapRequest.model_validate(request)
            except ValidationError as e:
                raise InvalidSwapRequestError(str(e)) from e
        return self.controller.swap(caller, request)


def _read_pool_factory(resolver: CollaboratorResolver, router_address: str) -> str:
    router = resolver.router(router_address)
    factory = call_collaborator("router", "pool_factory", router.pool_factory)
    if not is_valid_address(factory) or is_null_address(factory):
        raise MalformedResponseError(
            "router", "pool_factory", f"expected factory address, got {factory!r}"
        )
    return normalize_address(factory)


__all__ = ["AmmConnector"]
