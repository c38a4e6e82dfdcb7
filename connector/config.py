"""Connector configuration.

Two layers:
- Settings: process settings read once from the environment.
- ConnectorConfig: the runtime configuration of one connector instance,
  mutated only by its administrator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from connector.constants import DEFAULT_CONNECTOR_NAME, UNISWAP_V2_ROUTER, WETH
from connector.errors import UnauthorizedError
from connector.models.types import NULL_ADDRESS, normalize_address


@dataclass
class Settings:
    """Environment-derived settings."""

    CONNECTOR_NAME: str
    CONNECTOR_ADDRESS: str
    CONNECTOR_ADMIN: str
    ROUTER_ADDRESS: str
    NATIVE_WRAPPER_TOKEN: str

    # JSON-RPC endpoint for the web3 bindings (empty when running in-memory)
    RPC_URL: str = ""
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Read settings from CONNECTOR_* environment variables (cached)."""
    return Settings(
        CONNECTOR_NAME=os.environ.get("CONNECTOR_NAME", DEFAULT_CONNECTOR_NAME),
        CONNECTOR_ADDRESS=normalize_address(
            os.environ.get("CONNECTOR_ADDRESS", NULL_ADDRESS), validate=True
        ),
        CONNECTOR_ADMIN=normalize_address(
            os.environ.get("CONNECTOR_ADMIN", NULL_ADDRESS), validate=True
        ),
        ROUTER_ADDRESS=normalize_address(
            os.environ.get("CONNECTOR_ROUTER_ADDRESS", UNISWAP_V2_ROUTER), validate=True
        ),
        NATIVE_WRAPPER_TOKEN=normalize_address(
            os.environ.get("CONNECTOR_NATIVE_WRAPPER", WETH), validate=True
        ),
        RPC_URL=os.environ.get("CONNECTOR_RPC_URL", ""),
        LOG_LEVEL=os.environ.get("CONNECTOR_LOG_LEVEL", "INFO").upper(),
    )


@dataclass
class ConnectorConfig:
    """Runtime configuration shared by the connector's components.

    pool_factory_address is always derived from the router and is only ever
    written together with router_address (see AmmConnector.change_router).
    """

    name: str
    router_address: str
    pool_factory_address: str
    native_wrapper_token: str
    admin: str

    def __post_init__(self) -> None:
        self.router_address = normalize_address(self.router_address, validate=True)
        self.pool_factory_address = normalize_address(self.pool_factory_address, validate=True)
        self.native_wrapper_token = normalize_address(self.native_wrapper_token, validate=True)
        self.admin = normalize_address(self.admin, validate=True)

    def is_admin(self, caller: str) -> bool:
        return normalize_address(caller) == self.admin

    def require_admin(self, caller: str, operation: str) -> None:
        """Raise UnauthorizedError unless caller is the administrator."""
        if not self.is_admin(caller):
            raise UnauthorizedError(caller, operation)

    def is_native_wrapper(self, token: str) -> bool:
        return normalize_address(token) == self.native_wrapper_token


__all__ = ["Settings", "get_settings", "ConnectorConfig"]
