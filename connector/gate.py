"""Pool existence gate."""

from __future__ import annotations

import structlog

from connector.collaborators import call_collaborator
from connector.config import ConnectorConfig
from connector.errors import MalformedResponseError
from connector.interfaces import CollaboratorResolver
from connector.models.types import is_null_address, is_valid_address, short

logger = structlog.get_logger()


class PoolExistenceGate:
    """Answers whether the configured pool registry has a pool for a token pair.

    The registry is resolved from the configuration on every call, so a
    router change (which re-derives the pool factory) takes effect at once.
    """

    def __init__(self, config: ConnectorConfig, resolver: CollaboratorResolver) -> None:
        self.config = config
        self.resolver = resolver

    def pool_exists(self, token_a: str, token_b: str) -> bool:
        """True if the registry reports a pool for the unordered pair.

        Raises:
            CollaboratorError: The registry could not be queried.
            MalformedResponseError: The registry returned something other than an address.
        """
        registry = self.resolver.registry(self.config.pool_factory_address)
        pool = call_collaborator(
            "registry", "get_liquidity_pool", registry.get_liquidity_pool, token_a, token_b
        )
        if pool is not None and not is_valid_address(pool):
            raise MalformedResponseError(
                "registry", "get_liquidity_pool", f"expected address, got {pool!r}"
            )
        if is_null_address(pool):
            logger.debug("pool_absent", token_a=short(token_a), token_b=short(token_b))
            return False
        return True
