"""Shared test helpers."""

from tests.helpers.constants import (
    ADMIN,
    ALICE,
    ALICE_BALANCE,
    BOB,
    CONNECTOR,
    FACTORY,
    FACTORY_2,
    POOL_AB,
    POOL_AC,
    POOL_AW,
    POOL_BC,
    ROUTER,
    ROUTER_2,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    WETH,
)
from tests.helpers.factories import CountingOracle, FixedClock, make_request

__all__ = [
    "ADMIN",
    "ALICE",
    "ALICE_BALANCE",
    "BOB",
    "CONNECTOR",
    "FACTORY",
    "FACTORY_2",
    "POOL_AB",
    "POOL_AC",
    "POOL_AW",
    "POOL_BC",
    "ROUTER",
    "ROUTER_2",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "WETH",
    "CountingOracle",
    "FixedClock",
    "make_request",
]
