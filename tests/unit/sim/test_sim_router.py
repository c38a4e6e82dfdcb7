"""Tests for the in-memory UniswapV2-style router."""

import pytest

from connector.dispatch import EntryPoint
from connector.encoding import entry_point_of
from connector.errors import CollaboratorError
from connector.interfaces import PoolRegistry, Router, Token
from connector.sim import LedgerError, RouterRevert
from connector.sim.router import SWAP_GAS_PER_HOP
from tests.helpers import (
    ALICE,
    BOB,
    FACTORY,
    POOL_AB,
    POOL_BC,
    ROUTER,
    ROUTER_2,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    WETH,
)
from tests.helpers.factories import NOW

DEADLINE = NOW + 600


@pytest.fixture
def alice_approved(chain):
    """ALICE holds 1000 TOKEN_A and has approved the router directly."""
    chain.ledger.mint(TOKEN_A, ALICE, 1000)
    chain.ledger.approve(TOKEN_A, ALICE, ROUTER, 1000)


class TestViews:
    def test_pool_factory(self, router):
        assert router.pool_factory() == FACTORY

    def test_get_reserves(self, chain, router):
        chain.add_pool(FACTORY, POOL_BC, TOKEN_B, TOKEN_C, 300, 700)

        assert router.get_reserves(TOKEN_B, TOKEN_C) == (300, 700)
        assert router.get_reserves(TOKEN_C, TOKEN_B) == (700, 300)

    def test_get_reserves_without_pool(self, router):
        assert router.get_reserves(TOKEN_A, TOKEN_C) == (0, 0)

    def test_pricing(self, router):
        assert router.get_amount_out(100, 1000, 1000) == 90
        assert router.get_amount_in(100, 1000, 1000) == 112

    @pytest.mark.parametrize(
        "args",
        [(0, 1000, 1000), (100, 0, 1000), (100, 1000, 0)],
    )
    def test_pricing_reverts(self, router, args):
        with pytest.raises(RouterRevert):
            router.get_amount_out(*args)
        with pytest.raises(RouterRevert):
            router.get_amount_in(*args)

    def test_amounts_along_path(self, chain, router):
        chain.add_pool(FACTORY, POOL_BC, TOKEN_B, TOKEN_C, 1000, 1000)

        assert router.get_amounts_out(100, [TOKEN_A, TOKEN_B, TOKEN_C]) == [100, 90, 82]
        assert router.get_amounts_in(100, [TOKEN_A, TOKEN_B]) == [112, 100]

    def test_amounts_in_beyond_reserve(self, router):
        with pytest.raises(RouterRevert, match="INSUFFICIENT_LIQUIDITY"):
            router.get_amounts_in(1000, [TOKEN_A, TOKEN_B])


@pytest.mark.usefixtures("alice_approved")
class TestExecution:
    def test_exact_input(self, chain, router):
        amounts, gas = router.swap_exact_tokens_for_tokens(
            100, 90, [TOKEN_A, TOKEN_B], BOB, DEADLINE, sender=ALICE
        )

        assert amounts == [100, 90]
        assert gas == SWAP_GAS_PER_HOP
        assert chain.ledger.balance_of(TOKEN_B, BOB) == 90
        assert chain.ledger.balance_of(TOKEN_A, POOL_AB) == 1100
        assert chain.registry(FACTORY).get_pool(TOKEN_A, TOKEN_B).get_reserves(TOKEN_A) == (
            1100,
            910,
        )

    def test_exact_input_below_minimum(self, chain, router):
        before = chain.ledger.snapshot()

        with pytest.raises(RouterRevert, match="INSUFFICIENT_OUTPUT_AMOUNT"):
            router.swap_exact_tokens_for_tokens(
                100, 91, [TOKEN_A, TOKEN_B], BOB, DEADLINE, sender=ALICE
            )

        assert chain.ledger.snapshot() == before
        assert router.calls == []

    def test_exact_output(self, chain, router):
        amounts = router.swap_tokens_for_exact_tokens(
            100, 112, [TOKEN_A, TOKEN_B], BOB, DEADLINE, sender=ALICE
        )

        assert amounts == [112, 100]
        assert chain.ledger.balance_of(TOKEN_A, ALICE) == 888

    def test_exact_output_above_maximum(self, router):
        with pytest.raises(RouterRevert, match="EXCESSIVE_INPUT_AMOUNT"):
            router.swap_tokens_for_exact_tokens(
                100, 111, [TOKEN_A, TOKEN_B], BOB, DEADLINE, sender=ALICE
            )

    def test_expired(self, router):
        with pytest.raises(RouterRevert, match="EXPIRED"):
            router.swap_exact_tokens_for_tokens(
                100, 0, [TOKEN_A, TOKEN_B], BOB, NOW - 1, sender=ALICE
            )

    def test_native_output_unwraps(self, chain, router):
        amounts, _ = router.swap_exact_tokens_for_eth(
            100, 0, [TOKEN_A, WETH], BOB, DEADLINE, sender=ALICE
        )

        assert chain.ledger.native_balances[BOB] == amounts[-1] == 90
        assert chain.ledger.balance_of(WETH, BOB) == 0

    def test_native_entry_point_requires_wrapper_destination(self, router):
        with pytest.raises(RouterRevert, match="INVALID_PATH"):
            router.swap_tokens_for_exact_eth(
                10, 100, [TOKEN_A, TOKEN_B], BOB, DEADLINE, sender=ALICE
            )

    def test_sender_without_allowance(self, chain, router):
        with pytest.raises(LedgerError, match="exceeds allowance"):
            router.swap_exact_tokens_for_tokens(
                100, 0, [TOKEN_A, TOKEN_B], BOB, DEADLINE, sender=BOB
            )
        assert router.calls == []

    def test_records_calldata(self, router):
        router.swap_tokens_for_exact_tokens(
            50, 100, [TOKEN_A, TOKEN_B], BOB, DEADLINE, sender=ALICE
        )

        (call,) = router.calls
        assert call.entry_point is EntryPoint.TOKENS_FOR_EXACT_TOKENS
        assert entry_point_of(call.calldata) is EntryPoint.TOKENS_FOR_EXACT_TOKENS
        assert call.sender == ALICE
        assert call.amounts == [53, 50]


class TestChainResolver:
    def test_unknown_router(self, chain):
        with pytest.raises(CollaboratorError):
            chain.router(ROUTER_2)

    def test_unknown_registry(self, chain):
        with pytest.raises(CollaboratorError):
            chain.registry(ROUTER_2)

    def test_add_pool_mints_reserves(self, chain):
        assert chain.ledger.balance_of(TOKEN_A, POOL_AB) == 1000
        assert chain.ledger.balance_of(TOKEN_B, POOL_AB) == 1000

    def test_collaborators_satisfy_protocols(self, chain):
        assert isinstance(chain.router(ROUTER), Router)
        assert isinstance(chain.registry(FACTORY), PoolRegistry)
        assert isinstance(chain.token(TOKEN_A), Token)
