"""Tests for the web3 collaborator bindings, against a mocked web3 instance."""

from unittest.mock import MagicMock

import pytest
from eth_utils import to_checksum_address

from connector.chain import Web3Chain, Web3PoolRegistry, Web3Router, Web3Token
from connector.errors import CollaboratorError, ExecutionError
from connector.models.types import NULL_ADDRESS
from tests.helpers import ALICE, BOB, CONNECTOR, FACTORY, POOL_AB, ROUTER, TOKEN_A, TOKEN_B
from tests.helpers.factories import NOW


class FakeWeb3:
    """Stand-in for a Web3 instance: one MagicMock contract per address."""

    def __init__(self) -> None:
        self.eth = MagicMock()
        self.contracts: dict[str, MagicMock] = {}
        self.eth.contract.side_effect = self._contract
        self.eth.wait_for_transaction_receipt.return_value = {"status": 1, "gasUsed": 120_000}

    def _contract(self, address: str, abi: list[dict]) -> MagicMock:
        return self.contracts.setdefault(address.lower(), MagicMock())

    def functions(self, address: str) -> MagicMock:
        return self._contract(address, []).functions


@pytest.fixture
def w3() -> FakeWeb3:
    w3 = FakeWeb3()
    w3.functions(ROUTER).factory.return_value.call.return_value = to_checksum_address(FACTORY)
    w3.functions(FACTORY).getPair.return_value.call.return_value = to_checksum_address(POOL_AB)
    return w3


class TestWeb3PoolRegistry:
    def test_get_liquidity_pool(self, w3):
        registry = Web3PoolRegistry(w3, FACTORY)

        assert registry.get_liquidity_pool(TOKEN_A, TOKEN_B) == POOL_AB
        w3.functions(FACTORY).getPair.assert_called_with(
            to_checksum_address(TOKEN_A), to_checksum_address(TOKEN_B)
        )

    def test_rpc_failure(self, w3):
        w3.functions(FACTORY).getPair.return_value.call.side_effect = ConnectionError("down")

        with pytest.raises(CollaboratorError) as exc_info:
            Web3PoolRegistry(w3, FACTORY).get_liquidity_pool(TOKEN_A, TOKEN_B)

        assert exc_info.value.collaborator == "registry"
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestWeb3Router:
    def test_pool_factory(self, w3):
        assert Web3Router(w3, ROUTER).pool_factory() == FACTORY

    @pytest.mark.parametrize(
        ("token0", "expected"),
        [(TOKEN_A, (10, 20)), (TOKEN_B, (20, 10))],
    )
    def test_get_reserves_oriented(self, w3, token0, expected):
        pair = w3.functions(POOL_AB)
        pair.getReserves.return_value.call.return_value = (10, 20, 1234)
        pair.token0.return_value.call.return_value = to_checksum_address(token0)

        assert Web3Router(w3, ROUTER).get_reserves(TOKEN_A, TOKEN_B) == expected

    def test_get_reserves_without_pair(self, w3):
        w3.functions(FACTORY).getPair.return_value.call.return_value = NULL_ADDRESS
        assert Web3Router(w3, ROUTER).get_reserves(TOKEN_A, TOKEN_B) == (0, 0)

    def test_pricing(self, w3):
        functions = w3.functions(ROUTER)
        functions.getAmountOut.return_value.call.return_value = 90
        functions.getAmountIn.return_value.call.return_value = 112
        router = Web3Router(w3, ROUTER)

        assert router.get_amount_out(100, 1000, 1000) == 90
        assert router.get_amount_in(100, 1000, 1000) == 112
        functions.getAmountOut.assert_called_with(100, 1000, 1000)

    def test_exact_input_returns_gas_used(self, w3):
        bound_fn = w3.functions(ROUTER).swapExactTokensForTokens.return_value
        bound_fn.call.return_value = [100, 90]
        bound_fn.transact.return_value = b"\x01" * 32

        result = Web3Router(w3, ROUTER).swap_exact_tokens_for_tokens(
            100, 90, [TOKEN_A, TOKEN_B], ALICE, NOW, sender=CONNECTOR
        )

        assert result == ([100, 90], 120_000)
        tx = {"from": to_checksum_address(CONNECTOR)}
        bound_fn.call.assert_called_once_with(tx)
        bound_fn.transact.assert_called_once_with(tx)
        w3.functions(ROUTER).swapExactTokensForTokens.assert_called_once_with(
            100,
            90,
            [to_checksum_address(TOKEN_A), to_checksum_address(TOKEN_B)],
            to_checksum_address(ALICE),
            NOW,
        )

    def test_exact_output_returns_amounts(self, w3):
        w3.functions(ROUTER).swapTokensForExactETH.return_value.call.return_value = [112, 100]

        amounts = Web3Router(w3, ROUTER).swap_tokens_for_exact_eth(
            100, 200, [TOKEN_A, TOKEN_B], ALICE, NOW, sender=CONNECTOR
        )

        assert amounts == [112, 100]

    def test_reverted_transaction(self, w3):
        w3.functions(ROUTER).swapTokensForExactTokens.return_value.call.return_value = [1, 1]
        w3.eth.wait_for_transaction_receipt.return_value = {"status": 0, "gasUsed": 21_000}

        with pytest.raises(ExecutionError):
            Web3Router(w3, ROUTER).swap_tokens_for_exact_tokens(
                1, 1, [TOKEN_A, TOKEN_B], ALICE, NOW, sender=CONNECTOR
            )

    def test_simulation_revert_sends_nothing(self, w3):
        bound_fn = w3.functions(ROUTER).swapExactTokensForETH.return_value
        bound_fn.call.side_effect = ValueError("execution reverted: EXPIRED")

        with pytest.raises(ExecutionError, match="EXPIRED"):
            Web3Router(w3, ROUTER).swap_exact_tokens_for_eth(
                1, 0, [TOKEN_A, TOKEN_B], ALICE, NOW, sender=CONNECTOR
            )

        bound_fn.transact.assert_not_called()


class TestWeb3Token:
    def test_reads(self, w3):
        functions = w3.functions(TOKEN_A)
        functions.balanceOf.return_value.call.return_value = 7
        functions.allowance.return_value.call.return_value = 3
        token = Web3Token(w3, TOKEN_A)

        assert token.balance_of(ALICE) == 7
        assert token.allowance(ALICE, CONNECTOR) == 3

    def test_transfer_from_sent_by_spender(self, w3):
        bound_fn = w3.functions(TOKEN_A).transferFrom.return_value
        bound_fn.call.return_value = True

        assert Web3Token(w3, TOKEN_A).transfer_from(CONNECTOR, ALICE, BOB, 5)

        bound_fn.transact.assert_called_once_with({"from": to_checksum_address(CONNECTOR)})
        w3.functions(TOKEN_A).transferFrom.assert_called_once_with(
            to_checksum_address(ALICE), to_checksum_address(BOB), 5
        )

    def test_approve_failure(self, w3):
        w3.functions(TOKEN_A).approve.return_value.call.side_effect = RuntimeError("nonce")

        with pytest.raises(CollaboratorError) as exc_info:
            Web3Token(w3, TOKEN_A).approve(CONNECTOR, ROUTER, 1)

        assert exc_info.value.operation == "approve"


class TestWeb3Chain:
    def test_router_cached_by_address(self, w3):
        chain = Web3Chain(w3)

        router = chain.router(ROUTER)

        assert chain.router(to_checksum_address(ROUTER)) is router
        assert chain.registry(FACTORY) is chain.registry(FACTORY)
        assert chain.token(TOKEN_A).address == TOKEN_A

    def test_from_rpc(self):
        pytest.importorskip("web3")

        chain = Web3Chain.from_rpc("http://127.0.0.1:8545")

        assert chain.w3.provider.endpoint_uri == "http://127.0.0.1:8545"
