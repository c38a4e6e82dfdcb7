"""JSON-RPC bindings for the router, pool registry and tokens.

These make real eth_call / eth_sendTransaction requests through a web3
instance. Every RPC failure is raised as CollaboratorError so the core can
tell infrastructure failures from infeasible swaps.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from eth_utils import to_checksum_address

from connector.errors import CollaboratorError, ExecutionError
from connector.models.types import NULL_ADDRESS, normalize_address

logger = structlog.get_logger()

T = TypeVar("T")


def _fn(
    name: str,
    inputs: list[tuple[str, str]],
    outputs: list[tuple[str, str]],
    mutability: str,
) -> dict:
    return {
        "name": name,
        "type": "function",
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


_SWAP_INPUTS = [
    ("amount", "uint256"),
    ("bound", "uint256"),
    ("path", "address[]"),
    ("to", "address"),
    ("deadline", "uint256"),
]
_AMOUNTS = [("amounts", "uint256[]")]

ROUTER_ABI = [
    _fn("factory", [], [("", "address")], "pure"),
    _fn(
        "getAmountIn",
        [("amountOut", "uint256"), ("reserveIn", "uint256"), ("reserveOut", "uint256")],
        [("amountIn", "uint256")],
        "pure",
    ),
    _fn(
        "getAmountOut",
        [("amountIn", "uint256"), ("reserveIn", "uint256"), ("reserveOut", "uint256")],
        [("amountOut", "uint256")],
        "pure",
    ),
    _fn("swapExactTokensForTokens", _SWAP_INPUTS, _AMOUNTS, "nonpayable"),
    _fn("swapTokensForExactTokens", _SWAP_INPUTS, _AMOUNTS, "nonpayable"),
    _fn("swapExactTokensForETH", _SWAP_INPUTS, _AMOUNTS, "nonpayable"),
    _fn("swapTokensForExactETH", _SWAP_INPUTS, _AMOUNTS, "nonpayable"),
]

FACTORY_ABI = [
    _fn("getPair", [("tokenA", "address"), ("tokenB", "address")], [("pair", "address")], "view"),
]

PAIR_ABI = [
    _fn(
        "getReserves",
        [],
        [("reserve0", "uint112"), ("reserve1", "uint112"), ("blockTimestampLast", "uint32")],
        "view",
    ),
    _fn("token0", [], [("", "address")], "view"),
]

ERC20_ABI = [
    _fn("balanceOf", [("owner", "address")], [("", "uint256")], "view"),
    _fn("allowance", [("owner", "address"), ("spender", "address")], [("", "uint256")], "view"),
    _fn("approve", [("spender", "address"), ("amount", "uint256")], [("", "bool")], "nonpayable"),
    _fn("transfer", [("to", "address"), ("amount", "uint256")], [("", "bool")], "nonpayable"),
    _fn(
        "transferFrom",
        [("from", "address"), ("to", "address"), ("amount", "uint256")],
        [("", "bool")],
        "nonpayable",
    ),
]


def _rpc(
    collaborator: str,
    operation: str,
    fn: Callable[[], T],
    error_cls: type[CollaboratorError] = CollaboratorError,
) -> T:
    try:
        return fn()
    except Exception as e:
        logger.warning(
            "rpc_call_failed", collaborator=collaborator, operation=operation, error=str(e)
        )
        raise error_cls(collaborator, operation, str(e)) from e


def _checksum_path(path: list[str]) -> list[str]:
    return [to_checksum_address(addr) for addr in path]


class _Web3Contract:
    """Shared plumbing: contract handle plus call/transact helpers."""

    collaborator = "contract"

    def __init__(self, w3: Any, address: str, abi: list[dict]) -> None:
        self.w3 = w3
        self.address = normalize_address(address, validate=True)
        self.contract = w3.eth.contract(address=to_checksum_address(self.address), abi=abi)

    def _call(self, operation: str, function: str, *args: Any) -> Any:
        return _rpc(
            self.collaborator,
            operation,
            lambda: getattr(self.contract.functions, function)(*args).call(),
        )

    def _transact(
        self,
        operation: str,
        function: str,
        sender: str,
        *args: Any,
        error_cls: type[CollaboratorError] = CollaboratorError,
    ) -> tuple[Any, Any]:
        """Simulate with eth_call for the return value, then send and wait for the receipt."""

        def run() -> tuple[Any, Any]:
            bound_fn = getattr(self.contract.functions, function)(*args)
            tx = {"from": to_checksum_address(sender)}
            result = bound_fn.call(tx)
            tx_hash = bound_fn.transact(tx)
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
            if receipt["status"] != 1:
                raise RuntimeError(f"transaction {tx_hash!r} reverted")
            return result, receipt

        return _rpc(self.collaborator, operation, run, error_cls=error_cls)


class Web3PoolRegistry(_Web3Contract):
    """UniswapV2 factory as a PoolRegistry."""

    collaborator = "registry"

    def __init__(self, w3: Any, address: str) -> None:
        super().__init__(w3, address, FACTORY_ABI)

    def get_liquidity_pool(self, token_a: str, token_b: str) -> str:
        pair = self._call(
            "get_liquidity_pool",
            "getPair",
            to_checksum_address(token_a),
            to_checksum_address(token_b),
        )
        return normalize_address(pair) if isinstance(pair, str) else pair


class Web3Router(_Web3Contract):
    """UniswapV2 Router02 as a Router.

    get_reserves is served from the pair contract found through the router's
    factory, oriented to the order the tokens were asked in.
    """

    collaborator = "router"

    def __init__(self, w3: Any, address: str) -> None:
        super().__init__(w3, address, ROUTER_ABI)

    def pool_factory(self) -> str:
        return normalize_address(self._call("pool_factory", "factory"))

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        registry = Web3PoolRegistry(self.w3, self.pool_factory())
        pair_address = registry.get_liquidity_pool(token_a, token_b)
        if pair_address == NULL_ADDRESS:
            return 0, 0

        pair = self.w3.eth.contract(address=to_checksum_address(pair_address), abi=PAIR_ABI)
        reserve0, reserve1, _ = _rpc(
            "router", "get_reserves", lambda: pair.functions.getReserves().call()
        )
        token0 = _rpc("router", "get_reserves", lambda: pair.functions.token0().call())
        if normalize_address(token0) == normalize_address(token_a):
            return int(reserve0), int(reserve1)
        return int(reserve1), int(reserve0)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return int(self._call("get_amount_in", "getAmountIn", amount_out, reserve_in, reserve_out))

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return int(self._call("get_amount_out", "getAmountOut", amount_in, reserve_in, reserve_out))

    def _swap(
        self,
        operation: str,
        function: str,
        amount: int,
        bound: int,
        path: list[str],
        recipient: str,
        deadline: int,
        sender: str,
    ) -> tuple[list[int], Any]:
        amounts, receipt = self._transact(
            operation,
            function,
            sender,
            amount,
            bound,
            _checksum_path(path),
            to_checksum_address(recipient),
            deadline,
            error_cls=ExecutionError,
        )
        logger.info("router_tx_mined", operation=operation, gas_used=receipt["gasUsed"])
        return [int(a) for a in amounts], receipt

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
        amounts, _ = self._swap(
            "swap_tokens_for_exact_tokens",
            "swapTokensForExactTokens",
            amount_out,
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
        amounts, _ = self._swap(
            "swap_tokens_for_exact_eth",
            "swapTokensForExactETH",
            amount_out,
            amount_in_max,
            path,
            recipient,
            deadline,
            sender,
        )
        return amounts

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
        amounts, receipt = self._swap(
            "swap_exact_tokens_for_tokens",
            "swapExactTokensForTokens",
            amount_in,
            amount_out_min,
            path,
            recipient,
            deadline,
            sender,
        )
        return amounts, int(receipt["gasUsed"])

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
        amounts, receipt = self._swap(
            "swap_exact_tokens_for_eth",
            "swapExactTokensForETH",
            amount_in,
            amount_out_min,
            path,
            recipient,
            deadline,
            sender,
        )
        return amounts, int(receipt["gasUsed"])


class Web3Token(_Web3Contract):
    """ERC20 token as a Token. Mutating calls are sent from the given account."""

    collaborator = "token"

    def __init__(self, w3: Any, address: str) -> None:
        super().__init__(w3, address, ERC20_ABI)

    def balance_of(self, owner: str) -> int:
        return int(self._call("balance_of", "balanceOf", to_checksum_address(owner)))

    def allowance(self, owner: str, spender: str) -> int:
        return int(
            self._call(
                "allowance", "allowance", to_checksum_address(owner), to_checksum_address(spender)
            )
        )

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        ok, _ = self._transact("approve", "approve", owner, to_checksum_address(spender), amount)
        return bool(ok)

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        ok, _ = self._transact(
            "transfer", "transfer", sender, to_checksum_address(recipient), amount
        )
        return bool(ok)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        ok, _ = self._transact(
            "transfer_from",
            "transferFrom",
            spender,
            to_checksum_address(owner),
            to_checksum_address(recipient),
            amount,
        )
        return bool(ok)


class Web3Chain:
    """CollaboratorResolver over a web3 instance."""

    def __init__(self, w3: Any) -> None:
        self.w3 = w3
        self._routers: dict[str, Web3Router] = {}
        self._registries: dict[str, Web3PoolRegistry] = {}

    @classmethod
    def from_rpc(cls, rpc_url: str) -> Web3Chain:
        """Connect to an HTTP JSON-RPC endpoint.

        Raises:
            ImportError: web3 is not installed (pip install amm-connector[chain])
        """
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3Chain. "
                "Install with: pip install 'amm-connector[chain]'"
            ) from e

        return cls(Web3(Web3.HTTPProvider(rpc_url)))

    def router(self, address: str) -> Web3Router:
        key = normalize_address(address)
        if key not in self._routers:
            self._routers[key] = Web3Router(self.w3, key)
        return self._routers[key]

    def registry(self, address: str) -> Web3PoolRegistry:
        key = normalize_address(address)
        if key not in self._registries:
            self._registries[key] = Web3PoolRegistry(self.w3, key)
        return self._registries[key]

    def token(self, address: str) -> Web3Token:
        return Web3Token(self.w3, address)


__all__ = [
    "Web3Chain",
    "Web3Router",
    "Web3PoolRegistry",
    "Web3Token",
    "ROUTER_ABI",
    "FACTORY_ABI",
    "PAIR_ABI",
    "ERC20_ABI",
]
