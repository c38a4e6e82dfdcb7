"""ABI encoding of router execution calls.

All four UniswapV2 Router02 swap entry points share the argument layout
(uint256, uint256, address[], address, uint256); only the selector differs.
"""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]

from connector.dispatch import EntryPoint
from connector.models.types import is_valid_address

SWAP_ARG_TYPES = ["uint256", "uint256", "address[]", "address", "uint256"]

# Function selectors (UniswapV2 Router02)
SELECTORS: dict[EntryPoint, str] = {
    EntryPoint.EXACT_TOKENS_FOR_TOKENS: "0x38ed1739",  # swapExactTokensForTokens
    EntryPoint.TOKENS_FOR_EXACT_TOKENS: "0x8803dbee",  # swapTokensForExactTokens
    EntryPoint.EXACT_TOKENS_FOR_ETH: "0x18cbafe5",  # swapExactTokensForETH
    EntryPoint.TOKENS_FOR_EXACT_ETH: "0x4a25d94a",  # swapTokensForExactETH
}


def encode_router_call(
    entry_point: EntryPoint,
    amount: int,
    bound: int,
    path: list[str],
    recipient: str,
    deadline: int,
) -> str:
    """Encode a router swap call as 0x-prefixed calldata.

    Args:
        entry_point: Which of the four swap functions is called
        amount: Exact input (fixed-input) or exact output (fixed-output)
        bound: Minimum output (fixed-input) or maximum input (fixed-output)
        path: Token path
        recipient: Address receiving the output
        deadline: Unix timestamp passed through to the router

    Returns:
        Selector followed by the ABI-encoded arguments

    Raises:
        ValueError: If any address is invalid
    """
    for i, addr in enumerate(path):
        if not is_valid_address(addr):
            raise ValueError(f"Invalid address in path[{i}]: {addr}")
    if not is_valid_address(recipient):
        raise ValueError(f"Invalid recipient address: {recipient}")

    path_bytes = [bytes.fromhex(addr[2:]) for addr in path]
    recipient_bytes = bytes.fromhex(recipient[2:])
    encoded_args = encode(
        SWAP_ARG_TYPES, [amount, bound, path_bytes, recipient_bytes, deadline]
    )
    return SELECTORS[entry_point] + encoded_args.hex()


def selector_of(calldata: str) -> str:
    """First four bytes of calldata as 0x-prefixed hex."""
    return calldata[:10]


def entry_point_of(calldata: str) -> EntryPoint:
    """Reverse-map calldata to the entry point it calls.

    Raises:
        KeyError: unknown selector
    """
    selector = selector_of(calldata)
    for entry_point, known in SELECTORS.items():
        if known == selector:
            return entry_point
    raise KeyError(f"Unknown router selector: {selector}")
