"""Well-known addresses and protocol parameters.

Defaults target Ethereum mainnet UniswapV2.
"""

from connector.models.types import is_valid_address


def _validate_address(name: str, address: str) -> str:
    """Validate a hard-coded address at import time to catch typos early."""
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# UniswapV2 Router02 (mainnet, lowercase)
UNISWAP_V2_ROUTER = _validate_address("router", "0x7a250d5630b4cf539739df2c5dacb4c659f2488d")

# Native-wrapper token (mainnet WETH)
WETH = _validate_address("WETH", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2")

# Constant-product fee: 30 bps, expressed as a multiplier over 10000
DEFAULT_FEE_BPS = 30
FEE_DENOMINATOR = 10_000

DEFAULT_CONNECTOR_NAME = "uniswap-v2"
