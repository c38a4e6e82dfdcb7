"""Shared type definitions for connector models.

Addresses are handled as lowercase 0x-prefixed hex strings everywhere inside
the connector. Amounts are plain Python ints bounded to uint256.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

# Sentinel returned by pool registries when no pool exists for a pair
NULL_ADDRESS = "0x" + "00" * 20


def is_valid_address(address: Any) -> bool:
    """Check if a value is a well-formed Ethereum address string.

    Args:
        address: Value to validate

    Returns:
        True if 0x-prefixed with exactly 40 hex characters
    """
    if not isinstance(address, str):
        return False
    if not address.startswith("0x") or len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase with 0x prefix.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for malformed addresses

    Returns:
        Lowercase address with 0x prefix
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_null_address(address: str | None) -> bool:
    """True for None or the all-zero address."""
    if address is None:
        return True
    return normalize_address(address) == NULL_ADDRESS


def short(address: str) -> str:
    """Last 8 characters of an address, for log context."""
    return address[-8:]


def _validate_address(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Address must be a string, got {type(value).__name__}")
    return normalize_address(value, validate=True)


def _validate_uint256(value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a bool")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be int or decimal string, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# Ethereum address, normalized to lowercase
Address = Annotated[str, BeforeValidator(_validate_address)]

# 256-bit unsigned integer (accepts int or decimal string)
Uint256 = Annotated[
    int,
    BeforeValidator(_validate_uint256),
    Field(description="256-bit unsigned integer"),
]
