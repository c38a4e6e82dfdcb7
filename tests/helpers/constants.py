"""Shared address constants for tests.

All addresses are lowercase for consistency with normalize_address().
"""

# =============================================================================
# Tokens
# =============================================================================

TOKEN_A = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa1"
TOKEN_B = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb2"
TOKEN_C = "0xccccccccccccccccccccccccccccccccccccccc3"
TOKEN_D = "0xddddddddddddddddddddddddddddddddddddddd4"
WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"  # Native wrapper

# =============================================================================
# Contracts
# =============================================================================

ROUTER = "0x1000000000000000000000000000000000000001"
FACTORY = "0x1000000000000000000000000000000000000002"
ROUTER_2 = "0x2000000000000000000000000000000000000001"
FACTORY_2 = "0x2000000000000000000000000000000000000002"

POOL_AB = "0x3000000000000000000000000000000000000001"
POOL_BC = "0x3000000000000000000000000000000000000002"
POOL_AC = "0x3000000000000000000000000000000000000003"
POOL_AW = "0x3000000000000000000000000000000000000004"

# =============================================================================
# Accounts
# =============================================================================

ADMIN = "0x4000000000000000000000000000000000000001"
CONNECTOR = "0x4000000000000000000000000000000000000002"
ALICE = "0x5000000000000000000000000000000000000001"
BOB = "0x5000000000000000000000000000000000000002"

# TOKEN_A minted to ALICE by the `funded` fixture
ALICE_BALANCE = 10_000
