"""In-memory token ledger.

Tracks ERC20-style balances and allowances for any number of tokens, plus
native-asset balances credited when the router unwraps the native wrapper.
Failed operations raise LedgerError before mutating anything.
"""

from __future__ import annotations

from collections import defaultdict

from connector.models.types import normalize_address


class LedgerError(ValueError):
    """Transfer or allowance check failed (the in-memory equivalent of a revert)."""


class TokenLedger:
    """Balances and allowances keyed by token address."""

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        self._allowances: dict[tuple[str, str, str], int] = defaultdict(int)
        self.native_balances: dict[str, int] = defaultdict(int)

    def balance_of(self, token: str, owner: str) -> int:
        return self._balances[(normalize_address(token), normalize_address(owner))]

    def allowance(self, token: str, owner: str, spender: str) -> int:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        return self._allowances[key]

    def mint(self, token: str, owner: str, amount: int) -> None:
        self._balances[(normalize_address(token), normalize_address(owner))] += amount

    def burn(self, token: str, owner: str, amount: int) -> None:
        key = (normalize_address(token), normalize_address(owner))
        if self._balances[key] < amount:
            raise LedgerError(f"burn amount {amount} exceeds balance {self._balances[key]}")
        self._balances[key] -= amount

    def approve(self, token: str, owner: str, spender: str, amount: int) -> bool:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        self._allowances[key] = amount
        return True

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> bool:
        token, sender, recipient = (normalize_address(a) for a in (token, sender, recipient))
        if self._balances[(token, sender)] < amount:
            raise LedgerError(
                f"transfer amount {amount} exceeds balance {self._balances[(token, sender)]}"
            )
        self._balances[(token, sender)] -= amount
        self._balances[(token, recipient)] += amount
        return True

    def transfer_from(
        self, token: str, spender: str, owner: str, recipient: str, amount: int
    ) -> bool:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        if self._allowances[key] < amount:
            raise LedgerError(f"transfer amount {amount} exceeds allowance {self._allowances[key]}")
        self.transfer(token, owner, recipient, amount)
        self._allowances[key] -= amount
        return True

    def snapshot(self) -> tuple[dict, dict, dict]:
        """Copy of all non-zero balances, allowances and native balances."""
        return (
            {k: v for k, v in self._balances.items() if v},
            {k: v for k, v in self._allowances.items() if v},
            {k: v for k, v in self.native_balances.items() if v},
        )


class LedgerToken:
    """Token protocol view of one token on a TokenLedger."""

    def __init__(self, ledger: TokenLedger, address: str) -> None:
        self.ledger = ledger
        self.address = normalize_address(address, validate=True)

    def balance_of(self, owner: str) -> int:
        return self.ledger.balance_of(self.address, owner)

    def allowance(self, owner: str, spender: str) -> int:
        return self.ledger.allowance(self.address, owner, spender)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        return self.ledger.approve(self.address, owner, spender, amount)

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        return self.ledger.transfer(self.address, sender, recipient, amount)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        return self.ledger.transfer_from(self.address, spender, owner, recipient, amount)
