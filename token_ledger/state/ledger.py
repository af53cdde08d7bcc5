"""
token_ledger.state.ledger — the Ledger Store.

Holds `total_supply`, per-account balances, per-(owner, spender) allowances and
the immutable token metadata. Absent entries read as zero; entries are never
deleted, and a zero written back simply reads as zero again.

Read accessors are pure. The mutators are *internal*: only the Operation Engine
calls them, always inside a journal transaction that pairs each credit with a
debit or a supply adjustment. Individual mutators do not check cross-account
invariants.

Mutators
--------
- credit(account, amount)                → SupplyOverflow if the balance would exceed MAX_AMOUNT
- debit(account, amount)                 → InsufficientBalance if balance < amount
- set_allowance(owner, spender, amount)  → absolute set
- adjust_supply(delta, direction)        → checked ±; SupplyOverflow / InsufficientBalance

An optional `journal` hook receives the previous value of every slot before it
is overwritten (see `token_ledger.state.journal`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Protocol, Tuple

from ..errors import (InsufficientBalance, InvalidDecimals, InvalidMetadata,
                      SupplyOverflow)
from ..math import require_amount
from ..math.safe_uint import checked_add, checked_sub
from ..types.address import to_hex

MAX_DECIMALS = 255

# Slot tags used by the journal to address a single stored value.
SLOT_SUPPLY = "supply"
SLOT_BALANCE = "balance"
SLOT_ALLOWANCE = "allowance"


class SupplyDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class WriteHook(Protocol):
    def record(self, slot: Tuple[Any, ...], previous: Any) -> None: ...


# --------------------------------------------------------------------------- #
# Metadata
# --------------------------------------------------------------------------- #


def _is_printable_ascii(s: str) -> bool:
    return bool(s) and all(32 <= ord(c) <= 126 for c in s)


@dataclass(frozen=True)
class TokenMetadata:
    """
    Immutable display metadata.

    Invariants:
    - name/symbol are non-empty printable ASCII within the configured caps
    - 0 <= decimals < 256
    """
    name: str
    symbol: str
    decimals: int

    @classmethod
    def build(
        cls,
        name: Any,
        symbol: Any,
        decimals: Any,
        *,
        max_name_len: int = 64,
        max_symbol_len: int = 11,
        uppercase_symbol: bool = True,
    ) -> "TokenMetadata":
        if isinstance(decimals, bool) or not isinstance(decimals, int):
            raise InvalidDecimals(value=repr(decimals))
        if not (0 <= decimals <= MAX_DECIMALS):
            raise InvalidDecimals(value=decimals)

        name_s = name.decode("ascii", "replace") if isinstance(name, (bytes, bytearray)) else name
        sym_s = symbol.decode("ascii", "replace") if isinstance(symbol, (bytes, bytearray)) else symbol
        if not isinstance(name_s, str) or not _is_printable_ascii(name_s) or len(name_s) > max_name_len:
            raise InvalidMetadata("name must be 1..%d printable ASCII" % max_name_len, field="name")
        if not isinstance(sym_s, str) or not _is_printable_ascii(sym_s) or len(sym_s) > max_symbol_len:
            raise InvalidMetadata("symbol must be 1..%d printable ASCII" % max_symbol_len, field="symbol")
        if uppercase_symbol:
            sym_s = sym_s.upper()
        return cls(name=name_s, symbol=sym_s, decimals=decimals)


# --------------------------------------------------------------------------- #
# Ledger Store
# --------------------------------------------------------------------------- #


class LedgerStore:
    """
    Balance/allowance bookkeeping with zero-default lookups.

    Accounts are expected to be normalized bytes; normalization and zero-account
    rejection happen in the engine before any mutator is reached.
    """

    def __init__(self, metadata: TokenMetadata) -> None:
        self._metadata = metadata
        self._total_supply = 0
        self._balances: Dict[bytes, int] = {}
        self._allowances: Dict[Tuple[bytes, bytes], int] = {}
        self._hook: Optional[WriteHook] = None

    # ----------------------- journal wiring -------------------------------- #

    def attach(self, hook: Optional[WriteHook]) -> None:
        self._hook = hook

    def _record(self, slot: Tuple[Any, ...], previous: Any) -> None:
        if self._hook is not None:
            self._hook.record(slot, previous)

    def restore(self, slot: Tuple[Any, ...], previous: Any) -> None:
        """Write back a value captured by the journal (no hook, no checks)."""
        kind = slot[0]
        if kind == SLOT_SUPPLY:
            self._total_supply = previous
        elif kind == SLOT_BALANCE:
            self._balances[slot[1]] = previous
        elif kind == SLOT_ALLOWANCE:
            self._allowances[(slot[1], slot[2])] = previous
        else:
            raise ValueError(f"unknown ledger slot: {slot!r}")

    # ----------------------- read accessors -------------------------------- #

    @property
    def metadata(self) -> TokenMetadata:
        return self._metadata

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: bytes) -> int:
        return self._balances.get(account, 0)

    def allowance_of(self, owner: bytes, spender: bytes) -> int:
        return self._allowances.get((owner, spender), 0)

    def balances(self) -> Iterator[Tuple[bytes, int]]:
        """Iterate (account, balance) for non-zero balances in key order."""
        for acct in sorted(self._balances):
            bal = self._balances[acct]
            if bal:
                yield acct, bal

    def allowances(self) -> Iterator[Tuple[bytes, bytes, int]]:
        """Iterate (owner, spender, amount) for non-zero allowances in key order."""
        for (owner, spender) in sorted(self._allowances):
            amt = self._allowances[(owner, spender)]
            if amt:
                yield owner, spender, amt

    # ----------------------- mutators (engine only) ------------------------ #

    def credit(self, account: bytes, amount: int) -> int:
        cur = self.balance_of(account)
        new = checked_add(cur, amount, error=SupplyOverflow, account=account)
        self._record((SLOT_BALANCE, account), cur)
        self._balances[account] = new
        return new

    def debit(self, account: bytes, amount: int) -> int:
        cur = self.balance_of(account)
        new = checked_sub(
            cur, amount, error=InsufficientBalance,
            account=account, balance=cur, requested=amount,
        )
        self._record((SLOT_BALANCE, account), cur)
        self._balances[account] = new
        return new

    def set_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        require_amount(amount)
        self._record((SLOT_ALLOWANCE, owner, spender), self.allowance_of(owner, spender))
        self._allowances[(owner, spender)] = amount

    def adjust_supply(self, delta: int, direction: SupplyDirection) -> int:
        cur = self._total_supply
        if direction is SupplyDirection.INCREASE:
            new = checked_add(cur, delta, error=SupplyOverflow, supply=cur, delta=delta)
        else:
            new = checked_sub(cur, delta, error=InsufficientBalance, supply=cur, delta=delta)
        self._record((SLOT_SUPPLY,), cur)
        self._total_supply = new
        return new

    # ----------------------- (de)serialization ----------------------------- #

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self._metadata.name,
            "symbol": self._metadata.symbol,
            "decimals": self._metadata.decimals,
            "total_supply": self._total_supply,
            "balances": {to_hex(a): b for a, b in self.balances()},
            "allowances": [
                {"owner": to_hex(o), "spender": to_hex(s), "amount": amt}
                for o, s, amt in self.allowances()
            ],
        }


__all__ = [
    "MAX_DECIMALS",
    "SLOT_SUPPLY",
    "SLOT_BALANCE",
    "SLOT_ALLOWANCE",
    "SupplyDirection",
    "TokenMetadata",
    "LedgerStore",
]
