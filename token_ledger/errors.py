"""
token_ledger.errors — typed rejections raised by the token ledger.

The engine communicates every business-rule failure via a *typed exception*.
Higher layers (dispatcher, CLI) convert them into structured result payloads.
None of these are transient faults: a rejected call leaves state untouched and
the host decides whether to retry with different inputs.

Hierarchy
---------
LedgerError (base)
 ├─ InvalidAccount         : zero/empty/malformed account where a real one is required
 ├─ InvalidAmount          : amount is not an integer in [0, MAX_AMOUNT]
 ├─ InsufficientBalance    : debit exceeds the holder's balance
 ├─ InsufficientAllowance  : spend exceeds the approved allowance
 ├─ SupplyOverflow         : checked add on supply/balance would exceed MAX_AMOUNT
 ├─ AllowanceOverflow      : checked add on an allowance would exceed MAX_AMOUNT
 ├─ AllowanceUnderflow     : checked subtract on an allowance would go below zero
 ├─ NotOwner               : caller lacks owner privilege
 ├─ ContractPaused         : operation requires the ledger to be unpaused
 ├─ ContractNotPaused      : operation requires the ledger to be paused
 ├─ InvalidDecimals        : construction-time decimals out of range
 ├─ InvalidMetadata        : name/symbol fail display-identifier rules
 ├─ InvariantViolation     : post-hoc invariant audit failed (never raised by ops)
 └─ DispatchError          : unknown operation or malformed payload

These classes import nothing from the rest of the package so they can be used
from the lowest layers (math, state) without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional


@dataclass(eq=False)
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'NOT_OWNER').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "ledger error"
    code: str = "LEDGER_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for results/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class _Rejection(LedgerError):
    """
    Shared constructor for the concrete kinds below. Extra keyword fields are
    folded into `data` (bytes become 0x-hex so payloads stay JSON-safe).
    """

    default_message: ClassVar[str] = "rejected"
    default_code: ClassVar[str] = "REJECTED"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        data: Optional[Dict[str, Any]] = None,
        **fields: Any,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        for k, v in fields.items():
            if v is None:
                continue
            d.setdefault(k, "0x" + bytes(v).hex() if isinstance(v, (bytes, bytearray)) else v)
        super().__init__(
            message=message or self.default_message,
            code=self.default_code,
            data=d or None,
        )


class InvalidAccount(_Rejection):
    default_message = "invalid account"
    default_code = "INVALID_ACCOUNT"


class InvalidAmount(_Rejection):
    default_message = "invalid amount"
    default_code = "INVALID_AMOUNT"


class InsufficientBalance(_Rejection):
    default_message = "insufficient balance"
    default_code = "INSUFFICIENT_BALANCE"


class InsufficientAllowance(_Rejection):
    default_message = "insufficient allowance"
    default_code = "INSUFFICIENT_ALLOWANCE"


class SupplyOverflow(_Rejection):
    default_message = "supply overflow"
    default_code = "SUPPLY_OVERFLOW"


class AllowanceOverflow(_Rejection):
    default_message = "allowance overflow"
    default_code = "ALLOWANCE_OVERFLOW"


class AllowanceUnderflow(_Rejection):
    default_message = "allowance underflow"
    default_code = "ALLOWANCE_UNDERFLOW"


class NotOwner(_Rejection):
    default_message = "caller is not the owner"
    default_code = "NOT_OWNER"


class ContractPaused(_Rejection):
    default_message = "ledger is paused"
    default_code = "CONTRACT_PAUSED"


class ContractNotPaused(_Rejection):
    default_message = "ledger is not paused"
    default_code = "CONTRACT_NOT_PAUSED"


class InvalidDecimals(_Rejection):
    default_message = "decimals out of range"
    default_code = "INVALID_DECIMALS"


class InvalidMetadata(_Rejection):
    default_message = "invalid token metadata"
    default_code = "INVALID_METADATA"


class InvariantViolation(_Rejection):
    default_message = "ledger invariant violated"
    default_code = "INVARIANT_VIOLATION"


class DispatchError(_Rejection):
    default_message = "cannot dispatch operation"
    default_code = "DISPATCH_ERROR"


# -------- helper utilities ---------------------------------------------------


def error_to_result_fields(err: LedgerError) -> Dict[str, Any]:
    """
    Map a LedgerError to canonical result fields.

    Returns:
        {"status": "rejected", "error": {code, message, data?}}
    """
    return {"status": "rejected", "error": err.to_dict()}


__all__ = [
    "LedgerError",
    "InvalidAccount",
    "InvalidAmount",
    "InsufficientBalance",
    "InsufficientAllowance",
    "SupplyOverflow",
    "AllowanceOverflow",
    "AllowanceUnderflow",
    "NotOwner",
    "ContractPaused",
    "ContractNotPaused",
    "InvalidDecimals",
    "InvalidMetadata",
    "InvariantViolation",
    "DispatchError",
    "error_to_result_fields",
]
