"""
token_ledger.types — plain value types shared across the ledger.

- address: account normalization and the reserved zero account
- events:  Transfer / Approval / Burned / OwnershipChange / Paused records
- result:  OpStatus and OpResult returned by the dispatcher
"""

from .address import ZERO_ADDRESS, is_zero, require_account, to_address, to_hex
from .events import (Approval, Burned, LedgerEvent, OwnershipChange, Paused,
                     Transfer, event_from_dict)
from .result import OpResult, OpStatus

__all__ = [
    "ZERO_ADDRESS",
    "is_zero",
    "require_account",
    "to_address",
    "to_hex",
    "Transfer",
    "Approval",
    "Burned",
    "OwnershipChange",
    "Paused",
    "LedgerEvent",
    "event_from_dict",
    "OpResult",
    "OpStatus",
]
