# -*- coding: utf-8 -*-
"""
token_ledger.math.safe_uint
===========================

Checked unsigned-integer helpers for ledger arithmetic.

Two styles are provided:
  1) **try_***: never raise on range; return the value or ``None``.
  2) **checked_***: raise the error kind chosen by the call site on
     overflow/underflow, so the ledger can report ``SupplyOverflow`` vs.
     ``AllowanceOverflow`` from the same primitive.

All operations are integer-only and validate argument domains
(0..MAX_AMOUNT) before computing.
"""

from __future__ import annotations

from typing import Any, Optional, Type

from ..errors import LedgerError
from . import MAX_AMOUNT, is_u256, require_amount


# ---------------------------------------------------------------------------
# try_* (no raise; return Optional[int])
# ---------------------------------------------------------------------------

def try_add_u256(x: int, y: int) -> Optional[int]:
    """Return x+y or None on overflow/OOB."""
    if not (is_u256(x) and is_u256(y)):
        return None
    s = x + y
    return s if s <= MAX_AMOUNT else None


def try_sub_u256(x: int, y: int) -> Optional[int]:
    """Return x-y or None on underflow/OOB."""
    if not (is_u256(x) and is_u256(y)):
        return None
    return x - y if x >= y else None


# ---------------------------------------------------------------------------
# Checked (fail-fast with the caller's error kind)
# ---------------------------------------------------------------------------

def checked_add(x: int, y: int, *, error: Type[LedgerError], **context: Any) -> int:
    """Checked add: raise `error(**context)` if x+y exceeds MAX_AMOUNT."""
    require_amount(x, field="lhs")
    require_amount(y, field="rhs")
    s = try_add_u256(x, y)
    if s is None:
        raise error(**context)
    return s


def checked_sub(x: int, y: int, *, error: Type[LedgerError], **context: Any) -> int:
    """Checked sub: raise `error(**context)` if y > x."""
    require_amount(x, field="lhs")
    require_amount(y, field="rhs")
    d = try_sub_u256(x, y)
    if d is None:
        raise error(**context)
    return d


__all__ = [
    "MAX_AMOUNT",
    "try_add_u256",
    "try_sub_u256",
    "checked_add",
    "checked_sub",
]
