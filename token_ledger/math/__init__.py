# -*- coding: utf-8 -*-
"""
token_ledger.math
=================

Integer-only amount domain shared by the ledger. Python ints are unbounded, so
the 256-bit range is enforced explicitly rather than relying on wraparound.

- `MAX_AMOUNT` — 2**256 - 1
- `is_u256(n)` — True iff `n` is a (non-bool) int in [0, MAX_AMOUNT]
- `require_amount(n)` — raise `InvalidAmount` unless `is_u256(n)`

Checked arithmetic lives in `token_ledger.math.safe_uint`.
"""

from __future__ import annotations

from typing import Final

from ..errors import InvalidAmount

MAX_AMOUNT: Final[int] = (1 << 256) - 1


def is_u256(n: object) -> bool:
    """Return True iff 0 <= n <= MAX_AMOUNT (bools are rejected)."""
    return isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= MAX_AMOUNT


def require_amount(n: object, *, field: str = "amount") -> int:
    """
    Ensure `n` is an integer amount in [0, 2**256-1]; return it unchanged.
    """
    if not is_u256(n):
        raise InvalidAmount(field=field, value=repr(n))
    return n  # type: ignore[return-value]


__all__ = ["MAX_AMOUNT", "is_u256", "require_amount"]
