"""
token_ledger.runtime.guards — composable pre-mutation checks.

Each factory returns a zero-argument `Guard` that raises a typed LedgerError
when its condition fails. The engine builds the guards an operation needs and
runs them with `enforce(...)` before touching the Ledger Store:

    enforce(
        valid_amount(amount),
        when_unpaused(access),
    )

Guards run in the order given and stop at the first failure, so the order of
arguments is the order in which rejections are reported.
"""

from __future__ import annotations

from typing import Callable

from ..math import require_amount
from ..state.access import AccessController

Guard = Callable[[], None]


def valid_amount(value: object, *, field: str = "amount") -> Guard:
    """Amount is an integer in [0, MAX_AMOUNT] (else InvalidAmount)."""
    def _check() -> None:
        require_amount(value, field=field)
    return _check


def only_owner(access: AccessController, caller: bytes) -> Guard:
    """Caller is the current owner (else NotOwner)."""
    def _check() -> None:
        access.require_owner(caller)
    return _check


def when_unpaused(access: AccessController) -> Guard:
    """Ledger is not paused (else ContractPaused)."""
    return access.require_unpaused


def enforce(*guards: Guard) -> None:
    for guard in guards:
        guard()


__all__ = [
    "Guard",
    "valid_amount",
    "only_owner",
    "when_unpaused",
    "enforce",
]
