"""
token_ledger.state.journal — first-write undo log with nested checkpoints.

The journal attaches itself to the Ledger Store and the Access Controller as
their write hook. While a checkpoint is open, the *first* write to each slot
records the slot's previous value. `revert()` restores those values in reverse
first-touch order; `commit()` folds the checkpoint's log into its parent
(without overwriting the parent's older entries) or simply drops it at the
outermost level.

Key properties
--------------
- Pure Python, no I/O; O(touched slots) per checkpoint.
- LIFO discipline: only the top-most checkpoint may be committed or reverted.
- Writes made with no open checkpoint are not journaled.

Intended usage
--------------
    j = Journal(ledger, access)
    with j.transaction():
        ledger.debit(alice, 10)
        ledger.credit(bob, 10)      # any exception here undoes the debit

The engine opens exactly one transaction per operation, which is how a failed
multi-step operation (allowance debited, then balance insufficient) leaves no
observable trace.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from .access import SLOT_OWNER, SLOT_PAUSED, AccessController
from .ledger import SLOT_ALLOWANCE, SLOT_BALANCE, SLOT_SUPPLY, LedgerStore

log = logging.getLogger(__name__)

Slot = Tuple[Any, ...]


@dataclass
class _Checkpoint:
    id: int
    # first-write log: slot -> previous value
    prev: Dict[Slot, Any] = field(default_factory=dict)


class Journal:
    """
    Undo journal spanning one LedgerStore and one AccessController.
    """

    def __init__(self, ledger: LedgerStore, access: AccessController) -> None:
        self._ledger = ledger
        self._access = access
        self._stack: List[_Checkpoint] = []
        self._next_id = 1
        ledger.attach(self)
        access.attach(self)

    # --------------------------------------------------------------------- #
    # Write hook
    # --------------------------------------------------------------------- #

    def record(self, slot: Slot, previous: Any) -> None:
        if not self._stack:
            return
        top = self._stack[-1]
        if slot not in top.prev:
            top.prev[slot] = previous

    def _restore(self, slot: Slot, previous: Any) -> None:
        kind = slot[0]
        if kind in (SLOT_SUPPLY, SLOT_BALANCE, SLOT_ALLOWANCE):
            self._ledger.restore(slot, previous)
        elif kind in (SLOT_OWNER, SLOT_PAUSED):
            self._access.restore(slot, previous)
        else:
            raise ValueError(f"unknown journal slot: {slot!r}")

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of open checkpoints."""
        return len(self._stack)

    def checkpoint(self) -> int:
        cid = self._next_id
        self._next_id += 1
        self._stack.append(_Checkpoint(cid))
        return cid

    def _require_top(self, cid: int) -> _Checkpoint:
        if not self._stack:
            raise RuntimeError("journal has no open checkpoint")
        top = self._stack[-1]
        if top.id != cid:
            raise RuntimeError("commit/revert must target the top-most checkpoint (LIFO)")
        return top

    def commit(self, cid: int) -> None:
        top = self._require_top(cid)
        self._stack.pop()
        if self._stack:
            parent = self._stack[-1]
            for slot, prev in top.prev.items():
                parent.prev.setdefault(slot, prev)

    def revert(self, cid: int) -> int:
        """Undo the top-most checkpoint. Returns the number of restored slots."""
        top = self._require_top(cid)
        self._stack.pop()
        for slot, prev in reversed(list(top.prev.items())):
            self._restore(slot, prev)
        return len(top.prev)

    @contextmanager
    def transaction(self) -> Iterator[int]:
        """
        Open a checkpoint; commit on normal exit, revert and re-raise on error.
        """
        cid = self.checkpoint()
        try:
            yield cid
        except BaseException:
            n = self.revert(cid)
            log.debug("journal: reverted checkpoint %d (%d slots)", cid, n)
            raise
        else:
            self.commit(cid)

    # --------------------------------------------------------------------- #
    # Introspection
    # --------------------------------------------------------------------- #

    def pending_slots(self) -> int:
        """Total number of journaled slots across open checkpoints."""
        return sum(len(cp.prev) for cp in self._stack)


__all__ = ["Journal"]
