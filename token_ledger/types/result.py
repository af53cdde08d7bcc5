"""
token_ledger.types.result — OpStatus and OpResult containers.

`OpResult` is what the dispatcher hands back to a host for each applied
operation: the operation name, its status, the events it emitted (exactly one on
success, none on rejection) and the error payload on rejection.

String forms:
  - str(OpStatus.SUCCESS) -> "success"
  - OpStatus.SUCCESS.code -> "SUCCESS"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from .events import LedgerEvent


class OpStatus(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"

    @property
    def code(self) -> str:
        """Uppercase code form, e.g., 'SUCCESS' / 'REJECTED'."""
        return self.value.upper()

    @property
    def is_success(self) -> bool:
        return self is OpStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value

    @classmethod
    def from_str(cls, s: str, *, default: Optional["OpStatus"] = None) -> "OpStatus":
        """
        Parse a status leniently.

        Accepted values:
          - success : "success", "ok", "s", "passed"
          - rejected: "rejected", "reject", "revert", "failed", "fail"
        """
        if not s:
            if default is not None:
                return default
            raise ValueError("empty status")
        norm = s.strip().lower()
        if norm in {"success", "ok", "s", "passed"}:
            return cls.SUCCESS
        if norm in {"rejected", "reject", "revert", "failed", "fail"}:
            return cls.REJECTED
        if default is not None:
            return default
        raise ValueError(f"unknown OpStatus: {s!r}")


@dataclass(frozen=True)
class OpResult:
    """
    Result of applying one ledger operation.
    """

    op: str
    status: OpStatus
    events: Tuple[LedgerEvent, ...] = ()
    error: Optional[Dict[str, Any]] = None

    def __init__(
        self,
        op: str,
        status: OpStatus,
        events: Sequence[LedgerEvent] | Iterable[LedgerEvent] = (),
        error: Optional[Dict[str, Any]] = None,
    ):
        events_t = events if isinstance(events, tuple) else tuple(events)
        if status is OpStatus.REJECTED and events_t:
            raise ValueError("a rejected operation carries no events")
        object.__setattr__(self, "op", op)
        object.__setattr__(self, "status", status)
        object.__setattr__(self, "events", events_t)
        object.__setattr__(self, "error", error)

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @property
    def event(self) -> Optional[LedgerEvent]:
        """The single event of a successful operation (None when rejected)."""
        return self.events[0] if self.events else None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "op": self.op,
            "status": str(self.status),
            "events": [e.to_dict() for e in self.events],
        }
        if self.error is not None:
            out["error"] = self.error
        return out

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        err = self.error.get("code") if self.error else None
        return f"OpResult(op={self.op}, status={self.status.code}, events={len(self.events)}, error={err})"


__all__ = ["OpStatus", "OpResult"]
