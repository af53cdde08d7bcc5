"""
token_ledger.state.events — pluggable event sinks.

The engine returns each operation's event on its result, and additionally hands
it to an `EventSink` chosen by the host. Three backends ship here:

- InMemoryEventSink: fast, test/dev friendly; keeps all records in RAM.
- JsonlEventSink: JSONL file holding one ledger's history; truncated on open.
- NullEventSink: no-op sink for benchmarks or hosts that ignore events.

Ordering: `seq` strictly increases in commit order and is assigned by the
engine. Failed operations never reach a sink.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, runtime_checkable

from ..types.events import LedgerEvent, event_from_dict

# =============================================================================
# Public data model
# =============================================================================


@dataclass(frozen=True)
class EventRecord:
    """
    A committed event with its position in the ledger's history.

    Fields
    ------
    seq : int
        1-based commit sequence number (construction events included).
    op : str
        Name of the operation that produced the event ("transfer", "mint", ...).
    event : LedgerEvent
        The event payload.
    """

    seq: int
    op: str
    event: LedgerEvent

    @property
    def name(self) -> str:
        return self.event.name

    def to_dict(self) -> dict:
        return {"seq": self.seq, "op": self.op, **self.event.to_dict()}


@runtime_checkable
class EventSink(Protocol):
    """Append and query committed events."""

    def append(self, event: LedgerEvent, *, seq: int, op: str) -> EventRecord:
        """Append a single committed event. Returns the stored record."""

    def get_events(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[bytes] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        """Iterate matching records in ascending `seq` order."""

    def flush(self) -> None:
        """Force persistence, if applicable."""

    def close(self) -> None:
        """Release resources (files, buffers)."""


# =============================================================================
# Common filter logic
# =============================================================================


def _record_matches(
    rec: EventRecord,
    name: Optional[str],
    account: Optional[bytes],
    since: Optional[int],
) -> bool:
    if since is not None and rec.seq < since:
        return False
    if name is not None and rec.name != name:
        return False
    if account is not None and account not in rec.event.accounts:
        return False
    return True


# =============================================================================
# In-memory sink
# =============================================================================


class InMemoryEventSink:
    """
    A simple, thread-safe in-memory sink.

    Suitable for unit tests and single-process hosts. Keeps everything in RAM.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: List[EventRecord] = []

    def append(self, event: LedgerEvent, *, seq: int, op: str) -> EventRecord:
        rec = EventRecord(seq=seq, op=op, event=event)
        with self._lock:
            self._records.append(rec)
        return rec

    def get_events(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[bytes] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        with self._lock:
            snapshot = list(self._records)
        n = 0
        for rec in snapshot:
            if limit is not None and n >= limit:
                break
            if _record_matches(rec, name, account, since):
                yield rec
                n += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def flush(self) -> None:
        return

    def close(self) -> None:
        with self._lock:
            self._records.clear()


# =============================================================================
# JSONL sink (durable)
# =============================================================================


class JsonlEventSink:
    """
    Append-only JSONL sink. Each line is one EventRecord:

        {"seq": 3, "op": "transfer", "event": "Transfer",
         "from": "0x…", "to": "0x…", "amount": 300}

    Opening the sink truncates `path`: one file holds the history of one ledger,
    so `seq` never repeats within it. `flush()` fsyncs the file descriptor. One
    instance should own the file; it serializes appends from multiple threads.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self._path = os.fspath(path)
        os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
        self._fh = open(self._path, "a+", encoding="utf-8", buffering=1)  # line-buffered
        self._fh.truncate(0)
        self._lock = threading.RLock()
        self._log = logging.getLogger(__name__)

    @property
    def path(self) -> str:
        return self._path

    @staticmethod
    def _encode(rec: EventRecord) -> str:
        return json.dumps(rec.to_dict(), separators=(",", ":"))

    @staticmethod
    def _decode(line: str) -> EventRecord:
        obj = json.loads(line)
        return EventRecord(seq=int(obj["seq"]), op=str(obj["op"]), event=event_from_dict(obj))

    def append(self, event: LedgerEvent, *, seq: int, op: str) -> EventRecord:
        rec = EventRecord(seq=seq, op=op, event=event)
        line = self._encode(rec)
        with self._lock:
            self._fh.write(line + "\n")
        return rec

    def get_events(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[bytes] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        # Sequential scan; hosts needing high query rates should index externally.
        with self._lock:
            self._fh.flush()
            self._fh.seek(0)
            lines = self._fh.readlines()
        count = 0
        for line in lines:
            if not line.strip():
                continue
            try:
                rec = self._decode(line)
            except (ValueError, KeyError) as e:
                self._log.warning("Skipping malformed event line: %s (%r)", line[:120], e)
                continue
            if _record_matches(rec, name, account, since):
                yield rec
                count += 1
                if limit is not None and count >= limit:
                    break

    def flush(self) -> None:
        with self._lock:
            self._fh.flush()
            os.fsync(self._fh.fileno())

    def close(self) -> None:
        with self._lock:
            if not self._fh.closed:
                self._fh.flush()
                self._fh.close()


# =============================================================================
# Null sink
# =============================================================================


class NullEventSink:
    """A sink that drops everything."""

    def append(self, event: LedgerEvent, *, seq: int, op: str) -> EventRecord:
        return EventRecord(seq=seq, op=op, event=event)

    def get_events(
        self,
        *,
        name: Optional[str] = None,
        account: Optional[bytes] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        return iter(())

    def flush(self) -> None:
        return

    def close(self) -> None:
        return


__all__ = [
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "NullEventSink",
]
