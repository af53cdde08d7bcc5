"""
token_ledger.state — state subsystem (ledger store, access control, journal, events).

Common symbols are lazily re-exported from their submodules on first access to
keep import-time overhead low and avoid circulars.

Submodules:
- ledger:   total supply, balances, allowances, token metadata
- access:   owner and pause flag
- journal:  first-write undo log with checkpoints
- events:   event sink backends (in-memory, JSONL, null)
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

# Map of public attributes → (submodule, symbol)
_exports: Dict[str, Tuple[str, str]] = {
    "LedgerStore": ("ledger", "LedgerStore"),
    "TokenMetadata": ("ledger", "TokenMetadata"),
    "SupplyDirection": ("ledger", "SupplyDirection"),
    "AccessController": ("access", "AccessController"),
    "Journal": ("journal", "Journal"),
    "EventRecord": ("events", "EventRecord"),
    "EventSink": ("events", "EventSink"),
    "InMemoryEventSink": ("events", "InMemoryEventSink"),
    "JsonlEventSink": ("events", "JsonlEventSink"),
    "NullEventSink": ("events", "NullEventSink"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loader to avoid import-time dependency tangles.
    """
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
