"""
token_ledger — fungible-token ledger with owner-gated minting and a global pause switch.

This package exposes only lightweight metadata and a lazy re-export table at import
time. Heavy modules (engine, sinks, metrics) are imported on first attribute access
to avoid import-time side effects and cycles.

Typical usage:

    from token_ledger import TokenEngine

    token = TokenEngine.create(
        name="Example", symbol="EXM", decimals=18,
        initial_supply=1_000, recipient=alice, owner=admin,
    )
    token.transfer(alice, bob, 300)
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

try:
    from .version import __version__, git_describe  # type: ignore
except Exception:  # pragma: no cover - fallback for fresh checkouts
    __version__ = "0.0.0+local"

    def git_describe() -> str:
        """Return a best-effort version string when VCS metadata isn't available."""
        return __version__


# Map of public attributes → (submodule, symbol)
_exports: Dict[str, Tuple[str, str]] = {
    "TokenEngine": ("runtime.engine", "TokenEngine"),
    "apply": ("runtime.dispatcher", "apply"),
    "LedgerStore": ("state.ledger", "LedgerStore"),
    "TokenMetadata": ("state.ledger", "TokenMetadata"),
    "AccessController": ("state.access", "AccessController"),
    "InMemoryEventSink": ("state.events", "InMemoryEventSink"),
    "JsonlEventSink": ("state.events", "JsonlEventSink"),
    "NullEventSink": ("state.events", "NullEventSink"),
    "OpResult": ("types.result", "OpResult"),
    "OpStatus": ("types.result", "OpStatus"),
    "ZERO_ADDRESS": ("types.address", "ZERO_ADDRESS"),
    "MAX_AMOUNT": ("math.safe_uint", "MAX_AMOUNT"),
    "LedgerError": ("errors", "LedgerError"),
}

__all__ = tuple(["__version__", "git_describe", *_exports.keys()])


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loader to avoid import-time dependency tangles.
    """
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
