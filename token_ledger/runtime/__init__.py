"""
token_ledger.runtime — operation orchestration.

Submodules
----------
- guards     : composable owner/pause/amount checks run before mutation
- engine     : TokenEngine, the atomic operation engine
- dispatcher : route {"op", "caller", "args"} payloads to the engine

    from token_ledger.runtime import TokenEngine, apply
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple

_exports: Dict[str, Tuple[str, str]] = {
    "TokenEngine": ("engine", "TokenEngine"),
    "apply": ("dispatcher", "apply"),
    "resolve_op": ("dispatcher", "resolve_op"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    if name in _exports:
        submod, symbol = _exports[name]
        return getattr(import_module(f"{__name__}.{submod}"), symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
