"""
token_ledger.runtime.dispatcher — route an operation payload to the engine.

A payload is a mapping:

    {"op": "transfer", "caller": "0xaa…", "args": {"to": "0xbb…", "amount": 300}}

`op` accepts snake_case names and the familiar camelCase aliases
(`transferFrom`, `burnFrom`, `increaseAllowance`, ...). `caller` is supplied
by the host, never read from `args`. Amounts may be ints or decimal/0x-hex
strings (JSON cannot carry 256-bit integers portably).

`apply()` always returns an OpResult for ledger-level failures: LedgerError
(including DispatchError for unknown ops or missing arguments) becomes a
`rejected` result with the error payload. Any other exception propagates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Tuple

from ..errors import (DispatchError, InvalidAmount, LedgerError,
                      error_to_result_fields)
from ..types.result import OpResult, OpStatus

if TYPE_CHECKING:  # type-only import to avoid cycles
    from .engine import TokenEngine

log = logging.getLogger(__name__)


# --------------------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------------------


_ALIAS_OP = {
    "transferfrom": "transfer_from",
    "increaseallowance": "increase_allowance",
    "decreaseallowance": "decrease_allowance",
    "burnfrom": "burn_from",
    "transferownership": "transfer_ownership",
    "xfer": "transfer",
}

# op -> ordered parameters; each parameter lists accepted arg keys (first is canonical)
_SIGNATURES: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    "transfer": (("recipient", "to"), ("amount", "value")),
    "transfer_from": (("owner", "from", "sender"), ("recipient", "to"), ("amount", "value")),
    "approve": (("spender",), ("amount", "value")),
    "increase_allowance": (("spender",), ("delta", "amount", "added")),
    "decrease_allowance": (("spender",), ("delta", "amount", "subtracted")),
    "mint": (("recipient", "to"), ("amount", "value")),
    "burn": (("amount", "value"),),
    "burn_from": (("account", "owner", "from"), ("amount", "value")),
    "transfer_ownership": (("new_owner", "newOwner"),),
    "pause": (),
    "unpause": (),
}

_AMOUNT_PARAMS = frozenset({"amount", "delta"})


def resolve_op(name: Any) -> str:
    """
    Normalize an operation name to its canonical snake_case form.

    Raises DispatchError for unknown names.
    """
    if not isinstance(name, str) or not name.strip():
        raise DispatchError("missing operation name", op=repr(name))
    k = name.strip()
    if k in _SIGNATURES:
        return k
    low = k.lower()
    if low in _SIGNATURES:
        return low
    if low in _ALIAS_OP:
        return _ALIAS_OP[low]
    raise DispatchError("unknown operation", op=k)


def _coerce_amount(v: Any, *, field: str) -> Any:
    """Accept ints as-is; parse decimal or 0x-hex strings. Range checks stay in the engine."""
    if isinstance(v, str):
        try:
            return int(v.strip(), 0)
        except ValueError as e:
            raise InvalidAmount(field=field, value=v) from e
    return v


def _bind_args(op: str, args: Mapping[str, Any]) -> Tuple[Any, ...]:
    out = []
    for keys in _SIGNATURES[op]:
        for k in keys:
            if k in args:
                v = args[k]
                break
        else:
            raise DispatchError("missing argument", op=op, argument=keys[0])
        out.append(_coerce_amount(v, field=keys[0]) if keys[0] in _AMOUNT_PARAMS else v)
    return tuple(out)


# --------------------------------------------------------------------------------------
# Public API
# --------------------------------------------------------------------------------------


def apply(engine: "TokenEngine", payload: Mapping[str, Any]) -> OpResult:
    """
    Apply one operation payload to `engine`.

    Parameters
    ----------
    engine : TokenEngine
        Target ledger.
    payload : Mapping
        {"op": str, "caller": account, "args": {...}}. `args` may be omitted
        for pause/unpause.

    Returns
    -------
    OpResult
        `success` with the emitted event, or `rejected` with the error dict.
    """
    raw_op = payload.get("op") if isinstance(payload, Mapping) else None
    label = raw_op if isinstance(raw_op, str) else "unknown"
    try:
        if not isinstance(payload, Mapping):
            raise DispatchError("payload must be a mapping", type=type(payload).__name__)
        op = resolve_op(raw_op)
        label = op
        if "caller" not in payload:
            raise DispatchError("missing caller", op=op)
        args = payload.get("args") or {}
        if not isinstance(args, Mapping):
            raise DispatchError("args must be a mapping", op=op)
        handler: Callable[..., OpResult] = getattr(engine, op)
        return handler(payload["caller"], *_bind_args(op, args))
    except LedgerError as err:
        log.debug("dispatch %s rejected: %s", label, err.code)
        fields = error_to_result_fields(err)
        return OpResult(label, OpStatus.from_str(fields["status"]), (), fields["error"])


__all__ = ["apply", "resolve_op"]
