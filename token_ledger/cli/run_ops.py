#!/usr/bin/env python3
"""
token_ledger.cli.run_ops — build a token from a JSON scenario, apply its ops and print results.

This CLI:
  1) Loads a scenario file:
        {
          "token": {"name": "Example", "symbol": "EXM", "decimals": 18,
                    "initial_supply": 1000, "recipient": "0xaa…", "owner": "0xad…"},
          "ops": [
            {"op": "transfer", "caller": "0xaa…", "args": {"to": "0xbb…", "amount": 300}},
            ...
          ]
        }
  2) Constructs a TokenEngine from the `token` block
  3) Applies each entry of `ops` in order via token_ledger.runtime.dispatcher.apply
  4) Prints one line per op (or full JSON with --json) and a final summary

Usage:
    python -m token_ledger.cli.run_ops scenario.json --json --events-out events.jsonl

Options:
    --json          Print full JSON (results, genesis events, final state).
    --events-out    Write committed events to this JSONL file (truncated first).
    --strict        Exit with status 1 if any op was rejected.
    --log-level     Logging level for stderr (default: TOKEN_LEDGER_LOG_LEVEL or INFO).
    --quiet         Suppress progress messages on stderr.

Exit status: 0 on success, 1 when --strict and an op was rejected, 2 on a
missing/invalid scenario or a rejected construction.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..config import get_config, summary
from ..errors import LedgerError
from ..runtime.dispatcher import apply
from ..runtime.engine import TokenEngine
from ..state.events import EventSink, JsonlEventSink
from ..types.result import OpResult
from ..version import version_metadata
from . import configure_logging

_TOKEN_FIELDS = ("name", "symbol", "decimals", "initial_supply", "recipient", "owner")


def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


# --- Helpers -------------------------------------------------------------------------------------
def _load_scenario(path: Path) -> Dict[str, Any]:
    obj = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise ValueError("scenario must be a JSON object")
    token = obj.get("token")
    if not isinstance(token, Mapping):
        raise ValueError("scenario.token must be an object")
    missing = [f for f in _TOKEN_FIELDS if f not in token]
    if missing:
        raise ValueError(f"scenario.token is missing: {', '.join(missing)}")
    ops = obj.get("ops", [])
    if not isinstance(ops, list):
        raise ValueError("scenario.ops must be a list")
    return {"token": dict(token), "ops": ops}


def _amount(v: Any) -> Any:
    return int(v, 0) if isinstance(v, str) else v


def _build_engine(token: Mapping[str, Any], sink: Optional[EventSink]) -> TokenEngine:
    return TokenEngine.create(
        token["name"],
        token["symbol"],
        token["decimals"],
        _amount(token["initial_supply"]),
        token["recipient"],
        token["owner"],
        sink=sink,
    )


def _result_line(i: int, r: OpResult) -> str:
    if r.is_success:
        return f"OP {i} {r.op} STATUS={r.status} EVENT={r.event.name if r.event else '-'}"
    code = (r.error or {}).get("code", "?")
    return f"OP {i} {r.op} STATUS={r.status} ERROR={code}"


def _parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Apply a JSON scenario of token-ledger operations."
    )
    p.add_argument("scenario", type=Path, help="Path to the scenario JSON file")
    p.add_argument("--json", action="store_true", help="Print full JSON output")
    p.add_argument(
        "--events-out",
        type=Path,
        default=None,
        help="Write committed events to a JSONL file (overwrites it)",
    )
    p.add_argument(
        "--strict", action="store_true", help="Exit 1 if any operation was rejected"
    )
    p.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
    p.add_argument(
        "--quiet", action="store_true", help="Only print the results / JSON"
    )
    return p.parse_args(argv)


# --- Main ----------------------------------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    ns = _parse_args(sys.argv[1:] if argv is None else argv)
    cfg = get_config()
    configure_logging(ns.log_level or cfg.ambient.log_level)

    if not ns.scenario.exists():
        eprint(f"[run_ops] Scenario file not found: {ns.scenario}")
        return 2
    try:
        scenario = _load_scenario(ns.scenario)
    except ValueError as ex:
        eprint(f"[run_ops] Invalid scenario: {ex}")
        return 2

    if not ns.quiet:
        meta = version_metadata()
        eprint(f"[run_ops] token_ledger {meta['describe']} {summary(cfg)}")

    sink = JsonlEventSink(ns.events_out) if ns.events_out else None
    try:
        engine = _build_engine(scenario["token"], sink)
    except (LedgerError, ValueError) as ex:
        eprint(f"[run_ops] Construction rejected: {ex}")
        if sink is not None:
            sink.close()
        return 2

    results: List[OpResult] = []
    try:
        for payload in scenario["ops"]:
            results.append(apply(engine, payload))
        engine.check_invariants()
        state = engine.snapshot()
    finally:
        engine.close()

    rejected = sum(1 for r in results if not r.is_success)
    if ns.json:
        out = {
            "genesis": [e.to_dict() for e in engine.genesis_events],
            "results": [r.to_dict() for r in results],
            "state": state,
        }
        print(json.dumps(out, indent=2, sort_keys=True))
    else:
        for i, r in enumerate(results):
            print(_result_line(i, r))
        print(
            f"SUMMARY OPS={len(results)} REJECTED={rejected} "
            f"SUPPLY={state['total_supply']} PAUSED={int(state['paused'])}"
        )

    if ns.events_out and not ns.quiet:
        eprint(f"[run_ops] Events written to {ns.events_out}")

    return 1 if ns.strict and rejected else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
