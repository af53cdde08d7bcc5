"""
token_ledger.metrics — Prometheus counters & histograms for the token ledger.

Design goals
------------
* Centralized registry: consumers can call `get_registry()` and `generate_latest_text()`
  to expose metrics via HTTP in whatever host embeds the ledger.
* Simple helpers: `observe_op(...)` and `time_op(...)` cover the engine's paths.
* Engines constructed with metrics disabled never touch this module's metrics.

Exposed metrics (names are prefixed with `token_ledger_`):
  - ops_total{op,result}        : Counter — operations applied, by outcome
  - events_emitted_total{event} : Counter — committed events, by event name
  - op_seconds{op}              : Histogram — wall time per operation (lock held)

Labels:
  - op     ∈ {transfer, transfer_from, approve, ..., pause, unpause, other}
  - result ∈ {success, rejected}

Histogram buckets for op_seconds can be overridden at import time with
TOKEN_LEDGER_METRICS_OP_SECONDS_BUCKETS (comma-separated seconds); bad tokens
are skipped and an empty result keeps the defaults.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Histogram, generate_latest)

# ------------------------------ configuration -------------------------------

_PREFIX = "token_ledger_"

_KNOWN_OPS = frozenset({
    "construct",
    "transfer",
    "transfer_from",
    "approve",
    "increase_allowance",
    "decrease_allowance",
    "mint",
    "burn",
    "burn_from",
    "transfer_ownership",
    "pause",
    "unpause",
})


def _buckets_from_env(name: str, default: Iterable[float]) -> Iterable[float]:
    raw = os.getenv(name)
    if not raw:
        return default
    out = []
    for tok in raw.split(","):
        tok = tok.strip()
        if not tok:
            continue
        try:
            out.append(float(tok))
        except ValueError:
            # ignore bad tokens
            continue
    return out or default


_OP_SECONDS_BUCKETS = tuple(_buckets_from_env(
    "TOKEN_LEDGER_METRICS_OP_SECONDS_BUCKETS",
    # 10µs .. 100ms; ops are in-memory dict updates
    (0.00001, 0.000025, 0.00005, 0.0001, 0.00025, 0.0005, 0.001,
     0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
))


# ------------------------------ registry & ctor ------------------------------

_registry: Optional[CollectorRegistry] = None


def get_registry() -> CollectorRegistry:
    """
    Return the metrics registry, creating one on first use.
    """
    global _registry
    if _registry is None:
        _registry = CollectorRegistry()
        _build_metrics(_registry)
    return _registry


# Metric singletons (bound during _build_metrics)
OPS_TOTAL: Counter
EVENTS_EMITTED_TOTAL: Counter
OP_SECONDS: Histogram


def _build_metrics(reg: CollectorRegistry) -> None:
    """
    Instantiate metrics bound to `reg`. Called exactly once per process.
    """
    global OPS_TOTAL, EVENTS_EMITTED_TOTAL, OP_SECONDS

    OPS_TOTAL = Counter(
        _PREFIX + "ops_total",
        "Ledger operations applied (by operation and result).",
        labelnames=("op", "result"),
        registry=reg,
    )
    EVENTS_EMITTED_TOTAL = Counter(
        _PREFIX + "events_emitted_total",
        "Committed ledger events (by event name).",
        labelnames=("event",),
        registry=reg,
    )
    OP_SECONDS = Histogram(
        _PREFIX + "op_seconds",
        "Wall time to apply one ledger operation.",
        labelnames=("op",),
        buckets=_OP_SECONDS_BUCKETS,
        registry=reg,
    )


# ------------------------------ helpers -------------------------------------

def _norm_op(s: str) -> str:
    s = (s or "").strip().lower()
    return s if s in _KNOWN_OPS else "other"


def _norm_result(s: str) -> str:
    s = (s or "").strip().lower()
    if s in {"ok", "success", "s"}:
        return "success"
    return "rejected"


def observe_op(*, op: str, result: str, event: Optional[str] = None) -> None:
    """
    Record metrics for a single ledger operation.

    Args:
        op:     operation name (normalized; unknown names count as 'other')
        result: logical outcome: {'success','rejected'} (flexibly normalized)
        event:  name of the committed event, if any
    """
    get_registry()
    OPS_TOTAL.labels(op=_norm_op(op), result=_norm_result(result)).inc()
    if event:
        EVENTS_EMITTED_TOTAL.labels(event=event).inc()


@dataclass
class _TimerCtx:
    h: Histogram
    labels: Dict[str, str]
    t0: float

    def stop(self) -> float:
        dt = max(0.0, time.perf_counter() - self.t0)
        self.h.labels(**self.labels).observe(dt)
        return dt

    # Context manager protocol
    def __enter__(self) -> "_TimerCtx":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def time_op(op: str) -> _TimerCtx:
    """
    Context manager to time one operation.

    Example:
        with time_op("transfer"):
            engine.transfer(alice, bob, 10)
    """
    get_registry()
    return _TimerCtx(h=OP_SECONDS, labels={"op": _norm_op(op)}, t0=time.perf_counter())


# ------------------------------ exposition ----------------------------------

def generate_latest_text() -> bytes:
    """
    Return Prometheus exposition format for the current registry.
    """
    return generate_latest(get_registry())


def sample_value(name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
    """Read a single sample from the ledger registry (handy in tests and dashboards)."""
    return get_registry().get_sample_value(_PREFIX + name, labels or {})


__all__ = [
    "get_registry",
    "generate_latest_text",
    "sample_value",
    "observe_op",
    "time_op",
    "OPS_TOTAL",
    "EVENTS_EMITTED_TOTAL",
    "OP_SECONDS",
    "CONTENT_TYPE_LATEST",
]
