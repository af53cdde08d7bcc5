from __future__ import annotations

import pytest

from token_ledger import metrics
from token_ledger.config import load_config
from token_ledger.errors import InsufficientBalance
from token_ledger.runtime.engine import TokenEngine
from token_ledger.state.events import NullEventSink
from token_ledger.tests import ALICE, BOB, OWNER


def _value(name: str, **labels: str) -> float:
    return metrics.sample_value(name, labels) or 0.0


def _engine(enabled: bool) -> TokenEngine:
    cfg = load_config(env={}, overrides={"metrics_enabled": enabled})
    return TokenEngine.create("Metered", "MTR", 0, 100, ALICE, OWNER, config=cfg, sink=NullEventSink())


def test_ops_are_counted_by_result() -> None:
    token = _engine(True)
    ok0 = _value("ops_total", op="transfer", result="success")
    bad0 = _value("ops_total", op="transfer", result="rejected")
    ev0 = _value("events_emitted_total", event="Transfer")
    n0 = _value("op_seconds_count", op="transfer")

    token.transfer(ALICE, BOB, 10)
    with pytest.raises(InsufficientBalance):
        token.transfer(ALICE, BOB, 10_000)

    assert _value("ops_total", op="transfer", result="success") == ok0 + 1
    assert _value("ops_total", op="transfer", result="rejected") == bad0 + 1
    assert _value("events_emitted_total", event="Transfer") == ev0 + 1
    assert _value("op_seconds_count", op="transfer") == n0 + 2


def test_disabled_engine_records_nothing() -> None:
    token = _engine(False)
    before = _value("ops_total", op="burn", result="success")
    token.burn(ALICE, 1)
    assert _value("ops_total", op="burn", result="success") == before


def test_unknown_ops_fold_into_other() -> None:
    before = _value("ops_total", op="other", result="rejected")
    metrics.observe_op(op="teleport", result="revert")
    assert _value("ops_total", op="other", result="rejected") == before + 1


def test_time_op_and_exposition() -> None:
    with metrics.time_op("approve") as t:
        pass
    assert t.stop() >= 0.0
    text = metrics.generate_latest_text()
    assert b"token_ledger_ops_total" in text
    assert b"token_ledger_op_seconds_bucket" in text


def test_op_seconds_buckets_from_env(monkeypatch) -> None:
    name = "TOKEN_LEDGER_METRICS_OP_SECONDS_BUCKETS"
    default = (0.1, 1.0)
    monkeypatch.setenv(name, "0.001, bogus,,0.5")
    assert metrics._buckets_from_env(name, default) == [0.001, 0.5]
    monkeypatch.setenv(name, "x,y")
    assert metrics._buckets_from_env(name, default) == default
    monkeypatch.delenv(name)
    assert metrics._buckets_from_env(name, default) == default
