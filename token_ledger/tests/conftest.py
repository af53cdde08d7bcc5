# -*- coding: utf-8 -*-
"""
Pytest fixtures for the token ledger.

- `cfg`    : hermetic LedgerConfig (ignores TOKEN_LEDGER_* env; metrics off)
- `sink`   : fresh InMemoryEventSink
- `token`  : "Example"/EXM, 18 decimals, 1000 minted to ALICE, owned by OWNER
- `make_token` : factory for tokens with custom construction parameters
"""
from __future__ import annotations

import os
from typing import Any, Callable

import pytest

from token_ledger.config import LedgerConfig, load_config
from token_ledger.runtime.engine import TokenEngine
from token_ledger.state.events import InMemoryEventSink
from token_ledger.tests import ALICE, OWNER

os.environ.setdefault("TZ", "UTC")


@pytest.fixture
def cfg() -> LedgerConfig:
    return load_config(env={}, overrides={"metrics_enabled": False})


@pytest.fixture
def sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def make_token(cfg: LedgerConfig, sink: InMemoryEventSink) -> Callable[..., TokenEngine]:
    def _make(**kw: Any) -> TokenEngine:
        params = dict(
            name="Example",
            symbol="exm",
            decimals=18,
            initial_supply=1000,
            recipient=ALICE,
            owner=OWNER,
        )
        params.update(kw)
        config = params.pop("config", cfg)
        target = params.pop("sink", sink)
        return TokenEngine.create(config=config, sink=target, **params)

    return _make


@pytest.fixture
def token(make_token: Callable[..., TokenEngine]) -> TokenEngine:
    return make_token()
