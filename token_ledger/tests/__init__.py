# -*- coding: utf-8 -*-
"""
token_ledger.tests — shared test helpers.

On import this package registers the Hypothesis profiles used by the property
tests and loads one of them:

    HYPOTHESIS_PROFILE=dev|ci|fast|stress   explicit choice
    CI=true                                 'ci' when no explicit choice
    (otherwise)                             'dev'

It also provides deterministic 20-byte accounts derived via SHA3-256:

    from token_ledger.tests import ALICE, BOB, addr, given, st
"""
from __future__ import annotations

import hashlib
import os
from typing import Any, Dict, Final

from hypothesis import HealthCheck, Verbosity, given, settings
from hypothesis import strategies as st

# ---- hypothesis profiles ------------------------------------------------------

_QUIET_CHECKS = (HealthCheck.too_slow, HealthCheck.filter_too_much)

_PROFILES: Dict[str, Dict[str, Any]] = {
    "dev": dict(max_examples=100, suppress_health_check=_QUIET_CHECKS),
    "ci": dict(
        max_examples=200,
        suppress_health_check=_QUIET_CHECKS,
        verbosity=Verbosity.verbose,
        derandomize=True,
    ),
    "fast": dict(max_examples=25, suppress_health_check=(HealthCheck.too_slow,)),
    "stress": dict(
        max_examples=1000,
        suppress_health_check=_QUIET_CHECKS + (HealthCheck.data_too_large,),
        derandomize=True,
    ),
}

for _name, _kw in _PROFILES.items():
    # ledger ops are cheap but sequences can be long; no per-example deadline
    settings.register_profile(_name, deadline=None, **_kw)


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


ACTIVE_PROFILE: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or (
    "ci" if _env_truthy("CI") else "dev"
)
settings.load_profile(ACTIVE_PROFILE)


# ---- deterministic accounts ---------------------------------------------------


def addr(label: str) -> bytes:
    """Stable 20-byte test account derived from `label`."""
    return hashlib.sha3_256(b"token-ledger-test|" + label.encode("utf-8")).digest()[:20]


ALICE: Final[bytes] = addr("alice")
BOB: Final[bytes] = addr("bob")
CAROL: Final[bytes] = addr("carol")
OWNER: Final[bytes] = addr("owner")
ZERO: Final[bytes] = b"\x00" * 20


__all__ = [
    "st",
    "given",
    "ACTIVE_PROFILE",
    "addr",
    "ALICE",
    "BOB",
    "CAROL",
    "OWNER",
    "ZERO",
]
