"""
token_ledger.config — runtime configuration for the token ledger.

This module centralizes knobs for:
  • Account shape (fixed address width, or any non-empty width)
  • Metadata rules (name/symbol length caps, symbol uppercasing)
  • Ambient wiring (JSONL event log path, Prometheus metrics, log level)

Configuration may be provided via environment variables. Safe defaults are chosen so a
local developer run works out of the box.

Environment variables (all optional):
  TOKEN_LEDGER_ADDRESS_BYTES     -> integer; 0 disables the width check (default: 20)
  TOKEN_LEDGER_MAX_NAME_LEN      -> integer (default: 64)
  TOKEN_LEDGER_MAX_SYMBOL_LEN    -> integer (default: 11)
  TOKEN_LEDGER_UPPERCASE_SYMBOL  -> 0/1/true/false (default: 1)
  TOKEN_LEDGER_EVENT_LOG         -> path to a JSONL event log (default: unset → in-memory)
  TOKEN_LEDGER_METRICS           -> 0/1/true/false (default: 1)
  TOKEN_LEDGER_LOG_LEVEL         -> DEBUG/INFO/WARNING/ERROR (default: INFO)

Programmatic usage:
    from token_ledger.config import get_config
    cfg = get_config()
    if cfg.ambient.metrics_enabled:
        ...
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

# ----------------------------- helpers -------------------------------------


_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _bool_env(value: Optional[str], default: bool, *, name: str) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v == "":
        return default
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _int_env(value: Union[str, int, None], default: int, *, name: str) -> int:
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class AccountRules:
    address_bytes: int = 20  # 0 → any non-empty width


@dataclass(frozen=True)
class MetadataRules:
    max_name_len: int = 64
    max_symbol_len: int = 11
    uppercase_symbol: bool = True


@dataclass(frozen=True)
class Ambient:
    event_log_path: Optional[Path] = None
    metrics_enabled: bool = True
    log_level: str = "INFO"


@dataclass(frozen=True)
class LedgerConfig:
    accounts: AccountRules
    metadata: MetadataRules
    ambient: Ambient

    def to_dict(self) -> Dict[str, object]:
        d = asdict(self)
        p = self.ambient.event_log_path
        d["ambient"]["event_log_path"] = str(p) if p is not None else None
        return d


# ------------------------------ loader --------------------------------------


def _validate(cfg: LedgerConfig) -> LedgerConfig:
    if cfg.accounts.address_bytes < 0:
        raise ValueError("address_bytes must be ≥ 0")
    if cfg.metadata.max_name_len <= 0:
        raise ValueError("max_name_len must be > 0")
    if cfg.metadata.max_symbol_len <= 0:
        raise ValueError("max_symbol_len must be > 0")
    if cfg.ambient.log_level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {_LOG_LEVELS}")
    return cfg


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, bool, Path, None]]] = None,
) -> LedgerConfig:
    """
    Build a LedgerConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support:
          'address_bytes', 'max_name_len', 'max_symbol_len', 'uppercase_symbol',
          'event_log_path', 'metrics_enabled', 'log_level'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    accounts = AccountRules(
        address_bytes=_int_env(
            overrides.get("address_bytes", env.get("TOKEN_LEDGER_ADDRESS_BYTES")),
            20,
            name="address_bytes",
        ),
    )

    metadata = MetadataRules(
        max_name_len=_int_env(
            overrides.get("max_name_len", env.get("TOKEN_LEDGER_MAX_NAME_LEN")),
            64,
            name="max_name_len",
        ),
        max_symbol_len=_int_env(
            overrides.get("max_symbol_len", env.get("TOKEN_LEDGER_MAX_SYMBOL_LEN")),
            11,
            name="max_symbol_len",
        ),
        uppercase_symbol=(
            bool(overrides["uppercase_symbol"])
            if "uppercase_symbol" in overrides
            else _bool_env(env.get("TOKEN_LEDGER_UPPERCASE_SYMBOL"), True, name="uppercase_symbol")
        ),
    )

    raw_path = overrides.get("event_log_path", env.get("TOKEN_LEDGER_EVENT_LOG"))
    event_log_path = (
        Path(str(raw_path)).expanduser() if raw_path not in (None, "") else None
    )

    ambient = Ambient(
        event_log_path=event_log_path,
        metrics_enabled=(
            bool(overrides["metrics_enabled"])
            if "metrics_enabled" in overrides
            else _bool_env(env.get("TOKEN_LEDGER_METRICS"), True, name="metrics_enabled")
        ),
        log_level=str(
            overrides.get("log_level", env.get("TOKEN_LEDGER_LOG_LEVEL", "INFO"))
        ).strip().upper(),
    )

    return _validate(LedgerConfig(accounts=accounts, metadata=metadata, ambient=ambient))


@lru_cache(maxsize=1)
def get_config() -> LedgerConfig:
    """
    Cached global config. Suitable for application bootstraps and module-level consumers.
    """
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def summary(cfg: Optional[LedgerConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the most important knobs.
    """
    cfg = cfg or get_config()
    a = cfg.accounts
    m = cfg.metadata
    amb = cfg.ambient
    return (
        "ledger{"
        f"addr={a.address_bytes or 'any'}, "
        f"name<={m.max_name_len}, symbol<={m.max_symbol_len}, upper={int(m.uppercase_symbol)}, "
        f"events={amb.event_log_path or 'memory'}, metrics={int(amb.metrics_enabled)}, "
        f"log={amb.log_level}"
        "}"
    )


__all__ = [
    "AccountRules",
    "MetadataRules",
    "Ambient",
    "LedgerConfig",
    "load_config",
    "get_config",
    "summary",
]
