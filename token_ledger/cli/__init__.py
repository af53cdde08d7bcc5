"""
token_ledger.cli — command-line entrypoints for the token ledger.

  • token_ledger.cli.run_ops — build a token from a JSON scenario, apply its ops, print results

Usage (examples):
    python -m token_ledger.cli.run_ops --help
"""

from __future__ import annotations

import logging
from typing import Union

from ..version import __version__

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """
    Install a basic stderr handler for CLI runs. Library code never calls this.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger("token_ledger").setLevel(level)


__all__ = ["__version__", "configure_logging"]
