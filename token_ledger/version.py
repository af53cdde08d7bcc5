"""
token_ledger.version — package version and a VCS describe string for diagnostics.

Import-light so the CLI can print a banner before anything else loads.
"""

from __future__ import annotations

import os
import platform
import subprocess
from functools import lru_cache
from typing import Dict

__version__ = "0.1.0"

_DESCRIBE_ENV = "TOKEN_LEDGER_GIT_DESCRIBE"


@lru_cache(maxsize=1)
def git_describe() -> str:
    """
    `TOKEN_LEDGER_GIT_DESCRIBE` if set, else `git describe --tags --dirty --always`
    run next to this file, else `<__version__>+local`.
    """
    pinned = os.getenv(_DESCRIBE_ENV, "").strip()
    if pinned:
        return pinned
    here = os.path.dirname(os.path.abspath(__file__))
    try:
        raw = subprocess.run(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=here,
            capture_output=True,
            check=True,
        ).stdout
    except (OSError, subprocess.CalledProcessError):
        return f"{__version__}+local"
    return raw.decode("utf-8", "replace").strip() or f"{__version__}+local"


def version_metadata() -> Dict[str, str]:
    """Version info for logs and CLI banners."""
    describe = git_describe()
    return {
        "package": "token-ledger",
        "version": __version__,
        "describe": describe,
        "dirty": "true" if "-dirty" in describe else "false",
        "python": platform.python_version(),
    }


__all__ = ["__version__", "git_describe", "version_metadata"]
