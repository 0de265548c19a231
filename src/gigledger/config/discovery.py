"""Locate ``gigledger.toml``.

``$GIGLEDGER_CONFIG`` wins when set; otherwise the nearest copy in the
working directory or one of its ancestors is used, so commands run from
a subdirectory still find the ledger's config.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "gigledger.toml"
CONFIG_ENV_VAR = "GIGLEDGER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies from *start* (default: cwd), if any.

    An env override that points at a missing file yields None rather than
    falling back to the walk-up search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
