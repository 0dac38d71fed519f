"""Config file discovery and loading.

Walk-up finder locates tscycles.toml, similar to how git finds .git/.
Supports TSCYCLES_CONFIG env var and --config CLI flag overrides.
The same upward walk (:func:`iter_ancestors`) drives workspace-root and
package-root lookup in :mod:`tscycles.infrastructure.workspace`.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from tscycles.config.models import TscyclesConfig

CONFIG_FILENAME = "tscycles.toml"
CONFIG_ENV_VAR = "TSCYCLES_CONFIG"


def iter_ancestors(start: Path) -> Iterator[Path]:
    """Yield *start* and each parent directory up to the filesystem root."""
    current = start
    while True:
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for tscycles.toml.

    Returns the path to the config file, or None if not found.
    An explicit TSCYCLES_CONFIG pointing at a missing file also yields None.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    for directory in iter_ancestors((start or Path.cwd()).resolve()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> TscyclesConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default TscyclesConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return TscyclesConfig()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return TscyclesConfig.model_validate(data)
