# SPDX-License-Identifier: MIT
"""Config discovery — find ESLint configs and their paired Oxlint configs."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from lintshed.config import EXCLUDED_DIRS
from lintshed.resolver import ESLINT_CONFIG_NAMES
from lintshed.target import TARGET_CONFIG_NAME

log = logging.getLogger(__name__)


def discover_config_files(
    root: Path,
    *,
    names: Iterable[str] = ESLINT_CONFIG_NAMES,
    excluded_dirs: Iterable[str] = EXCLUDED_DIRS,
) -> list[Path]:
    """Recursively find ESLint config files under ``root``, sorted lexicographically.

    Dependency, build and VCS directories are not descended into. Unreadable
    directories are skipped.
    """
    wanted = set(names)
    excluded = set(excluded_dirs)
    found: list[Path] = []

    def _on_error(exc: OSError) -> None:
        log.debug("Skipping unreadable directory: %s", exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = [d for d in dirnames if d not in excluded]
        found.extend(Path(dirpath) / f for f in filenames if f in wanted)
    return sorted(found, key=str)


def target_config_for(eslint_config: Path) -> Path:
    """The Oxlint config paired with an ESLint config: same directory."""
    return eslint_config.parent / TARGET_CONFIG_NAME
