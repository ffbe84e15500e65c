# SPDX-License-Identifier: MIT
"""Run settings — CLI > environment > default, like profile loading."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass

DEFAULT_ENABLED_PLUGINS: tuple[str, ...] = ("typescript", "unicorn", "oxc")

EXCLUDED_DIRS: frozenset[str] = frozenset(
    {"node_modules", ".git", "dist", "build", ".next", "coverage"}
)

RESOLVERS: tuple[str, ...] = ("eslint", "local")

_TRUE_TOKENS = {"true", "1", "yes"}
_FALSE_TOKENS = {"false", "0", "no"}


@dataclass(frozen=True)
class Settings:
    """External commands and data sources for one run."""

    oxlint_command: tuple[str, ...] = ("pnpm", "exec", "oxlint")
    eslint_command: tuple[str, ...] = ("npx", "eslint")
    node_command: str = "node"
    default_enabled_plugins: tuple[str, ...] = DEFAULT_ENABLED_PLUGINS
    type_aware_source: str | None = None
    timeout: float = 60.0
    resolver: str = "eslint"


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def load_settings(cli_resolver: str | None = None) -> Settings:
    """Build Settings from the environment.

    Args:
        cli_resolver: Resolver backend from the CLI --resolver flag (highest priority).

    Raises:
        ValueError: If the resolver name or timeout is not valid.
    """
    defaults = Settings()
    resolver = cli_resolver or os.environ.get("LINTSHED_RESOLVER", defaults.resolver)
    if resolver not in RESOLVERS:
        msg = f"Unknown resolver: {resolver!r}. Valid resolvers: {sorted(RESOLVERS)}"
        raise ValueError(msg)

    timeout_raw = os.environ.get("LINTSHED_TIMEOUT")
    try:
        timeout = float(timeout_raw) if timeout_raw else defaults.timeout
    except ValueError:
        msg = f"LINTSHED_TIMEOUT must be a number, got {timeout_raw!r}"
        raise ValueError(msg) from None

    oxlint_cmd = os.environ.get("LINTSHED_OXLINT_CMD")
    eslint_cmd = os.environ.get("LINTSHED_ESLINT_CMD")
    plugins = os.environ.get("LINTSHED_DEFAULT_PLUGINS")

    return Settings(
        oxlint_command=tuple(shlex.split(oxlint_cmd)) if oxlint_cmd else defaults.oxlint_command,
        eslint_command=tuple(shlex.split(eslint_cmd)) if eslint_cmd else defaults.eslint_command,
        node_command=os.environ.get("LINTSHED_NODE") or defaults.node_command,
        default_enabled_plugins=_split_list(plugins) if plugins else defaults.default_enabled_plugins,
        type_aware_source=os.environ.get("LINTSHED_TYPE_AWARE_SOURCE") or None,
        timeout=timeout,
        resolver=resolver,
    )


def parse_bool(value: str) -> bool:
    token = value.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    msg = f"Expected true/false, got {value!r}"
    raise ValueError(msg)


def resolve_type_aware(cli_value: str | None = None) -> bool:
    """Resolve the mandatory type-aware run mode: CLI > LINTSHED_TYPE_AWARE.

    Raises:
        ValueError: If neither is set, or the value is not a boolean token.
    """
    value = cli_value if cli_value is not None else os.environ.get("LINTSHED_TYPE_AWARE")
    if value is None:
        msg = "type-aware mode must be set (--type-aware, --no-type-aware or LINTSHED_TYPE_AWARE)"
        raise ValueError(msg)
    return parse_bool(value)
