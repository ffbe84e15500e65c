# SPDX-License-Identifier: MIT
"""ESLint config resolution — raw (file-local) and resolved (full-chain) rule sets.

Two backends share the raw parsing:
    LocalConfigResolver — follows relative ``extends`` chains in Python.
    EslintCliResolver   — asks ``eslint --print-config`` for the resolved rules.

Raw config data comes from ``json5`` (JSON/JSONC files) or from a ``node``
subprocess that prints a JS module's exports as JSON. Nothing is cached
between calls.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lintshed.rules.base import RawRules, RuleSet

log = logging.getLogger(__name__)

ESLINT_CONFIG_NAMES: tuple[str, ...] = (".eslintrc.js", ".eslintrc.cjs", ".eslintrc.json", ".eslintrc")
_JS_SUFFIXES = (".js", ".cjs")
_RELATIVE_PREFIXES = ("./", "../")

_NODE_EXPORTS_SCRIPT = (
    "process.stdout.write(JSON.stringify(require(require('path').resolve(process.argv[1]))))"
)


class ConfigNotFoundError(FileNotFoundError):
    """Raised when a config path does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Config not found at {path}")


class ConfigParseError(ValueError):
    """Raised when a config file cannot be parsed into the expected shape."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse config at {path}: {reason}")


class CycleDetectedError(Exception):
    """Raised when an extends chain revisits a config."""

    def __init__(self, chain: Sequence[Path]) -> None:
        self.chain = tuple(chain)
        super().__init__("Extends cycle detected: " + " -> ".join(str(p) for p in self.chain))


# --- Config shape ---


class EslintOverride(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    files: str | list[str] = Field(default_factory=list)
    excluded_files: str | list[str] | None = Field(default=None, alias="excludedFiles")
    rules: dict[str, Any] = Field(default_factory=dict)


class EslintConfig(BaseModel):
    """The parts of an ``.eslintrc`` the reconciler reads; everything else is kept opaque."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    extends: str | list[str] | None = None
    rules: dict[str, Any] = Field(default_factory=dict)
    overrides: list[EslintOverride] = Field(default_factory=list)
    ignore_patterns: str | list[str] = Field(default_factory=list, alias="ignorePatterns")

    @property
    def first_extends(self) -> str | None:
        if isinstance(self.extends, list):
            return self.extends[0] if self.extends else None
        return self.extends

    def has_rules(self) -> bool:
        return bool(self.rules) or any(o.rules for o in self.overrides)


def validation_summary(e: ValidationError) -> str:
    """Flatten a pydantic error into ``loc: type`` pairs."""
    parts: list[str] = []
    for err in e.errors():
        loc = ".".join(str(loc) for loc in err["loc"])
        parts.append(f"{loc}: {err['type']}")
    return "; ".join(parts)


def parse_eslint_config(data: Any, *, source: Path) -> EslintConfig:
    """Validate already-decoded config data.

    Raises:
        ConfigParseError: If the data does not have the config shape.
    """
    if not isinstance(data, dict):
        raise ConfigParseError(source, f"expected an object, got {type(data).__name__}")
    try:
        return EslintConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(source, validation_summary(e)) from e


def parse_eslint_config_text(text: str, *, source: Path) -> EslintConfig:
    """Parse JSON / JSON-with-comments config contents."""
    try:
        data = json5.loads(text)
    except ValueError as e:
        raise ConfigParseError(source, str(e)) from e
    return parse_eslint_config(data, source=source)


def raw_rules_of(config: EslintConfig) -> RawRules:
    return RawRules(
        top_level=RuleSet.from_mapping(config.rules),
        overrides=tuple(RuleSet.from_mapping(o.rules) for o in config.overrides if o.rules),
    )


def _complete_config_path(path: Path) -> Path:
    if path.suffix in (".js", ".cjs", ".json") or path.name == ".eslintrc":
        return path
    for suffix in (".js", ".cjs", ".json"):
        candidate = path.with_name(path.name + suffix)
        if candidate.exists():
            return candidate
    return path.with_name(path.name + ".js")


def extends_path(config: EslintConfig, config_path: Path) -> Path | None:
    """Resolve the first ``extends`` entry to a file, or None for package extends."""
    value = config.first_extends
    if not value or not value.startswith(_RELATIVE_PREFIXES):
        if value:
            log.debug("%s extends package config %r; not followed", config_path, value)
        return None
    resolved = Path(os.path.normpath(config_path.parent / value))
    return _complete_config_path(resolved)


@dataclass(frozen=True)
class ResolvedConfig:
    """Resolved and raw views of one ESLint config file."""

    path: Path
    resolved: RuleSet
    raw: RawRules
    extends_from: Path | None = None


@runtime_checkable
class ConfigResolver(Protocol):
    """What the aggregator needs from an ESLint config backend."""

    def load(self, path: Path) -> EslintConfig: ...

    def resolve(self, path: Path) -> ResolvedConfig: ...


class LocalConfigResolver:
    """Resolve configs by reading files and following relative extends in Python."""

    def __init__(self, *, node_command: str = "node", timeout: float = 60.0) -> None:
        self._node = node_command
        self._timeout = timeout

    def _evaluate_js(self, path: Path) -> Any:
        try:
            result = subprocess.run(
                [self._node, "-e", _NODE_EXPORTS_SCRIPT, str(path)],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
            return json.loads(result.stdout)
        except subprocess.CalledProcessError as e:
            raise ConfigParseError(path, e.stderr.strip() or f"node exited {e.returncode}") from e
        except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as e:
            raise ConfigParseError(path, str(e)) from e

    def load(self, path: Path) -> EslintConfig:
        """Read and validate the file-local config (no extends followed)."""
        if not path.is_file():
            raise ConfigNotFoundError(path)
        if path.suffix in _JS_SUFFIXES:
            return parse_eslint_config(self._evaluate_js(path), source=path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigParseError(path, str(e)) from e
        return parse_eslint_config_text(text, source=path)

    def resolve(self, path: Path) -> ResolvedConfig:
        return self._resolve(Path(os.path.abspath(path)), ())

    def _resolve(self, path: Path, chain: tuple[Path, ...]) -> ResolvedConfig:
        if path in chain:
            raise CycleDetectedError([*chain, path])
        config = self.load(path)
        raw = raw_rules_of(config)
        parent = extends_path(config, path)
        resolved = self._resolved_rules(path, raw, parent, (*chain, path))
        return ResolvedConfig(path=path, resolved=resolved, raw=raw, extends_from=parent)

    def _resolved_rules(
        self,
        path: Path,
        raw: RawRules,
        parent: Path | None,
        chain: tuple[Path, ...],
    ) -> RuleSet:
        inherited = self._resolve(parent, chain).resolved if parent else RuleSet()
        resolved = raw.top_level.merged_over(inherited)
        # Override rules only contribute when they switch a rule on
        enabling = {
            rule.name: rule
            for block in raw.overrides
            for rule in block
            if rule.enabled and not resolved.is_enabled(rule.name)
        }
        if enabling:
            resolved = RuleSet({**resolved.rules, **enabling})
        return resolved


class EslintCliResolver(LocalConfigResolver):
    """Resolve rules with ``eslint --print-config`` (legacy eslintrc mode)."""

    def __init__(
        self,
        *,
        eslint_command: Sequence[str] = ("npx", "eslint"),
        node_command: str = "node",
        timeout: float = 60.0,
    ) -> None:
        super().__init__(node_command=node_command, timeout=timeout)
        self._eslint = tuple(eslint_command)

    def _resolved_rules(
        self,
        path: Path,
        raw: RawRules,
        parent: Path | None,
        chain: tuple[Path, ...],
    ) -> RuleSet:
        env = {**os.environ, "ESLINT_USE_FLAT_CONFIG": "false"}
        try:
            result = subprocess.run(
                [*self._eslint, "--print-config", str(path)],
                cwd=path.parent,
                env=env,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
            printed = json.loads(result.stdout)
        except subprocess.CalledProcessError as e:
            raise ConfigParseError(path, e.stderr.strip() or f"eslint exited {e.returncode}") from e
        except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as e:
            raise ConfigParseError(path, str(e)) from e

        if not isinstance(printed, dict) or not isinstance(printed.get("rules"), dict):
            raise ConfigParseError(path, "Invalid ESLint config")
        return RuleSet.from_mapping(printed["rules"])


def create_resolver(
    kind: str,
    *,
    eslint_command: Sequence[str] = ("npx", "eslint"),
    node_command: str = "node",
    timeout: float = 60.0,
) -> ConfigResolver:
    """Select a resolver backend by name ("eslint" or "local")."""
    if kind == "eslint":
        return EslintCliResolver(
            eslint_command=eslint_command, node_command=node_command, timeout=timeout
        )
    if kind == "local":
        return LocalConfigResolver(node_command=node_command, timeout=timeout)
    msg = f"Unknown resolver: {kind!r}. Expected 'eslint' or 'local'."
    raise ValueError(msg)
