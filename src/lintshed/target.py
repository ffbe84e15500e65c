# SPDX-License-Identifier: MIT
"""Oxlint config loading — the resolved rule set of the paired target config."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lintshed.resolver import (
    ConfigNotFoundError,
    ConfigParseError,
    CycleDetectedError,
    validation_summary,
)
from lintshed.rules.base import LintRule, RuleSet

log = logging.getLogger(__name__)

TARGET_CONFIG_NAME = ".oxlintrc.json"


class OxlintOverride(BaseModel):
    model_config = ConfigDict(extra="allow")

    files: str | list[str] = Field(default_factory=list)
    rules: dict[str, Any] = Field(default_factory=dict)


class OxlintConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    extends: str | list[str] | None = None
    plugins: list[str] | None = None
    rules: dict[str, Any] = Field(default_factory=dict)
    overrides: list[OxlintOverride] = Field(default_factory=list)

    @property
    def extends_list(self) -> list[str]:
        if self.extends is None:
            return []
        return [self.extends] if isinstance(self.extends, str) else list(self.extends)


def parse_oxlint_config(text: str, *, source: Path) -> OxlintConfig:
    """Parse ``.oxlintrc.json`` contents (comments and trailing commas allowed).

    Raises:
        ConfigParseError: On syntax errors or an unexpected shape.
    """
    try:
        data = json5.loads(text)
    except ValueError as e:
        raise ConfigParseError(source, str(e)) from e
    if not isinstance(data, dict):
        raise ConfigParseError(source, f"expected an object, got {type(data).__name__}")
    try:
        return OxlintConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(source, validation_summary(e)) from e


def target_rules_of(config: OxlintConfig) -> RuleSet:
    """Top-level rules, plus override rules that enable something not already on."""
    rules = RuleSet.from_mapping(config.rules)
    enabling: dict[str, LintRule] = {}
    for override in config.overrides:
        for rule in RuleSet.from_mapping(override.rules):
            if rule.enabled and not rules.is_enabled(rule.name) and rule.name not in enabling:
                enabling[rule.name] = rule
    if enabling:
        rules = RuleSet({**rules.rules, **enabling})
    return rules


@runtime_checkable
class TargetLoader(Protocol):
    """Resolved rules of a target config, its own extends chain included."""

    def load(self, path: Path, parent_path: Path | None = None) -> RuleSet: ...


class FileTargetLoader:
    """Read ``.oxlintrc.json`` files directly and follow their extends chain.

    When a config declares no ``extends`` of its own, the target config next to
    the source config's parent (``parent_path``) is inherited instead.
    """

    def load(self, path: Path, parent_path: Path | None = None) -> RuleSet:
        return self._load(Path(os.path.abspath(path)), parent_path, ())

    def _load(self, path: Path, parent_source: Path | None, chain: tuple[Path, ...]) -> RuleSet:
        if path in chain:
            raise CycleDetectedError([*chain, path])
        if not path.is_file():
            raise ConfigNotFoundError(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigParseError(path, str(e)) from e
        config = parse_oxlint_config(text, source=path)

        parents = [
            Path(os.path.normpath(path.parent / entry)) for entry in config.extends_list
        ]
        if not parents and parent_source is not None:
            candidate = Path(os.path.abspath(parent_source)).parent / TARGET_CONFIG_NAME
            if candidate.is_file() and candidate != path:
                parents = [candidate]

        inherited = RuleSet()
        for parent in parents:
            inherited = self._load(parent, None, (*chain, path)).merged_over(inherited)
        return target_rules_of(config).merged_over(inherited)


class OxlintCliLoader:
    """Ask ``oxlint --print-config`` for the effective rule set."""

    def __init__(
        self, command: Sequence[str] = ("pnpm", "exec", "oxlint"), *, timeout: float = 60.0
    ) -> None:
        self._command = tuple(command)
        self._timeout = timeout

    def load(self, path: Path, parent_path: Path | None = None) -> RuleSet:
        absolute = Path(os.path.abspath(path))
        if not absolute.is_file():
            raise ConfigNotFoundError(absolute)
        try:
            result = subprocess.run(
                [*self._command, "--type-aware", "--print-config", "--config", str(absolute)],
                cwd=absolute.parent,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
            printed = json.loads(result.stdout)
        except subprocess.CalledProcessError as e:
            raise ConfigParseError(absolute, e.stderr.strip() or f"oxlint exited {e.returncode}") from e
        except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as e:
            raise ConfigParseError(absolute, str(e)) from e

        rules = printed.get("rules") if isinstance(printed, dict) else None
        if not isinstance(rules, dict):
            log.debug("%s printed no rules block", absolute)
            return RuleSet()
        # Only string and [severity, ...options] values are rule settings
        return RuleSet.from_mapping(
            {name: value for name, value in rules.items() if isinstance(value, (str, list))}
        )


def create_target_loader(
    kind: str,
    *,
    oxlint_command: Sequence[str] = ("pnpm", "exec", "oxlint"),
    timeout: float = 60.0,
) -> TargetLoader:
    """Pair the target loader with the resolver backend ("eslint" → CLI, "local" → files)."""
    if kind == "eslint":
        return OxlintCliLoader(oxlint_command, timeout=timeout)
    if kind == "local":
        return FileTargetLoader()
    msg = f"Unknown resolver: {kind!r}. Expected 'eslint' or 'local'."
    raise ValueError(msg)
