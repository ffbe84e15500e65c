# SPDX-License-Identifier: MIT
"""Target rule registry — read-only index over the Oxlint rule catalog."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import requests

from lintshed.rules.names import bare_rule_name, normalize_rule_name

log = logging.getLogger(__name__)

# Oxlint reports core ESLint rules under the "eslint" scope
CORE_SCOPES: frozenset[str] = frozenset({"core", "eslint"})

# Rules that need type information (evaluated only in type-aware mode).
# Used whenever the external source is not configured or cannot be read.
TYPE_AWARE_FALLBACK: frozenset[str] = frozenset(
    f"typescript/{name}"
    for name in (
        "await-thenable",
        "no-array-delete",
        "no-base-to-string",
        "no-confusing-void-expression",
        "no-duplicate-type-constituents",
        "no-floating-promises",
        "no-for-in-array",
        "no-implied-eval",
        "no-meaningless-void-operator",
        "no-misused-promises",
        "no-misused-spread",
        "no-mixed-enums",
        "no-redundant-type-constituents",
        "no-unnecessary-boolean-literal-compare",
        "no-unnecessary-template-expression",
        "no-unnecessary-type-arguments",
        "no-unnecessary-type-assertion",
        "no-unsafe-argument",
        "no-unsafe-assignment",
        "no-unsafe-call",
        "no-unsafe-enum-comparison",
        "no-unsafe-member-access",
        "no-unsafe-return",
        "no-unsafe-type-assertion",
        "no-unsafe-unary-minus",
        "non-nullable-type-assertion-style",
        "only-throw-error",
        "prefer-promise-reject-errors",
        "prefer-reduce-type-parameter",
        "prefer-return-this-type",
        "promise-function-async",
        "related-getter-setter-pairs",
        "require-array-sort-compare",
        "require-await",
        "restrict-plus-operands",
        "restrict-template-expressions",
        "return-await",
        "switch-exhaustiveness-check",
        "unbound-method",
        "use-unknown-in-catch-callback-variable",
    )
)


class RegistryLoadError(Exception):
    """Raised when the target rule catalog cannot be obtained. Fatal for the run."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to load oxlint rules: {reason}")


@dataclass(frozen=True)
class CatalogEntry:
    """One rule of the target catalog."""

    scope: str
    local_name: str
    category: str

    @property
    def name(self) -> str:
        if self.scope in CORE_SCOPES:
            return self.local_name
        return f"{self.scope}/{self.local_name}"


class TargetRegistry:
    """Supported / default-enabled / type-aware lookups over a fixed catalog."""

    def __init__(
        self,
        entries: Sequence[CatalogEntry],
        *,
        default_enabled_plugins: Iterable[str],
        type_aware_rules: Iterable[str] = TYPE_AWARE_FALLBACK,
    ) -> None:
        plugins = frozenset(default_enabled_plugins)
        self._entries: tuple[CatalogEntry, ...] = tuple(entries)
        self._names = frozenset(normalize_rule_name(e.name) for e in self._entries)
        self._default_enabled = frozenset(
            normalize_rule_name(e.name) for e in self._entries if e.scope in plugins
        )
        self._type_aware = frozenset(normalize_rule_name(n) for n in type_aware_rules)

    @classmethod
    def load(
        cls,
        cwd: Path,
        *,
        command: Sequence[str],
        default_enabled_plugins: Iterable[str],
        type_aware_source: str | None = None,
        timeout: float = 60.0,
    ) -> TargetRegistry:
        """Build the registry from the live catalog. Raises RegistryLoadError."""
        entries = load_rule_catalog(cwd, command, timeout=timeout)
        if not entries:
            raise RegistryLoadError("catalog is empty")
        registry = cls(
            entries,
            default_enabled_plugins=default_enabled_plugins,
            type_aware_rules=load_type_aware_rules(type_aware_source, timeout=timeout),
        )
        log.info("Loaded %d oxlint rules across %d scopes", len(registry), len(registry.scopes))
        return registry

    @staticmethod
    def _lookup(name: str, names: frozenset[str]) -> bool:
        return normalize_rule_name(name) in names or bare_rule_name(name) in names

    def supported(self, name: str) -> bool:
        """True if the catalog knows the rule, by canonical or scope-less name."""
        return self._lookup(name, self._names)

    def default_enabled(self, name: str) -> bool:
        return self._lookup(name, self._default_enabled)

    def type_aware(self, name: str) -> bool:
        return normalize_rule_name(name) in self._type_aware

    @property
    def scopes(self) -> list[str]:
        return sorted({e.scope for e in self._entries})

    def __len__(self) -> int:
        return len(self._names)


def parse_rule_catalog(payload: str) -> list[CatalogEntry]:
    """Parse ``oxlint --rules --format=json`` output.

    Raises:
        RegistryLoadError: If the payload is not a list of rule objects.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise RegistryLoadError(f"catalog is not valid JSON ({exc.msg})") from exc
    if not isinstance(data, list):
        raise RegistryLoadError("catalog must be a JSON array")

    entries: list[CatalogEntry] = []
    for item in data:
        try:
            entries.append(
                CatalogEntry(
                    scope=str(item["scope"]),
                    local_name=str(item["value"]),
                    category=str(item.get("category", "")),
                )
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise RegistryLoadError(f"malformed catalog entry: {item!r}") from exc
    return entries


def load_rule_catalog(
    cwd: Path, command: Sequence[str], *, timeout: float = 60.0
) -> list[CatalogEntry]:
    """Run the target linter to list its full rule catalog.

    Raises:
        RegistryLoadError: If the process cannot run, fails, or prints garbage.
    """
    try:
        result = subprocess.run(
            [*command, "--rules", "--format=json"],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise RegistryLoadError(str(exc)) from exc
    return parse_rule_catalog(result.stdout)


def _parse_rule_list(text: str) -> frozenset[str]:
    stripped = text.strip()
    if stripped.startswith("["):
        names = json.loads(stripped)
        if not all(isinstance(n, str) for n in names):
            msg = "type-aware rule list must contain only strings"
            raise ValueError(msg)
    else:
        names = [line.strip() for line in stripped.splitlines() if line.strip()]
    if not names:
        msg = "type-aware rule list is empty"
        raise ValueError(msg)
    return frozenset(normalize_rule_name(n) for n in names)


def load_type_aware_rules(source: str | None, *, timeout: float = 60.0) -> frozenset[str]:
    """Read type-aware rule names from a URL or file; fall back to the embedded list.

    Never raises: any fetch or parse failure is logged and degrades to
    TYPE_AWARE_FALLBACK.
    """
    if not source:
        return TYPE_AWARE_FALLBACK
    try:
        if source.startswith(("http://", "https://")):
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            text = response.text
        else:
            text = Path(source).read_text(encoding="utf-8")
        rules = _parse_rule_list(text)
    except (requests.RequestException, OSError, ValueError) as exc:
        log.warning("Type-aware rule source %s unavailable (%s); using fallback list", source, exc)
        return TYPE_AWARE_FALLBACK
    log.info("Loaded %d type-aware rules from %s", len(rules), source)
    return rules
