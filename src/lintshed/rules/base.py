# SPDX-License-Identifier: MIT
"""Rule severity, rule occurrence dataclass, and rule sets for the reconciler."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from lintshed.rules.names import normalize_rule_name

_STRING_SEVERITIES: dict[str, int] = {
    "off": 0,
    "warn": 1,
    "error": 2,
    "allow": 0,
    "deny": 2,
}


class InvalidSeverityError(ValueError):
    """Raised when a severity token is outside the recognized set."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unexpected severity: {value!r}")


class Severity(IntEnum):
    """Three-valued severity shared by both linters."""

    OFF = 0
    WARN = 1
    ERROR = 2

    @property
    def label(self) -> str:
        return self.name.lower()


def parse_severity(value: object) -> Severity:
    """Normalize a numeric code, string token, or allow/deny token to a Severity.

    Raises:
        InvalidSeverityError: For anything else (including bools and floats).
    """
    if isinstance(value, bool):
        raise InvalidSeverityError(value)
    if isinstance(value, int):
        if value in (0, 1, 2):
            return Severity(value)
        raise InvalidSeverityError(value)
    if isinstance(value, str) and value in _STRING_SEVERITIES:
        return Severity(_STRING_SEVERITIES[value])
    raise InvalidSeverityError(value)


@dataclass(frozen=True)
class LintRule:
    """One rule's configuration at a point in the inheritance chain."""

    name: str
    severity: Severity
    config: tuple[Any, ...] | None = None

    @classmethod
    def from_value(cls, name: str, value: Any) -> LintRule:
        """Build a rule from either wire shape: ``severity`` or ``[severity, *options]``."""
        if isinstance(value, (list, tuple)):
            if not value:
                raise InvalidSeverityError(value)
            options = tuple(value[1:])
            return cls(
                name=normalize_rule_name(name),
                severity=parse_severity(value[0]),
                config=options or None,
            )
        return cls(name=normalize_rule_name(name), severity=parse_severity(value))

    @property
    def enabled(self) -> bool:
        return self.severity is not Severity.OFF


@dataclass(frozen=True)
class RuleSet:
    """Mapping of canonical rule name to LintRule."""

    rules: Mapping[str, LintRule] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> RuleSet:
        """Parse a ``{name: value}`` block. Later aliases of the same rule win."""
        rules: dict[str, LintRule] = {}
        for name, value in (raw or {}).items():
            rule = LintRule.from_value(name, value)
            rules[rule.name] = rule
        return cls(rules)

    def get(self, name: str) -> LintRule | None:
        return self.rules.get(normalize_rule_name(name))

    def is_enabled(self, name: str) -> bool:
        rule = self.get(name)
        return rule is not None and rule.enabled

    def enabled_names(self) -> set[str]:
        return {name for name, rule in self.rules.items() if rule.enabled}

    def names(self) -> set[str]:
        return set(self.rules)

    def merged_over(self, parent: RuleSet) -> RuleSet:
        """Return ``parent`` overlaid with this set; options survive a severity-only child."""
        merged = dict(parent.rules)
        for name, rule in self.rules.items():
            previous = merged.get(name)
            if rule.config is None and previous is not None and previous.config is not None:
                rule = LintRule(name=name, severity=rule.severity, config=previous.config)
            merged[name] = rule
        return RuleSet(merged)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_rule_name(name) in self.rules

    def __iter__(self) -> Iterator[LintRule]:
        return iter(self.rules.values())

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class RawRules:
    """Rules declared directly in one config file, split by block.

    ``top_level`` is the file's own ``rules`` block; ``overrides`` holds one
    RuleSet per override block, in declaration order.
    """

    top_level: RuleSet = field(default_factory=RuleSet)
    overrides: tuple[RuleSet, ...] = ()

    @property
    def merged(self) -> RuleSet:
        """Per-name view; the top-level value wins, then the first override declaring it."""
        rules: dict[str, LintRule] = {}
        for block in self.overrides:
            for rule in block:
                rules.setdefault(rule.name, rule)
        rules.update(self.top_level.rules)
        return RuleSet(rules)

    def override_off_names(self) -> set[str]:
        """Names explicitly set to off inside any override block."""
        return {rule.name for block in self.overrides for rule in block if not rule.enabled}
