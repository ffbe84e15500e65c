# SPDX-License-Identifier: MIT
"""Suggested Oxlint config — the ``.oxlintrc.json`` that carries an ESLint config's rules over.

Pure functions: no file access. The aggregator decides which parent config a
suggestion extends and compares the result with what is on disk.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from lintshed.config import DEFAULT_ENABLED_PLUGINS
from lintshed.resolver import EslintConfig
from lintshed.rules.base import LintRule, RuleSet, Severity
from lintshed.rules.names import bare_rule_name, normalize_rule_name, plugin_scope
from lintshed.rules.registry import TargetRegistry
from lintshed.target import TARGET_CONFIG_NAME, OxlintConfig

# ESLint plugin scopes whose rules Oxlint ships under another plugin
_PLUGIN_ALIASES: dict[str, str] = {"react-hooks": "react"}


def target_plugin(name: str) -> str | None:
    """Oxlint plugin providing a rule; None for core rules."""
    scope = plugin_scope(name)
    if scope is None:
        return None
    return _PLUGIN_ALIASES.get(scope, scope)


def target_rule_name(name: str, registry: TargetRegistry) -> str:
    """Canonical name, with typescript-eslint extension rules mapped to the core rule Oxlint runs."""
    canonical = normalize_rule_name(name)
    if plugin_scope(canonical) == "typescript" and registry.supported(bare_rule_name(canonical)):
        return bare_rule_name(canonical)
    return canonical


def prefer_typescript_variants(rules: RuleSet, registry: TargetRegistry) -> RuleSet:
    """Rename extension rules to their core name; the extension wins over a configured base rule."""
    preferred: dict[str, LintRule] = {}
    for rule in rules:
        name = target_rule_name(rule.name, registry)
        if name != rule.name:
            preferred[name] = LintRule(name=name, severity=rule.severity, config=rule.config)
        else:
            preferred.setdefault(name, rule)
    return RuleSet(preferred)


def rule_value(rule: LintRule) -> str | list[Any]:
    """Oxlint wire form: ``"severity"`` or ``["severity", *options]``."""
    if rule.config:
        return [rule.severity.label, *rule.config]
    return rule.severity.label


def extends_entry(config_path: Path, parent_config_path: Path) -> str:
    """``extends`` value pointing from one config's directory at its parent's Oxlint config."""
    relative = Path(
        os.path.relpath(parent_config_path.parent / TARGET_CONFIG_NAME, config_path.parent)
    ).as_posix()
    return relative if relative.startswith(".") else f"./{relative}"


def _declared_names(raw: EslintConfig) -> Iterator[str]:
    yield from raw.rules
    for override in raw.overrides:
        yield from override.rules


def _patterns(value: str | list[str]) -> list[str]:
    return [value] if isinstance(value, str) else list(value)


def _redundant_with_default(rule: LintRule, registry: TargetRegistry) -> bool:
    if not registry.default_enabled(rule.name):
        # Oxlint would not run it anyway
        return not rule.enabled
    # Core rule Oxlint already runs at error with default options
    return (
        rule.severity is Severity.ERROR
        and not rule.config
        and plugin_scope(rule.name) is None
    )


def suggest_target_config(
    resolved: RuleSet,
    raw: EslintConfig,
    registry: TargetRegistry,
    parent_target: OxlintConfig | None = None,
    *,
    extends: str | None = None,
    default_plugins: Sequence[str] = DEFAULT_ENABLED_PLUGINS,
) -> dict[str, Any]:
    """Build ``.oxlintrc.json`` contents equivalent to an ESLint config's supported rules.

    Args:
        resolved: Full-chain rules of the ESLint config.
        raw: The ESLint config file itself (overrides, ignore patterns, declared names).
        registry: Target rule catalog.
        parent_target: Oxlint config of the ESLint parent, when there is one. Only
            rules declared in ``raw`` are then considered, and rules whose value
            matches the parent's are left to inheritance.
        extends: ``extends`` entry pointing at ``parent_target``.
        default_plugins: Plugins a root config starts with.

    Returns:
        A JSON-ready dict with ``plugins``, ``rules``, ``ignorePatterns`` and, when
        present, ``extends`` and ``overrides``.
    """
    candidates = [
        r for r in prefer_typescript_variants(resolved, registry) if registry.supported(r.name)
    ]
    parent_rules: dict[str, Any] = {}
    parent_plugins: set[str] = set()
    if parent_target is not None:
        declared = {target_rule_name(n, registry) for n in _declared_names(raw)}
        candidates = [r for r in candidates if r.name in declared]
        parent_rules = {
            target_rule_name(name, registry): rule_value(LintRule.from_value(name, value))
            for name, value in parent_target.rules.items()
        }
        parent_plugins = set(parent_target.plugins or [])

    plugins: list[str] = [] if parent_target is not None else list(default_plugins)
    rules: dict[str, Any] = {}

    def _use_plugin(name: str) -> None:
        plugin = target_plugin(name)
        if plugin is not None and plugin not in plugins and plugin not in parent_plugins:
            plugins.append(plugin)

    for rule in sorted(candidates, key=lambda r: r.name):
        value = rule_value(rule)
        if rule.name in parent_rules and parent_rules[rule.name] == value:
            continue
        if _redundant_with_default(rule, registry):
            continue
        rules[rule.name] = value
        _use_plugin(rule.name)

    overrides: list[dict[str, Any]] = []
    for override in raw.overrides:
        parsed = [LintRule.from_value(name, value) for name, value in override.rules.items()]
        override_rules: dict[str, Any] = {}
        for rule in sorted(parsed, key=lambda r: target_rule_name(r.name, registry)):
            name = target_rule_name(rule.name, registry)
            if not registry.supported(name):
                continue
            value = rule_value(rule)
            # Same plain enabled value as the top level adds nothing for these files
            if rules.get(name) == value and rule.enabled and not rule.config:
                continue
            override_rules[name] = value
            _use_plugin(name)
        if override_rules:
            entry: dict[str, Any] = {"files": override.files}
            if override.excluded_files:
                entry["excludedFiles"] = override.excluded_files
            entry["rules"] = override_rules
            overrides.append(entry)

    suggested: dict[str, Any] = {}
    if parent_target is not None and extends:
        suggested["extends"] = extends
    suggested["plugins"] = sorted(plugins)
    suggested["rules"] = rules
    suggested["ignorePatterns"] = [] if parent_target is not None else _patterns(raw.ignore_patterns)
    if overrides:
        suggested["overrides"] = overrides
    return suggested


def target_configs_equal(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    """Same plugins and ignore patterns in any order, same rules and overrides."""
    return (
        sorted(first.get("plugins") or []) == sorted(second.get("plugins") or [])
        and (first.get("rules") or {}) == (second.get("rules") or {})
        and sorted(_patterns(first.get("ignorePatterns") or []))
        == sorted(_patterns(second.get("ignorePatterns") or []))
        and (first.get("overrides") or []) == (second.get("overrides") or [])
    )


def is_redundant_target_config(config: Mapping[str, Any]) -> bool:
    """A suggestion without rules has nothing to add over its parent or the defaults."""
    return not config.get("rules")
