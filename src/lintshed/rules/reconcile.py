# SPDX-License-Identifier: MIT
"""Reconciliation engine — classify one ESLint config against its Oxlint pair.

For every rule the source config enables, decide whether the target already
enforces it. The result is a pure function of the inputs and the shared
read-only registry.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from lintshed.rules.base import LintRule, RawRules, RuleSet
from lintshed.rules.names import plugin_scope
from lintshed.rules.registry import TargetRegistry

log = logging.getLogger(__name__)


class Outcome(StrEnum):
    COVERED = "covered"
    UNSUPPORTED = "unsupported"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Classification:
    """Per-config reconciliation result. All name sets hold canonical names."""

    removable: frozenset[str]
    inherited_removable: frozenset[str]
    redundantly_disabled: frozenset[str]
    unsupported: frozenset[str]
    plugins_to_disable: frozenset[str]
    severity_mismatches: frozenset[str]
    default_enabled_but_disabled: frozenset[str]
    total_direct_rules: int

    @property
    def to_remove_count(self) -> int:
        return len(self.removable)

    @property
    def inherited_to_disable_count(self) -> int:
        return len(self.inherited_removable)

    @property
    def redundant_off_count(self) -> int:
        return len(self.redundantly_disabled)


def _evaluated(name: str, registry: TargetRegistry, type_aware: bool) -> bool:
    """False when the target skips this rule in the current run mode."""
    return type_aware or not registry.type_aware(name)


def _classify_enabled(
    rule: LintRule,
    target_rules: RuleSet,
    registry: TargetRegistry,
    type_aware: bool,
) -> Outcome:
    if not registry.supported(rule.name):
        return Outcome.UNSUPPORTED
    if not _evaluated(rule.name, registry, type_aware):
        return Outcome.SKIPPED
    if target_rules.is_enabled(rule.name):
        return Outcome.COVERED
    # Known to the target, but its current config does not enforce it
    return Outcome.UNSUPPORTED


def _fully_covered_scopes(enabled: Iterable[str], covered: set[str]) -> frozenset[str]:
    """Plugin scopes whose every enabled rule is covered. Core rules have no scope."""
    by_scope: dict[str, set[str]] = defaultdict(set)
    for name in enabled:
        scope = plugin_scope(name)
        if scope is not None:
            by_scope[scope].add(name)
    return frozenset(scope for scope, names in by_scope.items() if names <= covered)


def reconcile(
    eslint_resolved: RuleSet,
    eslint_raw: RawRules,
    target_rules: RuleSet,
    registry: TargetRegistry,
    *,
    type_aware: bool,
) -> Classification:
    """Classify every enabled source rule as removable, inherited-removable or unsupported.

    Args:
        eslint_resolved: Full-chain rule set for the config (extends followed).
        eslint_raw: Rules declared in the config file itself.
        target_rules: Resolved rule set of the paired Oxlint config.
        registry: Target rule catalog.
        type_aware: Whether the target runs type-aware rules in this run.

    Returns:
        A Classification; removable / inherited_removable / unsupported are disjoint.
    """
    direct = eslint_raw.merged
    removable: set[str] = set()
    inherited: set[str] = set()
    unsupported: set[str] = set()
    mismatched: set[str] = set()

    # Directly defined rules: severity comes from the file itself
    candidates: list[tuple[LintRule, set[str]]] = [(r, removable) for r in direct if r.enabled]
    # Inherited rules: reachable only through extends
    candidates.extend(
        (r, inherited) for r in eslint_resolved if r.enabled and r.name not in direct.rules
    )

    for rule, bucket in candidates:
        outcome = _classify_enabled(rule, target_rules, registry, type_aware)
        log.debug("%s -> %s", rule.name, outcome)
        if outcome is Outcome.COVERED:
            bucket.add(rule.name)
            target = target_rules.get(rule.name)
            if target is not None and target.severity != rule.severity:
                mismatched.add(rule.name)
        elif outcome is Outcome.UNSUPPORTED:
            unsupported.add(rule.name)

    # Override-level "off" entries that compensate for a rule the target now owns
    redundant = {
        name
        for name in eslint_raw.override_off_names()
        if registry.supported(name)
        and _evaluated(name, registry, type_aware)
        and target_rules.is_enabled(name)
    }

    enabled_names = [r.name for r, _ in candidates]
    plugins = _fully_covered_scopes(enabled_names, removable | inherited)

    default_enabled_off = {
        rule.name
        for rule in eslint_resolved
        if not rule.enabled
        and registry.default_enabled(rule.name)
        and target_rules.is_enabled(rule.name)
    }

    return Classification(
        removable=frozenset(removable),
        inherited_removable=frozenset(inherited),
        redundantly_disabled=frozenset(redundant),
        unsupported=frozenset(unsupported),
        plugins_to_disable=plugins,
        severity_mismatches=frozenset(mismatched),
        default_enabled_but_disabled=frozenset(default_enabled_off),
        total_direct_rules=len(direct),
    )
