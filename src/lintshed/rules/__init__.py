# SPDX-License-Identifier: MIT
"""Rule model, name mapping, target registry and the reconciliation engine."""

from lintshed.rules.base import (
    InvalidSeverityError,
    LintRule,
    RawRules,
    RuleSet,
    Severity,
    parse_severity,
)
from lintshed.rules.names import bare_rule_name, normalize_rule_name, plugin_scope, to_eslint_name
from lintshed.rules.reconcile import Classification, reconcile
from lintshed.rules.registry import CatalogEntry, RegistryLoadError, TargetRegistry

__all__ = [
    "CatalogEntry",
    "Classification",
    "InvalidSeverityError",
    "LintRule",
    "RawRules",
    "RegistryLoadError",
    "RuleSet",
    "Severity",
    "TargetRegistry",
    "bare_rule_name",
    "normalize_rule_name",
    "parse_severity",
    "plugin_scope",
    "reconcile",
    "to_eslint_name",
]
