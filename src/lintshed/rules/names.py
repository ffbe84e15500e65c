# SPDX-License-Identifier: MIT
"""Rule name mapping between the ESLint and Oxlint naming conventions."""

from __future__ import annotations

# ESLint scoped-plugin prefix -> Oxlint plugin prefix
_SCOPED_PLUGIN_PREFIXES: dict[str, str] = {
    "@typescript-eslint/": "typescript/",
}
# Explicit core-rule namespace, dropped entirely
_CORE_PREFIX = "eslint/"


def _rewrite_prefix(name: str) -> str:
    for eslint_prefix, oxlint_prefix in _SCOPED_PLUGIN_PREFIXES.items():
        if name.startswith(eslint_prefix):
            return oxlint_prefix + name[len(eslint_prefix) :]
    if name.startswith(_CORE_PREFIX):
        return name[len(_CORE_PREFIX) :]
    return name


def normalize_rule_name(name: str) -> str:
    """Return the canonical (Oxlint-style) form of a rule name.

    Rewrites are applied until a fixed point so that stacked prefixes such as
    ``eslint/@typescript-eslint/x`` collapse fully; this keeps the function
    idempotent. Every rewrite shortens the name, so the loop terminates.
    """
    while True:
        rewritten = _rewrite_prefix(name)
        if rewritten == name:
            return name
        name = rewritten


def bare_rule_name(name: str) -> str:
    """Drop the ``scope/`` prefix for scope-insensitive catalog lookups."""
    canonical = normalize_rule_name(name)
    _, sep, rest = canonical.partition("/")
    return rest if sep else canonical


def plugin_scope(name: str) -> str | None:
    """Portion of the canonical name before the first ``/``; None for core rules."""
    scope, sep, _ = normalize_rule_name(name).partition("/")
    return scope if sep else None


def to_eslint_name(name: str) -> str:
    """Inverse of the scoped-plugin rewrite, for display only."""
    for eslint_prefix, oxlint_prefix in _SCOPED_PLUGIN_PREFIXES.items():
        if name.startswith(oxlint_prefix):
            return eslint_prefix + name[len(oxlint_prefix) :]
    return name


def display_scope(scope: str) -> str:
    """Render a canonical plugin scope the way ESLint users write it."""
    return to_eslint_name(f"{scope}/").rstrip("/")
