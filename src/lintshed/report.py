# SPDX-License-Identifier: MIT
"""Report rendering — plain-text removal suggestions and a Markdown migration report.

A rule suggested for a parent directory's config is not repeated for configs
in its subdirectories, and rules of a plugin that can be disabled wholesale
are not listed one by one.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import PurePosixPath

import navi_sanitize

from lintshed.rules.names import display_scope, plugin_scope, to_eslint_name
from lintshed.schema import AnalysisResult, ConfigClassification

NO_RESULTS = "No configurations analyzed.\n"
NOTHING_TO_REMOVE = "✓ No ESLint rules to remove - nothing is duplicated with Oxlint.\n"


@dataclass(frozen=True)
class FileSuggestions:
    """Suggestions for one config after ancestor and plugin filtering (display names)."""

    path: str
    removable: list[str]
    inherited: list[str]
    redundant_off: list[str]

    @property
    def empty(self) -> bool:
        return not (self.removable or self.inherited or self.redundant_off)


def _depth_order(results: Iterable[ConfigClassification]) -> list[ConfigClassification]:
    return sorted(
        results,
        key=lambda r: (len(PurePosixPath(r.eslint_config_path).parts), r.eslint_config_path),
    )


def _display(names: Iterable[str]) -> list[str]:
    return sorted(to_eslint_name(n) for n in names)


def disabled_plugins(analysis: AnalysisResult) -> set[str]:
    return {scope for r in analysis.results for scope in r.plugins_to_disable}


def deduplicate_suggestions(analysis: AnalysisResult) -> list[FileSuggestions]:
    """Filter each config's suggestions against what its ancestor directories already got.

    Configs are visited shallowest first; every directory accumulates the
    names suggested there so that descendants can skip them.
    """
    plugins = disabled_plugins(analysis)
    claimed: dict[PurePosixPath, set[str]] = defaultdict(set)
    suggestions: list[FileSuggestions] = []

    for result in _depth_order(analysis.results):
        directory = PurePosixPath(result.eslint_config_path).parent
        seen: set[str] = set()
        for ancestor in (directory, *directory.parents):
            seen |= claimed.get(ancestor, set())

        def _keep(name: str, seen: set[str] = seen) -> bool:
            return plugin_scope(name) not in plugins and name not in seen

        removable = [n for n in result.rules_to_remove if _keep(n)]
        inherited = [n for n in result.inherited_rules_to_disable if _keep(n)]
        redundant = [n for n in result.redundant_off_rules if plugin_scope(n) not in plugins]
        claimed[directory].update(removable, inherited)

        suggestions.append(
            FileSuggestions(
                path=result.eslint_config_path,
                removable=_display(removable),
                inherited=_display(inherited),
                redundant_off=_display(redundant),
            )
        )
    return suggestions


def _rule_section(
    header: str, groups: Sequence[tuple[str, list[str]]], suffix: str = ""
) -> str:
    blocks = []
    for path, names in groups:
        lines = "".join(f'  "{name}": "off",{suffix}\n' for name in names)
        blocks.append(f"{path}\n{lines}")
    return f"{header}\n\n" + "\n".join(blocks)


def generate_report(analysis: AnalysisResult) -> str:
    """Render a deterministic plain-text report of the analysis."""
    if not analysis.results:
        return NO_RESULTS

    suggestions = deduplicate_suggestions(analysis)
    plugins = sorted(display_scope(p) for p in disabled_plugins(analysis))

    removable = [(s.path, s.removable) for s in suggestions if s.removable]
    inherited = [(s.path, s.inherited) for s in suggestions if s.inherited]
    redundant = [(s.path, s.redundant_off) for s in suggestions if s.redundant_off]

    sections: list[str] = []
    if removable:
        total = sum(len(names) for _, names in removable)
        sections.append(
            _rule_section(
                f"Found {total} ESLint rule(s) to remove across {len(removable)} config(s):",
                removable,
            )
        )
    if inherited:
        total = sum(len(names) for _, names in inherited)
        sections.append(
            _rule_section(
                f"Found {total} inherited ESLint rule(s) to disable "
                "(from extends, now handled by Oxlint):",
                inherited,
            )
        )
    if redundant:
        total = sum(len(names) for _, names in redundant)
        sections.append(
            _rule_section(
                f'Found {total} redundant "off" override(s) that can be removed '
                "(Oxlint already enforces these rules):",
                redundant,
                suffix="  // can be removed",
            )
        )

    still_needed = ""
    if analysis.unsupported_rules_union:
        still_needed = "ESLint rules still needed (not covered by current Oxlint config):\n" + "".join(
            f"  {name}\n" for name in _display(analysis.unsupported_rules_union)
        )

    if not plugins and not sections:
        return NOTHING_TO_REMOVE + (f"\n{still_needed}" if still_needed else "")

    report = ""
    if plugins:
        report += "Plugins that can be fully disabled (all rules handled by Oxlint):\n"
        report += "".join(f"  {p}\n" for p in plugins) + "\n"
    report += "\n\n".join(sections)
    if still_needed:
        report += ("\n\n" if sections else "") + still_needed
    return report


# --- Markdown migration report ---


def _md(text: str) -> str:
    """Sanitize config-derived text for Markdown: invisible chars, bidi, pipes, backticks."""
    return navi_sanitize.clean(text).replace("|", "\\|").replace("`", "'")


def _md_list(title: str, names: Sequence[str]) -> str:
    items = "".join(f"- `{_md(name)}`\n" for name in names)
    return f"### {title} ({len(names)})\n\n{items}\n"


def generate_markdown_report(
    analysis: AnalysisResult, *, generated_at: datetime | None = None
) -> str:
    """Render the migration report as Markdown with a single generation timestamp.

    Everything except the ``**Generated:**`` line is deterministic; callers
    snapshotting the output should pass ``generated_at`` or normalize that line.
    """
    stamp = (generated_at or datetime.now(UTC)).isoformat()
    content = "# ESLint to Oxlint Migration Report\n\n"
    content += f"**Generated:** {stamp}\n\n"

    if not analysis.results:
        return content + NO_RESULTS

    suggestions = {s.path: s for s in deduplicate_suggestions(analysis)}
    ordered = _depth_order(analysis.results)
    plugins = sorted(display_scope(p) for p in disabled_plugins(analysis))

    total_remove = sum(len(s.removable) for s in suggestions.values())
    total_inherited = sum(len(s.inherited) for s in suggestions.values())
    total_redundant = sum(len(s.redundant_off) for s in suggestions.values())

    content += "## Overview\n\n"
    content += f"Analyzed {len(analysis.results)} configuration file(s):\n"
    content += f"- **{total_remove} rule(s)** can be removed from ESLint (Oxlint enforces them)\n"
    content += f"- **{total_inherited} inherited rule(s)** can be disabled locally\n"
    content += f"- **{total_redundant} redundant override(s)** can be removed\n"
    content += f"- **{len(analysis.unsupported_rules_union)} rule(s)** are still needed in ESLint\n\n"

    if plugins:
        content += "## Plugins to Disable\n\n"
        content += "".join(f"- `{_md(p)}`\n" for p in plugins) + "\n"

    content += "## Summary by Configuration\n\n"
    content += "| Configuration | Remove | Inherited | Redundant Off | Still Needed |\n"
    content += "|---------------|--------|-----------|---------------|--------------|\n"
    for result in ordered:
        s = suggestions[result.eslint_config_path]
        content += (
            f"| `{_md(result.eslint_config_path)}` | {len(s.removable)} | {len(s.inherited)} "
            f"| {len(s.redundant_off)} | {len(result.unsupported_rules)} |\n"
        )
    content += "\n"

    for result in ordered:
        s = suggestions[result.eslint_config_path]
        mismatches = _display(result.severity_mismatches)
        default_off = _display(result.default_enabled_but_disabled)
        if s.empty and not mismatches and not default_off:
            continue
        content += f"## {_md(result.eslint_config_path)}\n\n"
        if s.removable:
            content += _md_list("Rules to Remove", s.removable)
        if s.inherited:
            content += _md_list("Inherited Rules to Disable", s.inherited)
        if s.redundant_off:
            content += _md_list("Redundant Override Disables", s.redundant_off)
        if mismatches:
            content += "Severity differs between ESLint and Oxlint; Oxlint's severity will apply.\n\n"
            content += _md_list("Severity Differences", mismatches)
        if default_off:
            content += "Disabled in ESLint, but enabled by default in Oxlint.\n\n"
            content += _md_list("Disabled but Enabled by Oxlint Default", default_off)

    if analysis.configs_without_target:
        content += "## Configurations Without Oxlint Config\n\n"
        content += "".join(f"- `{_md(p)}`\n" for p in analysis.configs_without_target) + "\n"

    if analysis.warnings:
        content += "## Warnings\n\n"
        content += "".join(f"- {_md(w)}\n" for w in analysis.warnings) + "\n"

    content += "## Next Steps\n\n"
    content += "1. **Remove duplicates**: delete the listed rules from the ESLint configs\n"
    content += "2. **Disable inherited rules**: set the inherited rules to `\"off\"` locally\n"
    content += "3. **Test changes**: run both ESLint and Oxlint after the edits\n\n"
    content += "---\n"
    content += "*Generated by lintshed*\n"
    return content
