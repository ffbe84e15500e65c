# SPDX-License-Identifier: MIT
"""Tests for lintshed.discovery and lintshed.aggregate — tree-wide analysis."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from lintshed.aggregate import analyze_directory, find_cyclic_configs, sort_by_dependencies
from lintshed.config import Settings
from lintshed.discovery import discover_config_files, target_config_for
from lintshed.resolver import CycleDetectedError, LocalConfigResolver
from lintshed.rules.registry import CatalogEntry, TargetRegistry
from lintshed.schema import AnalysisResult
from lintshed.target import FileTargetLoader

REGISTRY = TargetRegistry(
    [
        CatalogEntry("eslint", "no-console", "restriction"),
        CatalogEntry("eslint", "curly", "style"),
        CatalogEntry("eslint", "no-debugger", "correctness"),
        CatalogEntry("eslint", "eqeqeq", "pedantic"),
        CatalogEntry("typescript", "no-floating-promises", "correctness"),
    ],
    default_enabled_plugins=("typescript", "unicorn", "oxc"),
    type_aware_rules=["typescript/no-floating-promises"],
)


def _write(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


def _analyze(root: Path, *, type_aware: bool = True) -> AnalysisResult:
    return analyze_directory(
        root,
        type_aware=type_aware,
        settings=Settings(resolver="local"),
        registry=REGISTRY,
        resolver=LocalConfigResolver(),
        target_loader=FileTargetLoader(),
        relative_to=root,
    )


class TestDiscovery:
    def test_finds_configs_sorted(self, tmp_path: Path) -> None:
        _write(tmp_path / "b" / ".eslintrc.json", {})
        _write(tmp_path / "a" / ".eslintrc.js", "")
        _write(tmp_path / ".eslintrc", "{}")
        _write(tmp_path / "c" / "eslintrc.json", {})
        found = discover_config_files(tmp_path)
        assert found == [
            tmp_path / ".eslintrc",
            tmp_path / "a" / ".eslintrc.js",
            tmp_path / "b" / ".eslintrc.json",
        ]

    @pytest.mark.parametrize("excluded", ["node_modules", ".git", "dist", "build", ".next", "coverage"])
    def test_skips_excluded_directories(self, tmp_path: Path, excluded: str) -> None:
        _write(tmp_path / excluded / "pkg" / ".eslintrc.json", {})
        assert discover_config_files(tmp_path) == []

    def test_meaningful_rules_check(self, tmp_path: Path) -> None:
        bare = _write(tmp_path / "a" / ".eslintrc.json", {"extends": "../base.json"})
        ruled = _write(tmp_path / "b" / ".eslintrc.json", {"overrides": [{"rules": {"curly": 2}}]})
        assert not LocalConfigResolver().load(bare).has_rules()
        assert LocalConfigResolver().load(ruled).has_rules()

    def test_target_config_for(self, tmp_path: Path) -> None:
        assert target_config_for(tmp_path / ".eslintrc.js") == tmp_path / ".oxlintrc.json"


class TestSortByDependencies:
    def test_parents_first_with_sorted_siblings(self) -> None:
        root, b, a, a_child = Path("/r"), Path("/r/b"), Path("/r/a"), Path("/r/a/x")
        parents = {root: None, b: root, a: root, a_child: a}
        assert sort_by_dependencies([a_child, b, a, root], parents) == [root, a, a_child, b]

    def test_parent_outside_set_is_root(self) -> None:
        a, b = Path("/a"), Path("/b")
        assert sort_by_dependencies([b, a], {a: Path("/elsewhere"), b: None}) == [a, b]

    def test_cycle_raises(self) -> None:
        a, b = Path("/a"), Path("/b")
        with pytest.raises(CycleDetectedError):
            sort_by_dependencies([a, b], {a: b, b: a})

    def test_find_cyclic_configs(self) -> None:
        a, b, c, d = Path("/a"), Path("/b"), Path("/c"), Path("/d")
        parents = {a: b, b: a, c: a, d: None}
        assert find_cyclic_configs(parents) == {a, b, c}


class TestAnalyzeDirectory:
    def test_scenario_covered_and_unsupported(self, tmp_path: Path) -> None:
        _write(
            tmp_path / ".eslintrc.json",
            {"rules": {"no-console": "warn", "curly": "error", "no-magic-numbers": "error"}},
        )
        _write(tmp_path / ".oxlintrc.json", {"rules": {"no-console": "error", "curly": "error"}})
        result = _analyze(tmp_path)
        assert len(result.results) == 1
        entry = result.results[0]
        assert entry.eslint_config_path == ".eslintrc.json"
        assert entry.target_config_path == ".oxlintrc.json"
        assert entry.rules_to_remove == ["curly", "no-console"]
        assert entry.unsupported_rules == ["no-magic-numbers"]
        assert entry.summary.total_direct_rules == 3
        assert entry.summary.to_remove == 2
        assert result.unsupported_rules_union == ["no-magic-numbers"]
        assert result.configs_with_target == [".oxlintrc.json"]

    def test_scenario_inherited_rule(self, tmp_path: Path) -> None:
        _write(tmp_path / ".eslintrc.json", {"rules": {"no-debugger": "error"}})
        _write(tmp_path / ".oxlintrc.json", {"rules": {"no-debugger": "error"}})
        _write(
            tmp_path / "app" / ".eslintrc.json",
            {"extends": "../.eslintrc.json", "rules": {"eqeqeq": "error"}},
        )
        _write(tmp_path / "app" / ".oxlintrc.json", {"rules": {"eqeqeq": "warn"}})
        result = _analyze(tmp_path)
        by_path = {r.eslint_config_path: r for r in result.results}
        child = by_path["app/.eslintrc.json"]
        assert child.inherited_rules_to_disable == ["no-debugger"]
        assert child.rules_to_remove == ["eqeqeq"]
        assert child.severity_mismatches == ["eqeqeq"]
        assert [r.eslint_config_path for r in result.results] == [
            ".eslintrc.json",
            "app/.eslintrc.json",
        ]

    def test_scenario_type_aware(self, tmp_path: Path) -> None:
        _write(
            tmp_path / ".eslintrc.json",
            {"rules": {"@typescript-eslint/no-floating-promises": "error"}},
        )
        _write(tmp_path / ".oxlintrc.json", {"rules": {"typescript/no-floating-promises": "error"}})
        on = _analyze(tmp_path, type_aware=True).results[0]
        off = _analyze(tmp_path, type_aware=False).results[0]
        assert on.rules_to_remove == ["typescript/no-floating-promises"]
        assert off.rules_to_remove == []
        assert off.unsupported_rules == []

    def test_config_without_target(self, tmp_path: Path) -> None:
        _write(tmp_path / "tools" / ".eslintrc.json", {"rules": {"curly": "error"}})
        result = _analyze(tmp_path)
        assert result.results == []
        assert result.configs_without_target == ["tools/.eslintrc.json"]

    def test_configs_without_rules_are_skipped(self, tmp_path: Path) -> None:
        _write(tmp_path / ".eslintrc.json", {"extends": "airbnb"})
        _write(tmp_path / ".oxlintrc.json", {"rules": {"curly": "error"}})
        result = _analyze(tmp_path)
        assert result.results == []
        assert result.configs_with_target == []

    def test_broken_config_is_a_warning(self, tmp_path: Path) -> None:
        _write(tmp_path / "broken" / ".eslintrc.json", "{not json")
        _write(tmp_path / "ok" / ".eslintrc.json", {"rules": {"curly": "error"}})
        _write(tmp_path / "ok" / ".oxlintrc.json", {"rules": {"curly": "error"}})
        result = _analyze(tmp_path)
        assert [r.eslint_config_path for r in result.results] == ["ok/.eslintrc.json"]
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("Could not parse broken/.eslintrc.json")

    def test_invalid_severity_skips_file(self, tmp_path: Path) -> None:
        _write(tmp_path / ".eslintrc.json", {"rules": {"curly": "sometimes"}})
        _write(tmp_path / ".oxlintrc.json", {"rules": {"curly": "error"}})
        result = _analyze(tmp_path)
        assert result.results == []
        assert result.warnings == [
            "Skipping .eslintrc.json: Unexpected severity: 'sometimes'"
        ]

    def test_broken_target_skips_file(self, tmp_path: Path) -> None:
        _write(tmp_path / ".eslintrc.json", {"rules": {"curly": "error"}})
        _write(tmp_path / ".oxlintrc.json", "[]")
        result = _analyze(tmp_path)
        assert result.results == []
        assert result.configs_with_target == []
        assert result.warnings[0].startswith("Skipping .eslintrc.json")

    def test_extends_cycle_is_skipped(self, tmp_path: Path) -> None:
        _write(
            tmp_path / "a" / ".eslintrc.json",
            {"extends": "../b/.eslintrc.json", "rules": {"curly": "error"}},
        )
        _write(
            tmp_path / "b" / ".eslintrc.json",
            {"extends": "../a/.eslintrc.json", "rules": {"curly": "error"}},
        )
        _write(tmp_path / "c" / ".eslintrc.json", {"rules": {"curly": "error"}})
        _write(tmp_path / "c" / ".oxlintrc.json", {"rules": {"curly": "error"}})
        result = _analyze(tmp_path)
        assert [r.eslint_config_path for r in result.results] == ["c/.eslintrc.json"]
        assert result.warnings == [
            "Extends cycle involving a/.eslintrc.json; skipped",
            "Extends cycle involving b/.eslintrc.json; skipped",
        ]

    def test_empty_tree(self, tmp_path: Path) -> None:
        assert _analyze(tmp_path) == AnalysisResult()
