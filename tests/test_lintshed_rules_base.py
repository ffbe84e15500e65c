# SPDX-License-Identifier: MIT
"""Tests for lintshed.rules.base — severity parsing, rules and rule sets."""

from __future__ import annotations

import pytest

from lintshed.rules.base import (
    InvalidSeverityError,
    LintRule,
    RawRules,
    RuleSet,
    Severity,
    parse_severity,
)


class TestParseSeverity:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, Severity.OFF),
            (1, Severity.WARN),
            (2, Severity.ERROR),
            ("off", Severity.OFF),
            ("warn", Severity.WARN),
            ("error", Severity.ERROR),
            ("allow", Severity.OFF),
            ("deny", Severity.ERROR),
        ],
    )
    def test_recognized_tokens(self, value: object, expected: Severity) -> None:
        assert parse_severity(value) is expected

    @pytest.mark.parametrize("value", [3, -1, "banana", None, "OFF", 1.0, True, False, [], {}])
    def test_unrecognized_tokens_raise(self, value: object) -> None:
        with pytest.raises(InvalidSeverityError) as exc_info:
            parse_severity(value)
        assert exc_info.value.value == value

    def test_invalid_severity_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Unexpected severity"):
            parse_severity("loud")

    def test_ordering(self) -> None:
        assert Severity.OFF < Severity.WARN < Severity.ERROR

    def test_label(self) -> None:
        assert Severity.WARN.label == "warn"


class TestLintRule:
    def test_bare_severity(self) -> None:
        rule = LintRule.from_value("no-console", "warn")
        assert rule == LintRule("no-console", Severity.WARN, None)
        assert rule.enabled

    def test_severity_with_options(self) -> None:
        rule = LintRule.from_value("max-len", ["error", {"code": 100}])
        assert rule.severity is Severity.ERROR
        assert rule.config == ({"code": 100},)

    def test_single_element_list_has_no_config(self) -> None:
        rule = LintRule.from_value("curly", [2])
        assert rule.severity is Severity.ERROR
        assert rule.config is None

    def test_empty_list_raises(self) -> None:
        with pytest.raises(InvalidSeverityError):
            LintRule.from_value("curly", [])

    def test_name_is_normalized(self) -> None:
        rule = LintRule.from_value("@typescript-eslint/no-explicit-any", "error")
        assert rule.name == "typescript/no-explicit-any"

    def test_off_is_not_enabled(self) -> None:
        assert not LintRule.from_value("curly", 0).enabled


class TestRuleSet:
    def test_lookup_by_either_spelling(self) -> None:
        rules = RuleSet.from_mapping({"@typescript-eslint/no-unused-vars": "error"})
        assert "typescript/no-unused-vars" in rules
        assert "@typescript-eslint/no-unused-vars" in rules
        assert rules.is_enabled("eslint/@typescript-eslint/no-unused-vars")

    def test_enabled_names(self) -> None:
        rules = RuleSet.from_mapping({"curly": "error", "eqeqeq": "off", "no-console": 1})
        assert rules.enabled_names() == {"curly", "no-console"}
        assert rules.names() == {"curly", "eqeqeq", "no-console"}
        assert len(rules) == 3

    def test_none_mapping_is_empty(self) -> None:
        assert len(RuleSet.from_mapping(None)) == 0

    def test_invalid_severity_propagates(self) -> None:
        with pytest.raises(InvalidSeverityError):
            RuleSet.from_mapping({"curly": "sometimes"})

    def test_merged_over_child_wins(self) -> None:
        parent = RuleSet.from_mapping({"curly": "error", "eqeqeq": "warn"})
        child = RuleSet.from_mapping({"curly": "off"})
        merged = child.merged_over(parent)
        assert not merged.is_enabled("curly")
        assert merged.is_enabled("eqeqeq")

    def test_merged_over_keeps_parent_options(self) -> None:
        parent = RuleSet.from_mapping({"max-len": ["error", {"code": 80}]})
        child = RuleSet.from_mapping({"max-len": "warn"})
        rule = child.merged_over(parent).get("max-len")
        assert rule is not None
        assert rule.severity is Severity.WARN
        assert rule.config == ({"code": 80},)


class TestRawRules:
    def test_top_level_wins_over_override(self) -> None:
        raw = RawRules(
            top_level=RuleSet.from_mapping({"curly": "warn"}),
            overrides=(RuleSet.from_mapping({"curly": "off", "eqeqeq": "error"}),),
        )
        merged = raw.merged
        assert merged.get("curly").severity is Severity.WARN  # type: ignore[union-attr]
        assert merged.is_enabled("eqeqeq")

    def test_first_override_wins(self) -> None:
        raw = RawRules(
            overrides=(
                RuleSet.from_mapping({"curly": "error"}),
                RuleSet.from_mapping({"curly": "off"}),
            ),
        )
        assert raw.merged.is_enabled("curly")

    def test_override_off_names(self) -> None:
        raw = RawRules(
            top_level=RuleSet.from_mapping({"eqeqeq": "off"}),
            overrides=(RuleSet.from_mapping({"curly": "off", "no-console": "warn"}),),
        )
        assert raw.override_off_names() == {"curly"}

