# SPDX-License-Identifier: MIT
"""Output models — per-config classifications, suggested Oxlint configs and tree-wide results."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from lintshed.rules.reconcile import Classification


class ClassificationSummary(BaseModel):
    total_direct_rules: int
    to_remove: int
    inherited_to_disable: int
    redundant_off: int


class ConfigClassification(BaseModel):
    """Reconciliation result for one ESLint/Oxlint config pair.

    Rule names are canonical (``typescript/...``); the report converts them
    back to ESLint spelling for display.
    """

    eslint_config_path: str
    target_config_path: str
    rules_to_remove: list[str]
    inherited_rules_to_disable: list[str]
    redundant_off_rules: list[str]
    unsupported_rules: list[str]
    plugins_to_disable: list[str]
    severity_mismatches: list[str] = Field(default_factory=list)
    default_enabled_but_disabled: list[str] = Field(default_factory=list)
    summary: ClassificationSummary

    @classmethod
    def from_classification(
        cls,
        classification: Classification,
        *,
        eslint_config_path: str,
        target_config_path: str,
    ) -> ConfigClassification:
        return cls(
            eslint_config_path=eslint_config_path,
            target_config_path=target_config_path,
            rules_to_remove=sorted(classification.removable),
            inherited_rules_to_disable=sorted(classification.inherited_removable),
            redundant_off_rules=sorted(classification.redundantly_disabled),
            unsupported_rules=sorted(classification.unsupported),
            plugins_to_disable=sorted(classification.plugins_to_disable),
            severity_mismatches=sorted(classification.severity_mismatches),
            default_enabled_but_disabled=sorted(classification.default_enabled_but_disabled),
            summary=ClassificationSummary(
                total_direct_rules=classification.total_direct_rules,
                to_remove=classification.to_remove_count,
                inherited_to_disable=classification.inherited_to_disable_count,
                redundant_off=classification.redundant_off_count,
            ),
        )


class AnalysisResult(BaseModel):
    """Tree-wide result of analyze_directory()."""

    results: list[ConfigClassification] = Field(default_factory=list)
    configs_with_target: list[str] = Field(default_factory=list)
    configs_without_target: list[str] = Field(default_factory=list)
    unsupported_rules_union: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class SuggestionAction(StrEnum):
    """What a suggestion means for the ``.oxlintrc.json`` on disk."""

    WRITE = "write"
    UNCHANGED = "unchanged"
    REMOVE = "remove"
    NOT_NEEDED = "not_needed"


class TargetSuggestion(BaseModel):
    eslint_config_path: str
    target_config_path: str
    action: SuggestionAction
    config: dict[str, Any]


class SuggestionResult(BaseModel):
    """Tree-wide result of suggest_directory(), parents before children."""

    suggestions: list[TargetSuggestion] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
