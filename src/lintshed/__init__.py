"""lintshed — find ESLint rules that Oxlint already enforces, and what is still needed."""

from lintshed.aggregate import analyze_directory, sort_by_dependencies, suggest_directory
from lintshed.config import Settings, load_settings, resolve_type_aware
from lintshed.discovery import discover_config_files
from lintshed.report import generate_markdown_report, generate_report
from lintshed.resolver import (
    ConfigNotFoundError,
    ConfigParseError,
    CycleDetectedError,
    create_resolver,
)
from lintshed.rules import RegistryLoadError, TargetRegistry, reconcile
from lintshed.schema import AnalysisResult, ConfigClassification, SuggestionResult
from lintshed.suggest import suggest_target_config
from lintshed.target import create_target_loader

__all__ = [
    "AnalysisResult",
    "ConfigClassification",
    "ConfigNotFoundError",
    "ConfigParseError",
    "CycleDetectedError",
    "RegistryLoadError",
    "Settings",
    "SuggestionResult",
    "TargetRegistry",
    "analyze_directory",
    "create_resolver",
    "create_target_loader",
    "discover_config_files",
    "generate_markdown_report",
    "generate_report",
    "load_settings",
    "reconcile",
    "resolve_type_aware",
    "sort_by_dependencies",
    "suggest_directory",
    "suggest_target_config",
]
