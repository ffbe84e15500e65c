# SPDX-License-Identifier: MIT
"""Directory aggregator — pair, order, reconcile and merge every config in a tree."""

from __future__ import annotations

import logging
import os
from collections import defaultdict
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from lintshed.config import Settings, load_settings
from lintshed.discovery import discover_config_files, target_config_for
from lintshed.resolver import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigResolver,
    CycleDetectedError,
    EslintConfig,
    create_resolver,
    extends_path,
)
from lintshed.rules.base import InvalidSeverityError
from lintshed.rules.reconcile import reconcile
from lintshed.rules.registry import TargetRegistry
from lintshed.schema import (
    AnalysisResult,
    ConfigClassification,
    SuggestionAction,
    SuggestionResult,
    TargetSuggestion,
)
from lintshed.suggest import (
    extends_entry,
    is_redundant_target_config,
    suggest_target_config,
    target_configs_equal,
)
from lintshed.target import (
    OxlintConfig,
    TargetLoader,
    create_target_loader,
    parse_oxlint_config,
)

log = logging.getLogger(__name__)

# Failures that abort one file but never the run
_PER_FILE_ERRORS = (ConfigNotFoundError, ConfigParseError, CycleDetectedError, InvalidSeverityError)


def find_cyclic_configs(parents: Mapping[Path, Path | None]) -> set[Path]:
    """Configs on an extends cycle or descending from one.

    Each config has at most one parent, so following parent links from any
    start either leaves the known set or revisits a node.
    """
    affected: set[Path] = set()
    for start in parents:
        seen: list[Path] = []
        node: Path | None = start
        while node is not None and node in parents:
            if node in affected or node in seen:
                affected.update(seen)
                break
            seen.append(node)
            node = parents[node]
    return affected


def sort_by_dependencies(
    configs: Sequence[Path], parents: Mapping[Path, Path | None]
) -> list[Path]:
    """Order configs parents-first: depth-first from roots, siblings sorted.

    Raises:
        CycleDetectedError: If some configs are unreachable from any root.
    """
    known = set(configs)
    children: dict[Path, list[Path]] = defaultdict(list)
    for config in configs:
        parent = parents.get(config)
        if parent in known and parent != config:
            children[parent].append(config)

    roots = [c for c in sorted(known, key=str) if parents.get(c) not in known]
    ordered: list[Path] = []
    processed: set[Path] = set()
    for root in roots:
        stack = [root]
        while stack:
            node = stack.pop()
            if node in processed:
                continue
            processed.add(node)
            ordered.append(node)
            stack.extend(sorted(children[node], key=str, reverse=True))

    if len(ordered) < len(known):
        raise CycleDetectedError(sorted(known - processed, key=str))
    return ordered


def _relative(path: Path, base: Path) -> str:
    return Path(os.path.relpath(path, base)).as_posix()


def _load_registry(root: Path, settings: Settings) -> TargetRegistry:
    return TargetRegistry.load(
        root,
        command=settings.oxlint_command,
        default_enabled_plugins=settings.default_enabled_plugins,
        type_aware_source=settings.type_aware_source,
        timeout=settings.timeout,
    )


def _create_resolver(settings: Settings) -> ConfigResolver:
    return create_resolver(
        settings.resolver,
        eslint_command=settings.eslint_command,
        node_command=settings.node_command,
        timeout=settings.timeout,
    )


def _ordered_configs(
    root: Path,
    resolver: ConfigResolver,
    base: Path,
    warn: Callable[[str], None],
) -> tuple[list[Path], dict[Path, Path | None], dict[Path, EslintConfig]]:
    """Discover configs with rules of their own, parents first, extends cycles dropped."""
    discovered = discover_config_files(root)
    log.info("Found %d ESLint config files", len(discovered))

    parents: dict[Path, Path | None] = {}
    loaded: dict[Path, EslintConfig] = {}
    for path in discovered:
        try:
            config = resolver.load(path)
        except _PER_FILE_ERRORS as exc:
            warn(f"Could not parse {_relative(path, base)}: {exc}")
            continue
        if not config.has_rules():
            log.info("Skipping %s: only extends/parserOptions", _relative(path, base))
            continue
        parents[path] = extends_path(config, path)
        loaded[path] = config
    log.info("%d configs have meaningful rules/overrides", len(parents))

    cyclic = find_cyclic_configs(parents)
    for path in sorted(cyclic, key=str):
        warn(f"Extends cycle involving {_relative(path, base)}; skipped")
    ordered = sort_by_dependencies([p for p in parents if p not in cyclic], parents)
    return ordered, parents, loaded


def analyze_directory(
    root: Path | str,
    *,
    type_aware: bool,
    settings: Settings | None = None,
    registry: TargetRegistry | None = None,
    resolver: ConfigResolver | None = None,
    target_loader: TargetLoader | None = None,
    relative_to: Path | None = None,
) -> AnalysisResult:
    """Reconcile every ESLint config under ``root`` against its sibling Oxlint config.

    Args:
        root: Directory to search.
        type_aware: Whether the target runs type-aware rules.
        settings: External commands and sources (default: from the environment).
        registry: Prebuilt target registry (default: loaded via the oxlint CLI).
        resolver: ESLint config backend (default: per ``settings.resolver``).
        target_loader: Oxlint config backend (default: per ``settings.resolver``).
        relative_to: Base for reported paths (default: cwd).

    Raises:
        RegistryLoadError: If the target rule catalog cannot be loaded.
    """
    settings = settings or load_settings()
    root = Path(os.path.abspath(root))
    base = relative_to or Path.cwd()

    if registry is None:
        registry = _load_registry(root, settings)
    if resolver is None:
        resolver = _create_resolver(settings)
    if target_loader is None:
        target_loader = create_target_loader(
            settings.resolver, oxlint_command=settings.oxlint_command, timeout=settings.timeout
        )

    result = AnalysisResult()

    def _warn(message: str) -> None:
        log.warning(message)
        result.warnings.append(message)

    ordered, _, _ = _ordered_configs(root, resolver, base, _warn)

    for eslint_path in ordered:
        target_path = target_config_for(eslint_path)
        if not target_path.is_file():
            result.configs_without_target.append(_relative(eslint_path, base))
            continue
        try:
            resolved = resolver.resolve(eslint_path)
            target_rules = target_loader.load(target_path, resolved.extends_from)
        except _PER_FILE_ERRORS as exc:
            _warn(f"Skipping {_relative(eslint_path, base)}: {exc}")
            continue

        classification = reconcile(
            resolved.resolved,
            resolved.raw,
            target_rules,
            registry,
            type_aware=type_aware,
        )
        result.configs_with_target.append(_relative(target_path, base))
        result.results.append(
            ConfigClassification.from_classification(
                classification,
                eslint_config_path=_relative(eslint_path, base),
                target_config_path=_relative(target_path, base),
            )
        )

    result.unsupported_rules_union = sorted(
        {name for r in result.results for name in r.unsupported_rules}
    )
    return result


def _read_target(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(path, str(e)) from e
    return parse_oxlint_config(text, source=path).model_dump(exclude_unset=True)


def suggest_directory(
    root: Path | str,
    *,
    settings: Settings | None = None,
    registry: TargetRegistry | None = None,
    resolver: ConfigResolver | None = None,
    relative_to: Path | None = None,
) -> SuggestionResult:
    """Suggest the ``.oxlintrc.json`` each ESLint config under ``root`` would need.

    Configs are visited parents first. A child extends its parent's suggestion
    when one was produced in this run, otherwise the parent's Oxlint config on
    disk. A parent whose suggestion has no rules counts as removed. Nothing is written.

    Raises:
        RegistryLoadError: If the target rule catalog cannot be loaded.
    """
    settings = settings or load_settings()
    root = Path(os.path.abspath(root))
    base = relative_to or Path.cwd()
    if registry is None:
        registry = _load_registry(root, settings)
    if resolver is None:
        resolver = _create_resolver(settings)

    result = SuggestionResult()

    def _warn(message: str) -> None:
        log.warning(message)
        result.warnings.append(message)

    ordered, parents, loaded = _ordered_configs(root, resolver, base, _warn)
    suggested: dict[Path, dict[str, Any]] = {}
    dropped: set[Path] = set()

    for eslint_path in ordered:
        target_path = target_config_for(eslint_path)
        parent = parents[eslint_path]
        try:
            resolved = resolver.resolve(eslint_path)
            existing = _read_target(target_path)
            parent_config: dict[str, Any] | None = None
            if parent is not None and parent not in dropped:
                parent_config = suggested.get(parent) or _read_target(target_config_for(parent))
            config = suggest_target_config(
                resolved.resolved,
                loaded[eslint_path],
                registry,
                None if parent_config is None else OxlintConfig.model_validate(parent_config),
                extends=None if parent is None else extends_entry(eslint_path, parent),
                default_plugins=settings.default_enabled_plugins,
            )
        except _PER_FILE_ERRORS as exc:
            _warn(f"Skipping {_relative(eslint_path, base)}: {exc}")
            continue

        if is_redundant_target_config(config):
            action = SuggestionAction.REMOVE if existing is not None else SuggestionAction.NOT_NEEDED
            dropped.add(eslint_path)
        elif existing is not None and target_configs_equal(config, existing):
            action = SuggestionAction.UNCHANGED
            suggested[eslint_path] = config
        else:
            action = SuggestionAction.WRITE
            suggested[eslint_path] = config
        log.debug("%s -> %s", _relative(target_path, base), action)
        result.suggestions.append(
            TargetSuggestion(
                eslint_config_path=_relative(eslint_path, base),
                target_config_path=_relative(target_path, base),
                action=action,
                config=config,
            )
        )
    return result
