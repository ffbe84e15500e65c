# SPDX-License-Identifier: MIT
"""Command-line entry point — analyze a tree and print the removal report."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lintshed.aggregate import analyze_directory, suggest_directory
from lintshed.config import RESOLVERS, load_settings, resolve_type_aware
from lintshed.report import generate_markdown_report, generate_report
from lintshed.rules.registry import RegistryLoadError

log = logging.getLogger(__name__)


def main(
    *,
    path: str = ".",
    type_aware: str | None = None,
    resolver: str | None = None,
    output_json: bool = False,
    markdown: str | None = None,
    suggest: bool = False,
    verbose: bool = False,
) -> None:
    """Run the analysis and print the report. Exits 1 on configuration or catalog errors.

    With ``suggest``, print the suggested Oxlint config for every ESLint config
    instead; type-aware mode is not needed for that.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        mode = False if suggest else resolve_type_aware(type_aware)
        settings = load_settings(cli_resolver=resolver)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    root = Path(path)
    if not root.is_dir():
        print(f"error: not a directory: {root}", file=sys.stderr)
        sys.exit(1)

    if suggest:
        try:
            suggestions = suggest_directory(root, settings=settings)
        except RegistryLoadError as exc:
            print(f"error: {exc}", file=sys.stderr)
            sys.exit(1)
        for warning in suggestions.warnings:
            print(f"warning: {warning}", file=sys.stderr)
        print(suggestions.model_dump_json(indent=2))
        return

    try:
        analysis = analyze_directory(root, type_aware=mode, settings=settings)
    except RegistryLoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    for warning in analysis.warnings:
        print(f"warning: {warning}", file=sys.stderr)

    if markdown:
        Path(markdown).write_text(generate_markdown_report(analysis), encoding="utf-8")
        log.info("Markdown report written to %s", markdown)

    if output_json:
        print(analysis.model_dump_json(indent=2))
    else:
        print(generate_report(analysis), end="")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lintshed",
        description="Find ESLint rules that Oxlint already enforces",
    )
    parser.add_argument("path", nargs="?", default=".", help="Directory to analyze")
    parser.add_argument(
        "--type-aware",
        dest="type_aware",
        action="store_const",
        const="true",
        default=None,
        help="Oxlint runs type-aware rules (overrides LINTSHED_TYPE_AWARE env var)",
    )
    parser.add_argument(
        "--no-type-aware",
        dest="type_aware",
        action="store_const",
        const="false",
        help="Oxlint skips type-aware rules (overrides LINTSHED_TYPE_AWARE env var)",
    )
    parser.add_argument(
        "--resolver",
        choices=list(RESOLVERS),
        default=None,
        help="Config resolution backend (overrides LINTSHED_RESOLVER env var)",
    )
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")
    parser.add_argument("--markdown", metavar="FILE", help="Also write a Markdown report")
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Print the suggested .oxlintrc.json for each ESLint config as JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def run(argv: list[str] | None = None) -> None:
    """Console-script entry point."""
    args = build_parser().parse_args(argv)
    main(
        path=args.path,
        type_aware=args.type_aware,
        resolver=args.resolver,
        output_json=args.json,
        markdown=args.markdown,
        suggest=args.suggest,
        verbose=args.verbose,
    )
