#!/usr/bin/env python3
"""
run_scoring.py — Score documents from the command line.

Usage:
    python run_scoring.py draft.md                     # Default document type
    python run_scoring.py draft.md --type prd          # Specific rubric
    python run_scoring.py docs/ --type adr             # Every *.md / *.txt in a directory
    python run_scoring.py docs/ --min-score 70         # CI gate: exit 2 below 70
    python run_scoring.py draft.md --json              # Output JSON only (for CI)
    python run_scoring.py --list-types                 # Registered document types
    python run_scoring.py draft.md --verbose           # Log scoring runs to stderr
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from docforge.errors import UnknownDocumentTypeError
from docforge.logging import get_logger, setup_logging
from docforge.registry import get_registry
from docforge.validator import ValidationResult, validate

_SUFFIXES = (".md", ".txt")

logger = get_logger("cli")


def collect_files(target: Path) -> list[Path]:
    if target.is_dir():
        return sorted(p for p in target.iterdir() if p.is_file() and p.suffix.lower() in _SUFFIXES)
    return [target]


def format_report(path: Path, result: ValidationResult) -> str:
    """Format one scoring result as a human-readable report."""
    lines = [
        "=" * 60,
        f"{path.name}  [{result.doc_type}]",
        "=" * 60,
        f"Score: {result.total_score}/100  Grade: {result.grade}  ({result.label})",
        "",
        "--- DIMENSIONS ---",
    ]
    for key, dim in result.dimensions.items():
        lines.append(f"{dim.name or key:<32} {dim.score:>3}/{dim.max_score:<3}")

    slop = result.slop_detection
    lines += [
        "",
        f"Slop: {slop.get('score', 0)}/{slop.get('max_score', 0)} "
        f"({slop.get('severity', 'clean')}), deduction -{slop.get('deduction', 0)}",
    ]
    if result.strengths:
        lines += ["", "--- STRENGTHS ---"] + [f"  + {s}" for s in result.strengths]
    if result.issues:
        lines += ["", "--- ISSUES ---"] + [f"  - {i}" for i in result.issues]
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Docforge Document Scorer")
    parser.add_argument(
        "path",
        nargs="?",
        help="File or directory of .md/.txt files to score",
    )
    parser.add_argument(
        "--type",
        dest="doc_type",
        default=None,
        help="Document type id (default: the registry default)",
    )
    parser.add_argument(
        "--min-score",
        type=int,
        default=None,
        help="Exit with status 2 if any document scores below this",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON only (for CI/automation)",
    )
    parser.add_argument(
        "--list-types",
        action="store_true",
        help="List registered document types and exit",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log each scoring run to stderr",
    )
    args = parser.parse_args()

    setup_logging(level="debug" if args.verbose else "warning", fmt="text", stream=sys.stderr)

    registry = get_registry()

    if args.list_types:
        for plugin in registry.get_all():
            marker = " (default)" if plugin.id == registry.get_default().id else ""
            print(f"{plugin.id:<24} {plugin.name}{marker}")
        sys.exit(0)

    if not args.path:
        parser.error("a file or directory is required unless --list-types is given")

    target = Path(args.path)
    if not target.exists():
        print(f"Error: Path not found: {target}")
        sys.exit(1)

    files = collect_files(target)
    if not files:
        print(f"Error: No .md or .txt files found in {target}")
        sys.exit(1)

    results: list[tuple[Path, ValidationResult]] = []
    for path in files:
        try:
            result = validate(path.read_text(encoding="utf-8"), doc_type=args.doc_type)
        except UnknownDocumentTypeError as exc:
            print(f"Error: {exc}")
            sys.exit(1)
        logger.info("Scored file", extra={"file": str(path), "doc_type": result.doc_type,
                                          "total_score": result.total_score})
        results.append((path, result))

    if args.json:
        print(json.dumps(
            [{"file": str(p), **r.to_dict()} for p, r in results],
            indent=2,
        ))
    else:
        for path, result in results:
            print(format_report(path, result))
            print()

    # Exit code for CI
    if args.min_score is not None:
        failing = [(p, r) for p, r in results if r.total_score < args.min_score]
        if failing:
            if not args.json:
                for p, r in failing:
                    print(f"⚠️  {p.name}: {r.total_score} < {args.min_score}")
            sys.exit(2)

    sys.exit(0)


if __name__ == "__main__":
    main()
