"""CLI entrypoints for compscan commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .analyzer import PackageAnalyzer
from .formatters import FolderFormatter, Formatter, JsonFormatter
from .logging import configure_logging
from .scanner import ComponentScanner


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compscan",
        description="Discover UI components and summarize package.json metadata.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print the project summary as JSON.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_path_argument(analyze_parser)
    analyze_parser.add_argument(
        "--full",
        action="store_true",
        default=None,
        help="Keep the full manifest and per-component metadata in the output.",
    )
    analyze_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation width.",
    )
    analyze_parser.add_argument(
        "--best-folder",
        action="store_true",
        help="Print only the folder holding the most components.",
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="List discovered components without manifest metadata.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_path_argument(scan_parser)
    scan_parser.add_argument(
        "--format",
        choices=("json", "folders"),
        default="json",
        help="Output layout: a flat component list or components grouped by folder.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for compscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    project = Path(args.path).expanduser()
    if not project.is_dir():
        parser.exit(1, f"Project path is not a directory: {project}\n")

    if args.command == "analyze":
        try:
            summary = PackageAnalyzer(project).analyze(verbose=args.full)
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"compscan analyze failed: {exc}\nRun with --verbose for more details.\n")
        if args.best_folder:
            best = summary.best_component_folder()
            if best is None:
                parser.exit(1, "No components found\n")
            print(best)
        else:
            print(json.dumps(summary.to_dict(), indent=args.indent))
    elif args.command == "scan":
        formatter: Formatter = (
            FolderFormatter() if args.format == "folders" else JsonFormatter(base_path=project)
        )
        try:
            result = ComponentScanner(formatter=formatter).scan(project)
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"compscan scan failed: {exc}\nRun with --verbose for more details.\n")
        print(json.dumps(result, indent=2))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
