"""Command-line interface for doc-reconcile.

Exposes the patch and merge engines over files so edits can be inspected,
replayed and merged from scripts.  Command output goes to stdout; logs
and errors go to stderr.

Exit codes:
    0  success
    1  ``validate`` found the diff does not apply
    2  unreadable input, malformed diff list, or a patch out of range
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .config import Settings, load_settings
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import build_config
from .logger import setup_logging
from .reconcile import (
    PatchApplicationError,
    apply_diff,
    format_merge_report,
    generate_diff,
    merge_result_to_json,
    merge_section_content,
    parse_diffs,
    render_conflict_markers,
    validate_diff,
)

logger = logging.getLogger(__name__)


def _read(path: str) -> str:
    # newline="" keeps CRLF intact so positions match the file
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


def _cmd_diff(args: argparse.Namespace, settings: Settings) -> int:
    result = generate_diff(_read(args.old), _read(args.new))
    print(result.model_dump_json(indent=2))
    return 0


def _cmd_apply(args: argparse.Namespace, settings: Settings) -> int:
    diffs = parse_diffs(_read(args.diffs))
    sys.stdout.write(apply_diff(_read(args.content), diffs))
    return 0


def _cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    diffs = parse_diffs(_read(args.diffs))
    if validate_diff(_read(args.old), _read(args.new), diffs):
        print("valid")
        return 0
    print("invalid")
    return 1


def _cmd_merge(args: argparse.Namespace, settings: Settings) -> int:
    base = _read(args.base)
    current = _read(args.current)
    incoming = _read(args.incoming)

    if args.markers:
        sys.stdout.write(
            render_conflict_markers(
                base,
                current,
                incoming,
                current_label=settings.current_label,
                incoming_label=settings.incoming_label,
            )
        )
        return 0

    result = merge_section_content(base, current, incoming)
    if result.has_conflict:
        logger.warning(
            "%d conflict(s) resolved in favour of %s",
            len(result.conflicts or []),
            args.incoming,
        )

    if args.json:
        print(json.dumps(merge_result_to_json(result), indent=2))
    elif args.report:
        print(format_merge_report(result, section=args.current))
    else:
        sys.stdout.write(result.merged)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the ``doc-reconcile`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="doc-reconcile",
        description="doc-reconcile - positional patches and three-way merges for document sections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compute the single-hunk patch between two revisions
  doc-reconcile diff before.md after.md > patch.json

  # Replay only the operations of a patch
  jq .diffs patch.json > ops.json
  doc-reconcile apply before.md ops.json

  # Check a stored patch still fits before trusting it
  doc-reconcile validate before.md after.md ops.json

  # Merge an agent edit into an editor's draft (agent wins conflicts)
  doc-reconcile merge base.md draft.md agent.md
  doc-reconcile merge base.md draft.md agent.md --report
        """,
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (overrides LOG_LEVEL)",
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default="text",
        help="Log record format on stderr (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"doc-reconcile version {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_diff = sub.add_parser("diff", help="Print the DiffResult JSON for OLD -> NEW")
    p_diff.add_argument("old", help="File with the original content")
    p_diff.add_argument("new", help="File with the modified content")
    p_diff.set_defaults(handler=_cmd_diff)

    p_apply = sub.add_parser("apply", help="Apply a JSON diff list to a file")
    p_apply.add_argument("content", help="File with the content to patch")
    p_apply.add_argument("diffs", help="JSON file holding a list of operations")
    p_apply.set_defaults(handler=_cmd_apply)

    p_validate = sub.add_parser(
        "validate", help="Check that a diff list turns OLD into NEW"
    )
    p_validate.add_argument("old", help="File with the original content")
    p_validate.add_argument("new", help="File with the expected content")
    p_validate.add_argument("diffs", help="JSON file holding a list of operations")
    p_validate.set_defaults(handler=_cmd_validate)

    p_merge = sub.add_parser(
        "merge", help="Three-way merge CURRENT and INCOMING against BASE"
    )
    p_merge.add_argument("base", help="Common ancestor")
    p_merge.add_argument("current", help="Editor's version")
    p_merge.add_argument("incoming", help="Agent's version (wins conflicts)")
    output = p_merge.add_mutually_exclusive_group()
    output.add_argument(
        "--markers",
        action="store_true",
        help="Show conflicts with Git-style markers instead of resolving them",
    )
    output.add_argument(
        "--report",
        action="store_true",
        help="Print an audit report of the merge instead of the merged text",
    )
    output.add_argument(
        "--json",
        action="store_true",
        help="Print the merge result as JSON",
    )
    p_merge.set_defaults(handler=_cmd_merge)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging and run one subcommand.

    Returns:
        The process exit code.
    """
    args = build_parser().parse_args(argv)

    # .env first so ${VAR} interpolation in YAML can use its values
    load_dotenv()

    try:
        unified = build_config(load_hierarchical_config())
        settings = load_settings(
            debug=args.debug,
            log_file=args.log_file,
            unified=unified,
        )
    except (ValidationError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(
        debug=settings.debug,
        log_file=settings.log_file,
        log_format=args.log_format,
        level=settings.log_level,
    )
    config_files = discover_config_files()
    if config_files:
        logger.debug("Using config file: %s", config_files[0])

    try:
        return args.handler(args, settings)
    except OSError as exc:
        print(f"Error: cannot read input: {exc}", file=sys.stderr)
        return 2
    except UnicodeDecodeError as exc:
        print(f"Error: input is not valid UTF-8: {exc}", file=sys.stderr)
        return 2
    except PatchApplicationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except ValidationError as exc:
        print(
            f"Error: malformed diff list ({exc.error_count()} problem(s)): "
            f"{exc.errors()[0]['msg']}",
            file=sys.stderr,
        )
        return 2


def run() -> None:
    """Console-script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
