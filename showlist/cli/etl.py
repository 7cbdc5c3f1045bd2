# =============================================================================
# showlist/cli/etl.py - Listings ETL Command Line
# =============================================================================
#
# Supported subcommands:
#
#   run    - Parse the events and venues listings and write the JSON dataset
#   merge  - Append a fresh listings drop to the events/venues source files
#
# Configuration is layered: config/config.yaml, then SHOWLIST_* environment
# variables (or .env), then command-line flags.
#
# Usage examples:
#   python -m showlist.cli run
#   python -m showlist.cli run --events data/events.txt --output public/data
#   python -m showlist.cli run --now 2024-08-20T12:00:00 --json
#   python -m showlist.cli merge ~/Downloads/new-listings.txt
# =============================================================================

"""Command-line entry point for the showlist ETL.

Usage::

    python -m showlist.cli run [--events PATH] [--venues PATH] [--output DIR]
    python -m showlist.cli merge NEW_FILE
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime

from showlist.config.loader import build_pipeline_options, load_config
from showlist.models.dataset import ProcessingResult
from showlist.models.diagnostics import Diagnostic
from showlist.models.pipeline import PipelineStage
from showlist.pipeline.orchestrator import PipelineOrchestrator
from showlist.pipeline.progress_tracker import ProgressTracker
from showlist.services.source_merger import SourceMerger
from showlist.utils.errors import ConfigurationError, SourceFileError
from showlist.utils.logging import configure_logging

# How many diagnostics of each severity the text summary shows.
_SUMMARY_LIMIT = 5


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_diagnostic(diagnostic: Diagnostic) -> str:
    location = diagnostic.source_file or ""
    if diagnostic.line_number is not None:
        location = f"{location}:{diagnostic.line_number}"
    prefix = f"[{diagnostic.type.value}]"
    return f"{prefix} {location} {diagnostic.message}" if location else f"{prefix} {diagnostic.message}"


def _print_summary(result: ProcessingResult) -> None:
    if result.success and result.stats is not None:
        stats = result.stats
        print("ETL complete")
        print("=" * 40)
        print(f"  Events:     {stats.parsed_events} (from {stats.source_events} blocks)")
        print(f"  Artists:    {stats.parsed_artists}")
        print(f"  Venues:     {stats.parsed_venues}")
        print(f"  Chunks:     {stats.chunks.total}")
        print(f"  Duplicates: {stats.duplicate_events_removed} events dropped")
        print(f"  Time:       {stats.processing_time_ms} ms")
    else:
        print("ETL failed", file=sys.stderr)

    print(f"\n  {len(result.errors)} errors, {len(result.warnings)} warnings")
    for label, diagnostics in (("Errors", result.errors), ("Warnings", result.warnings)):
        if not diagnostics:
            continue
        print(f"\n  {label}:")
        for diagnostic in diagnostics[:_SUMMARY_LIMIT]:
            print(f"    {_format_diagnostic(diagnostic)}")
        if len(diagnostics) > _SUMMARY_LIMIT:
            print(f"    ... and {len(diagnostics) - _SUMMARY_LIMIT} more")


def _print_progress(run_id: str, stage: PipelineStage, progress: float, message: str) -> None:
    print(f"[{progress:5.1f}%] {stage.value:<9} {message}")


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _load(args: argparse.Namespace) -> dict:
    config = load_config(args.config)
    if args.events:
        config.setdefault("sources", {})["events_file"] = args.events
    if args.venues:
        config.setdefault("sources", {})["venues_file"] = args.venues
    return config


def _handle_run(args: argparse.Namespace) -> int:
    """Run the full pipeline and print a summary (or the JSON result)."""
    config = _load(args)
    if args.output:
        config.setdefault("output", {})["dir"] = args.output

    app_env = (config.get("app") or {}).get("env", "development")
    level = (config.get("logging") or {}).get("level", "INFO")
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "WARNING"
    configure_logging(
        log_level=level,
        json_output=args.json or app_env == "production",
        stream=sys.stderr,
    )

    options = build_pipeline_options(config)

    now = None
    if args.now:
        try:
            now = datetime.fromisoformat(args.now)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid --now value {args.now!r}: {exc}") from exc

    tracker = ProgressTracker()
    if not (args.quiet or args.json):
        tracker.register_listener("cli", _print_progress)

    sources = config.get("sources") or {}
    orchestrator = PipelineOrchestrator(options, now=now, tracker=tracker, run_id="cli")
    result = orchestrator.run(
        sources.get("events_file", "data/events.txt"),
        sources.get("venues_file", "data/venues.txt"),
        (config.get("output") or {}).get("dir", "public/data"),
    )

    if args.json:
        print(result.model_dump_json(by_alias=True, indent=2))
    elif not args.quiet or not result.success:
        _print_summary(result)

    return 0 if result.success else 1


def _handle_merge(args: argparse.Namespace) -> int:
    """Append new listings to the source files."""
    config = _load(args)
    configure_logging(log_level="WARNING", stream=sys.stderr)
    options = build_pipeline_options(config)
    sources = config.get("sources") or {}

    merger = SourceMerger(options)
    plan = merger.merge(
        args.new_file,
        sources.get("events_file", "data/events.txt"),
        sources.get("venues_file", "data/venues.txt"),
    )

    if plan.new_blocks:
        print(f"Appended {len(plan.new_blocks)} new events.")
    else:
        print("No new events found.")
    if plan.skipped_blocks:
        print(f"Skipped {plan.skipped_blocks} events already present.")
    if plan.new_venues:
        print(f"Appended {len(plan.new_venues)} new venues:")
        for name in plan.new_venues:
            print(f"  {name}")
    else:
        print("No new venues found.")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--events", help="Events listing file (overrides config)")
    parser.add_argument("--venues", help="Venues listing file (overrides config)")
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="YAML configuration file (default: config/config.yaml)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ETL CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m showlist.cli",
        description="Build the showlist JSON dataset from text listings.",
    )
    subparsers = parser.add_subparsers(dest="command", help="ETL commands")

    # -- run --
    run_parser = subparsers.add_parser("run", help="Run the ETL pipeline")
    _add_source_arguments(run_parser)
    run_parser.add_argument("--output", help="Output directory (overrides config)")
    run_parser.add_argument(
        "--now",
        help="Run clock as ISO datetime, e.g. 2024-08-20T12:00:00 (default: current time)",
    )
    run_parser.add_argument(
        "--json", action="store_true", help="Print the processing result as JSON"
    )
    verbosity = run_parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--quiet", "-q", action="store_true", help="Only log warnings; print nothing on success"
    )
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    # -- merge --
    merge_parser = subparsers.add_parser(
        "merge", help="Append new listings to the events and venues source files"
    )
    merge_parser.add_argument("new_file", help="Text file with new event listings")
    _add_source_arguments(merge_parser)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Exits 0 on success, 1 when the pipeline or merge fails, and with
    argparse's usage error code for bad arguments.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "run":
            exit_code = _handle_run(args)
        elif args.command == "merge":
            exit_code = _handle_merge(args)
        else:
            parser.print_help()
            exit_code = 1
    except (ConfigurationError, SourceFileError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
