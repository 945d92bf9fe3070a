"""migraflow CLI: inspect, project and convert migration-flow datasets."""

import argparse
import logging
import os
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Optional

from migraflow import config


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = "DEBUG"
    else:
        level = os.environ.get(config.LOG_LEVEL_ENV, config.DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _emit(content: str, out: Optional[Path]) -> None:
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(content, encoding="utf-8")
    else:
        sys.stdout.write(content)


def _emit_json(payload, out: Optional[Path]) -> None:
    from ._internal.canonical_json import canonical_dumps

    _emit(canonical_dumps(payload) + "\n", out)


def main():
    """Main CLI entry point for migraflow commands."""
    try:
        migraflow_version = get_version("migraflow")
    except PackageNotFoundError:
        migraflow_version = "dev"

    parser = argparse.ArgumentParser(
        prog="migraflow",
        description="migraflow: migration-flow ingestion and Sankey/Chord projection"
    )
    parser.add_argument("--version", action="version", version=f"migraflow {migraflow_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "file",
        type=Path,
        help="Dataset file (tidy CSV, legacy wide CSV or GEXF)"
    )
    parent_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write output to this file instead of stdout"
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help=f"Enable debug logging (otherwise ${config.LOG_LEVEL_ENV} or {config.DEFAULT_LOG_LEVEL})."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # inspect command
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Summarize a dataset: schema, counts, time range, properties",
        parents=[parent_parser]
    )
    inspect_parser.add_argument(
        "--kind",
        choices=["auto", "csv", "gexf"],
        default="auto",
        help="Input kind (default: sniffed from the first character)"
    )

    # sankey command
    sankey_parser = subparsers.add_parser(
        "sankey",
        help="Project a dataset snapshot onto a two-column Sankey",
        parents=[parent_parser]
    )
    sankey_parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Snapshot year (GEXF: defaults to the first year; CSV: sets the timestamp)"
    )
    sankey_parser.add_argument(
        "--break-cycles",
        action="store_true",
        help="Keep only the dominant direction of each node pair before projecting"
    )
    sankey_parser.add_argument(
        "--layout",
        action="store_true",
        help="Also compute node boxes and link bands"
    )
    sankey_parser.add_argument(
        "--width",
        type=float,
        default=config.SANKEY_WIDTH,
        help=f"Layout width in pixels (default: {config.SANKEY_WIDTH})"
    )
    sankey_parser.add_argument(
        "--height",
        type=float,
        default=config.SANKEY_HEIGHT,
        help=f"Layout height in pixels (default: {config.SANKEY_HEIGHT})"
    )

    # chord command
    chord_parser = subparsers.add_parser(
        "chord",
        help="Project a dataset snapshot onto a Chord matrix",
        parents=[parent_parser]
    )
    chord_parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Snapshot year (GEXF: defaults to the first year; CSV: sets the timestamp)"
    )

    # snapshots command
    snapshots_parser = subparsers.add_parser(
        "snapshots",
        help="Materialize every snapshot of a dataset",
        parents=[parent_parser]
    )
    snapshots_parser.add_argument(
        "--max-years",
        type=int,
        default=config.MAX_SNAPSHOT_YEARS,
        help=f"Refuse time ranges longer than this (default: {config.MAX_SNAPSHOT_YEARS})"
    )

    # convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Rewrite a tidy or legacy wide CSV as tidy CSV",
        parents=[parent_parser]
    )
    convert_parser.add_argument(
        "--period",
        default=None,
        help="Period written for edges that carry none"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose)

    try:
        text = args.file.read_text(encoding="utf-8")

        if args.command == "inspect":
            from .api import inspect_dataset

            summary = inspect_dataset(text, kind=args.kind)
            _emit_json(summary.model_dump(mode="json"), args.out)

        elif args.command == "sankey":
            from .api import load_snapshot, project
            from .adapters.sankey import SankeyLayoutConfig, layout_sankey

            snapshot = load_snapshot(text, year=args.year)
            projection = project(snapshot, "sankey", break_cycles=args.break_cycles)
            payload = projection.model_dump(mode="json")
            if args.layout:
                layout = layout_sankey(
                    projection,
                    SankeyLayoutConfig(width=args.width, height=args.height),
                )
                payload = {"projection": payload, "layout": layout.model_dump(mode="json")}
            _emit_json(payload, args.out)

        elif args.command == "chord":
            from .api import load_snapshot, project

            snapshot = load_snapshot(text, year=args.year)
            projection = project(snapshot, "chord")
            _emit_json(projection.model_dump(mode="json"), args.out)

        elif args.command == "snapshots":
            from .api import build_dataset

            record = build_dataset(text, name=args.file.stem, max_years=args.max_years)
            _emit_json(record.model_dump(mode="json"), args.out)

        elif args.command == "convert":
            from .api import load_csv
            from ._internal.io.tidy_writer import write_tidy_csv

            graph = load_csv(text)
            _emit(write_tidy_csv(graph, period=args.period), args.out)

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
