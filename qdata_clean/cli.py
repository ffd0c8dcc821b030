"""Command-line interface for the data cleaning pipeline.

Usage (examples):
    python -m qdata_clean.cli path/to/file.csv
    python -m qdata_clean.cli data.json --clean remove_nulls normalize_numbers --stats fidelity
    python -m qdata_clean.cli data.csv --clean remove_outliers --export json --output cleaned.json

The CLI prints a concise human-readable summary by default; use --json for the
full profile and cleaning report.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config import load_config
from .data_profiler import DataProfiler
from .errors import QDataError
from .exporter import (
    ExportOptions,
    estimate_export_size,
    export_file_name,
    format_file_size,
    serialize,
)
from .pipeline import CLEANING_OPTIONS, run_processing_pipeline
from .summary_stats import summarize

logger = logging.getLogger(__name__)


def _summarize(name: str, size: int, profile: Dict[str, Any]) -> str:
    info = profile.get("dataset_info", {})
    cols = info.get("column_names", [])
    preview_cols = cols[:8]
    more = "" if len(cols) <= 8 else f" (+{len(cols)-8} more)"
    lines = [
        f"File: {name} ({format_file_size(size)})",
        f"Rows: {info.get('total_rows')}  Columns: {info.get('total_columns')}"
        f"  Quality: {profile.get('quality_score')}%",
        f"Columns: {', '.join(preview_cols)}{more}",
    ]
    for c in profile.get("columns", [])[:8]:
        lines.append(
            f"  - {c['name']}: type={c['inferred_type']} missing={c['missing_count']}"
            f" distinct={c['distinct_count']}"
        )
    return "\n".join(lines)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Profile, clean and export a CSV or JSON data file."
    )
    parser.add_argument("file", help="Path to input CSV or JSON file")
    parser.add_argument(
        "--clean",
        nargs="*",
        choices=CLEANING_OPTIONS,
        metavar="OPTION",
        help=f"Cleaning steps to apply ({', '.join(CLEANING_OPTIONS)}). "
        "Without values the configured defaults are used.",
    )
    parser.add_argument(
        "--outlier-method",
        choices=["iqr", "tail"],
        help="Outlier trimming method (default: iqr)",
    )
    parser.add_argument("--stats", metavar="COLUMN", help="Print summary statistics for a column")
    parser.add_argument(
        "--export",
        choices=["csv", "json"],
        help="Write the (cleaned) table in this format",
    )
    parser.add_argument(
        "--output",
        help="Export path (default: <name>_processed_<date>.<format> in the current directory)",
    )
    parser.add_argument(
        "--no-metadata", action="store_true", help="Omit the metadata block from JSON exports"
    )
    parser.add_argument(
        "--include-statistics", action="store_true", help="Add per-column statistics to JSON exports"
    )
    parser.add_argument("--compress", action="store_true", help="Write the export as a ZIP archive")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full profile and cleaning report as JSON (in addition to summary)",
    )
    parser.add_argument("--config", help="Optional YAML config file")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    path = Path(args.file)
    if not path.exists():
        raise SystemExit(f"File not found: {path}")

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Invalid config: {exc}")
    if args.outlier_method:
        config["cleaning"]["outlier_method"] = args.outlier_method

    run_clean = args.clean is not None
    options = (args.clean or None) if run_clean else []
    content = path.read_bytes()
    try:
        result = run_processing_pipeline(path.name, content, options=options, config=config)
    except QDataError as exc:
        raise SystemExit(f"Failed to process {path.name}: {exc}")

    print(_summarize(path.name, len(content), result["profile"]))

    table = result["cleaned_df"]
    report = result["cleaning_report"]
    if run_clean:
        print(
            f"\nCleaned: {report['rows_before']} -> {report['rows_after']} rows"
            f" ({', '.join(report['steps']) or 'no steps'})"
        )
        cleaned_profile = DataProfiler().profile_dataframe(table)
        print(f"Quality after cleaning: {cleaned_profile['quality_score']}%")
    print(f"Estimated export size: {format_file_size(estimate_export_size(table))}")

    if args.stats:
        stats = summarize(table, args.stats)
        if stats is None:
            print(f"\nNo numeric data in column '{args.stats}'")
        else:
            print(
                f"\n{args.stats}: count={stats.count} mean={stats.mean:.4f} median={stats.median:.4f}"
                f" min={stats.min:.4f} max={stats.max:.4f} std={stats.std:.4f}"
            )

    if args.json:
        print("\n=== JSON Payload ===")
        print(
            json.dumps(
                {"profile": result["profile"], "cleaning_report": report},
                indent=2,
                default=str,
            )
        )

    if args.export:
        export_cfg = dict(config.get("export", {}))
        if args.no_metadata:
            export_cfg["include_metadata"] = False
        if args.include_statistics:
            export_cfg["include_statistics"] = True
        if args.compress:
            export_cfg["compress"] = True
        opts = ExportOptions.from_config(export_cfg)
        rendered = serialize(table, args.export, opts, name=path.name, processed=run_clean)
        default_name = export_file_name(path.name, "zip" if opts.compress else args.export)
        out_path = Path(args.output or default_name)
        if isinstance(rendered, bytes):
            out_path.write_bytes(rendered)
        else:
            out_path.write_text(rendered, encoding="utf-8")
        print(f"\nSaved {args.export.upper()} export to {out_path}")

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
