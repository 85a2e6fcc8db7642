"""
Storm impact command line interface
===================================

Run the report like:

    python -m stormimpact.cli
    python -m stormimpact.cli --data "path/to/repdata-data-StormData.csv.bz2" --docx report.docx

Every flag is optional; with none, the dataset is read from the working
directory and the charts are written to ./figures.

The CLI never modifies the dataset file. It loads it once, prints the two
summary tables and writes the charts.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .loader import StormDataError
from .pipeline import run_analysis
from .report import ReportConfig

DEFAULT_DATA_PATH = "repdata-data-StormData.csv.bz2"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="storm-impact",
        description="Rank US storm event types by health and economic impact.",
    )
    ap.add_argument("--data", default=DEFAULT_DATA_PATH, help="Path to the compressed storm events CSV")
    ap.add_argument("--out-dir", default=ReportConfig.out_dir, help="Directory for the chart images")
    ap.add_argument("--top", type=int, default=ReportConfig.table_rows, help="Rows shown in each summary table")
    ap.add_argument("--chart-top", type=int, default=ReportConfig.chart_groups, help="Event types shown in each chart")
    ap.add_argument("--format", dest="image_format", choices=("png", "svg", "pdf"), default=ReportConfig.image_format)
    ap.add_argument("--docx", default=None, help="Also write a Word report to this path")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the storm impact CLI.

    1) Parse flags into a ReportConfig
    2) Run the pipeline
    3) Print the two summary tables
    """
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")

    if args.top < 0 or args.chart_top < 0:
        print("Error: --top and --chart-top must be >= 0", file=sys.stderr)
        return 2
    if args.docx and args.image_format != "png":
        print("Error: --docx needs --format png", file=sys.stderr)
        return 2

    config = ReportConfig(
        out_dir=args.out_dir,
        image_format=args.image_format,
        table_rows=args.top,
        chart_groups=args.chart_top,
        docx_path=args.docx,
    )

    try:
        result = run_analysis(args.data, config)
    except StormDataError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Loaded {result.events_loaded:,} events.")
    for rep in result.reports:
        print("")
        print(rep.family.title)
        print("-" * len(rep.family.title))
        print(rep.table_text)
        print(f"Chart: {rep.chart_path}")
    if result.docx_path:
        print(f"\nReport written to {result.docx_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
