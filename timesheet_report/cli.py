"""Command-line entry point: print hour reports and import timesheet files.

    timesheet-report [report] --dir data --from 01/09/2025 --to 30/09/2025 --format hours-minutes
    timesheet-report import rows.csv --worker "Alice" --dir data
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from .backend.config import OUTPUT_MODES, ReportConfig, load_from_env
from .backend.errors import TimesheetError
from .backend.export import EXPORT_FORMATS, export_report
from .backend.formatting import NO_ACTIVITY_MESSAGE, format_report
from .backend.hours import OvertimePolicy
from .backend.importer import import_timesheet
from .backend.report import aggregate
from .backend.storage import load_timesheets

logger = logging.getLogger(__name__)

COMMANDS = ("report", "import")


def _positive_float(text: str) -> float:
    try:
        val = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if val <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {text!r}")
    return val


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timesheet-report",
        description="Summarise per-worker timesheets by day, ISO week and period.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    rep = sub.add_parser("report", help="Print an hours report for a date range.")
    rep.add_argument("--dir", help="Directory holding pontaj_*.json files.")
    rep.add_argument("--from", dest="from_date", help="First day, YYYY-MM-DD or DD/MM/YYYY.")
    rep.add_argument("--to", dest="to_date", help="Last day, YYYY-MM-DD or DD/MM/YYYY.")
    rep.add_argument("--format", dest="mode", choices=OUTPUT_MODES, help="Number format.")
    rep.add_argument("--overtime-threshold", type=_positive_float, help="Daily hours before overtime.")
    rep.add_argument("--overtime-rate", type=_positive_float, help="Overtime multiplier.")
    rep.add_argument("--export", help="Also write the report to this file (.csv, .xlsx, .pdf).")
    rep.add_argument(
        "--export-format", choices=EXPORT_FORMATS, help="Export format when the suffix is ambiguous."
    )
    rep.add_argument("--json", action="store_true", help="Print the report structure as JSON.")
    rep.add_argument("-v", "--verbose", action="store_true")
    rep.set_defaults(handler=run_report)

    imp = sub.add_parser("import", help="Merge a CSV/JSON/XLSX file into a worker's record.")
    imp.add_argument("file", help="Source file to import.")
    imp.add_argument("--worker", required=True, help="Worker display name.")
    imp.add_argument("--dir", help="Directory holding pontaj_*.json files.")
    imp.add_argument("-v", "--verbose", action="store_true")
    imp.set_defaults(handler=run_import)

    return parser


def run_report(args: argparse.Namespace, cfg: ReportConfig) -> int:
    policy = OvertimePolicy(
        threshold=args.overtime_threshold or cfg.overtime_threshold,
        rate=args.overtime_rate or cfg.overtime_rate,
    )
    mode = args.mode or cfg.output_mode
    timesheets = load_timesheets(args.dir or cfg.data_dir)
    report = aggregate(timesheets, args.from_date, args.to_date, policy, strict=True)

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_report(report, mode, cfg.date_format) or NO_ACTIVITY_MESSAGE)

    if args.export:
        path = export_report(report, args.export, args.export_format, mode, cfg.date_format)
        print(f"Exported: {path}", file=sys.stderr)
    return 0


def run_import(args: argparse.Namespace, cfg: ReportConfig) -> int:
    path = import_timesheet(args.file, args.worker, args.dir or cfg.data_dir)
    print(f"Imported into {path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    args_list = list(sys.argv[1:] if argv is None else argv)
    # Bare flags mean "report".
    if not args_list or args_list[0] not in (*COMMANDS, "-h", "--help"):
        args_list.insert(0, "report")
    args = build_parser().parse_args(args_list)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = load_from_env()
    try:
        return args.handler(args, cfg)
    except TimesheetError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
