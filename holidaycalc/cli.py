"""CLI listing the holidays of the year following a start date."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from holidaycalc.domain import HolidayRule, Settings
from holidaycalc.engine import HolidayReport, resolve_all
from holidaycalc.export_excel import export_holidays_excel
from holidaycalc.io_rules import RuleLoadError, load_rules, load_settings
from holidaycalc.report import format_report
from holidaycalc.resolver import RuleResolutionError

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


def parse_start_date(value: str) -> date:
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(
        f"invalid date {value!r} (expected YYYY-MM-DD or MM/DD/YYYY)"
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="holidaycalc",
        description="List the holidays occurring in the 12 months after a start date",
    )
    parser.add_argument(
        "--rules", required=True, help="Path to holiday definitions (.xml, .csv or .xlsx)"
    )
    parser.add_argument(
        "--start",
        type=parse_start_date,
        default=None,
        help="Start date, YYYY-MM-DD or MM/DD/YYYY (default: today)",
    )
    parser.add_argument("--out", help="Optional path to an Excel file with the results")
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first holiday that cannot be resolved",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum nesting of days-after-holiday references",
    )
    parser.add_argument(
        "--print-rules",
        action="store_true",
        help="Print the loaded rule table",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def _render_table(rows: list[dict[str, object]]) -> str:
    if not rows:
        return "(no rows)"
    df = pd.DataFrame(rows).fillna("")
    return df.to_string(index=False)


def _build_settings(args: argparse.Namespace, rules_path: Path) -> Settings:
    overrides: dict[str, object] = {}
    if args.fail_fast:
        overrides["fail_fast"] = True
    if args.max_depth is not None:
        overrides["max_reference_depth"] = args.max_depth
    try:
        settings = load_settings(rules_path)
        if overrides:
            settings = Settings.model_validate({**settings.model_dump(), **overrides})
    except ValidationError as exc:
        raise SystemExit(f"ERROR: invalid settings: {exc}") from exc
    return settings


def _load_rules_or_exit(rules_path: Path, settings: Settings) -> list[HolidayRule]:
    try:
        return load_rules(rules_path, sheet_name=settings.excel_sheet)
    except RuleLoadError as exc:
        print("Errors in holiday definitions (first 5):", file=sys.stderr)
        for issue in exc.issues[:5]:
            print(
                f"- row {issue['row']} ({issue['name']}), field {issue['field']}: "
                f"{issue['message']}",
                file=sys.stderr,
            )
        raise SystemExit(1) from exc
    except ValueError as exc:
        raise SystemExit(f"ERROR: {exc}") from exc


def _report_problems(report: HolidayReport) -> None:
    if not report.failures:
        return
    print("\nHolidays that could not be resolved:", file=sys.stderr)
    for failure in report.failures:
        print(f"- {failure.error}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    rules_path = Path(args.rules)
    if not rules_path.is_file():
        raise SystemExit(f"ERROR: rules file not found: {rules_path}")
    settings = _build_settings(args, rules_path)
    rules = _load_rules_or_exit(rules_path, settings)
    if args.print_rules:
        print(_render_table([rule.model_dump() for rule in rules]))

    start = args.start or date.today()
    try:
        report = resolve_all(rules, start, settings)
    except RuleResolutionError as exc:
        raise SystemExit(f"ERROR: {exc}") from exc

    print(format_report(report, settings.date_format))
    if args.out:
        export_holidays_excel(args.out, report)
        print(f"\nSaved: {args.out}")
    _report_problems(report)
    return 0 if report.ok else 2


if __name__ == "__main__":
    sys.exit(main())
