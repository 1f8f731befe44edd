"""Holiday rule loaders (XML definitions, CSV and Excel tables)."""

from __future__ import annotations

import warnings
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError

from holidaycalc.domain import HolidayRule, RuleKind, Settings, normalize_kind, parse_rule


class RuleLoadError(Exception):
    def __init__(self, issues: list[dict[str, Any]], warnings_list: list[str]) -> None:
        super().__init__(f"Invalid holiday definitions ({len(issues)} problem(s))")
        self.issues = issues
        self.warnings_list = warnings_list


TABLE_COLUMNS: dict[str, list[str]] = {
    "name": ["name", "holiday name"],
    "kind": ["kind", "type", "rule"],
    "month": ["month"],
    "day": ["day"],
    "week": ["week", "week of month"],
    "weekday": ["weekday", "day of week", "dow"],
    "holiday": ["holiday", "after holiday", "reference"],
    "days": ["days", "offset"],
    "every_x_years": ["every_x_years", "every x years", "every"],
    "start_year": ["start_year", "start year"],
}


def _normalize_header(value: Any) -> str:
    return "".join(char for char in str(value).casefold() if char not in {" ", "-", "_"})


def _build_column_map(columns: list[str]) -> dict[str, str]:
    return {_normalize_header(column): column for column in columns}


def _cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        return text or None
    if pd.isna(value):
        return None
    if hasattr(value, "item"):  # numpy scalar
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _get_column_value(row: pd.Series, column_map: dict[str, str], aliases: list[str]) -> Any:
    for alias in aliases:
        key = _normalize_header(alias)
        if key in column_map:
            return _cell(row.get(column_map[key]))
    return None


def _collect_issues(exc: ValidationError, row: int, name: Any) -> list[dict[str, Any]]:
    issues: list[dict[str, Any]] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", []))
        issues.append(
            {
                "row": row,
                "name": name,
                "field": field or "unknown",
                "message": error.get("msg", "Unknown error"),
            }
        )
    return issues


def _finish(
    rules: list[HolidayRule], issues: list[dict[str, Any]], warnings_list: list[str]
) -> list[HolidayRule]:
    if warnings_list:
        warnings.warn("\n".join(warnings_list), UserWarning, stacklevel=3)
    if issues:
        raise RuleLoadError(issues, warnings_list)
    return rules


def _child_text(parent: ET.Element, tag: str) -> str | None:
    element = parent.find(tag)
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


def _xml_record(node: ET.Element) -> dict[str, Any]:
    """Map a ``<Holiday>`` element to a rule record.

    Child elements are checked in a fixed order; the first rule marker
    found decides the rule kind.
    """
    children = {child.tag: child for child in node}
    record: dict[str, Any] = {"name": node.get("name")}
    if "WeekOfMonth" in children:
        record.update(
            kind=RuleKind.WEEK_OF_MONTH.value,
            month=_child_text(node, "Month"),
            week=_child_text(node, "WeekOfMonth"),
            weekday=_child_text(node, "DayOfWeek"),
        )
    elif "DayOfWeekOnOrAfter" in children:
        payload = children["DayOfWeekOnOrAfter"]
        record.update(
            kind=RuleKind.DAY_OF_WEEK_ON_OR_AFTER.value,
            weekday=_child_text(payload, "DayOfWeek"),
            month=_child_text(payload, "Month"),
            day=_child_text(payload, "Day"),
        )
    elif "WeekdayOnOrAfter" in children:
        payload = children["WeekdayOnOrAfter"]
        record.update(
            kind=RuleKind.WEEKDAY_ON_OR_AFTER.value,
            month=_child_text(payload, "Month"),
            day=_child_text(payload, "Day"),
        )
    elif "LastFullWeekOfMonth" in children:
        payload = children["LastFullWeekOfMonth"]
        record.update(
            kind=RuleKind.LAST_FULL_WEEK_OF_MONTH.value,
            month=_child_text(payload, "Month"),
            weekday=_child_text(payload, "DayOfWeek"),
        )
    elif "DaysAfterHoliday" in children:
        payload = children["DaysAfterHoliday"]
        record.update(
            kind=RuleKind.DAYS_AFTER_HOLIDAY.value,
            holiday=payload.get("Holiday"),
            days=_child_text(payload, "Days"),
        )
    elif "Easter" in children:
        record["kind"] = RuleKind.EASTER.value
    elif "Month" in children and "Day" in children:
        record.update(
            kind=RuleKind.FIXED_DATE.value,
            month=_child_text(node, "Month"),
            day=_child_text(node, "Day"),
        )
        if "EveryXYears" in children or "StartYear" in children:
            record["every_x_years"] = _child_text(node, "EveryXYears")
            record["start_year"] = _child_text(node, "StartYear")
    else:
        record.update(kind=RuleKind.UNRECOGNIZED.value, markers=tuple(children))
    return record


def load_rules_xml(path: str | Path) -> list[HolidayRule]:
    source = Path(path)
    try:
        root = ET.parse(source).getroot()
    except ET.ParseError as exc:
        raise RuleLoadError(
            [{"row": None, "name": None, "field": "xml", "message": str(exc)}], []
        ) from exc
    rules: list[HolidayRule] = []
    issues: list[dict[str, Any]] = []
    warnings_list: list[str] = []
    for idx, node in enumerate(root.iter("Holiday"), start=1):
        record = _xml_record(node)
        if record["kind"] == RuleKind.UNRECOGNIZED.value:
            warnings_list.append(
                f"Holiday {record['name']!r} has no recognized rule; it will be skipped."
            )
        try:
            rules.append(parse_rule(record))
        except ValidationError as exc:
            issues.extend(_collect_issues(exc, idx, record.get("name")))
    return _finish(rules, issues, warnings_list)


def _table_record(row: pd.Series, column_map: dict[str, str]) -> dict[str, Any]:
    values = {
        field: _get_column_value(row, column_map, aliases)
        for field, aliases in TABLE_COLUMNS.items()
    }
    record: dict[str, Any] = {"name": values.pop("name")}
    raw_kind = values.pop("kind")
    present = {field: value for field, value in values.items() if value is not None}
    if raw_kind is None:
        if "month" in present and "day" in present:
            kind = RuleKind.FIXED_DATE
        else:
            kind = RuleKind.UNRECOGNIZED
    else:
        kind = normalize_kind(raw_kind)

    if kind is RuleKind.UNRECOGNIZED:
        record.update(kind=kind.value, markers=tuple(present))
        return record
    record["kind"] = kind.value
    record.update(present)
    return record


def load_rules_table(df: pd.DataFrame) -> list[HolidayRule]:
    if df.empty:
        return []
    column_map = _build_column_map([str(col) for col in df.columns])
    rules: list[HolidayRule] = []
    issues: list[dict[str, Any]] = []
    warnings_list: list[str] = []
    for idx, (_, row) in enumerate(df.iterrows()):
        row_number = idx + 2
        try:
            record = _table_record(row, column_map)
        except ValueError as exc:
            issues.append(
                {
                    "row": row_number,
                    "name": _get_column_value(row, column_map, TABLE_COLUMNS["name"]),
                    "field": "kind",
                    "message": str(exc),
                }
            )
            continue
        if record["kind"] == RuleKind.UNRECOGNIZED.value:
            warnings_list.append(
                f"Row {row_number} ({record['name']!r}) has no recognized rule; it will be skipped."
            )
        try:
            rules.append(parse_rule(record))
        except ValidationError as exc:
            issues.extend(_collect_issues(exc, row_number, record.get("name")))
    return _finish(rules, issues, warnings_list)


def load_rules(path: str | Path, sheet_name: str = "holidays") -> list[HolidayRule]:
    source = Path(path)
    suffix = source.suffix.casefold()
    if suffix == ".xml":
        return load_rules_xml(source)
    if suffix == ".csv":
        return load_rules_table(pd.read_csv(source))
    if suffix in {".xlsx", ".xls"}:
        return load_rules_table(pd.read_excel(source, sheet_name=sheet_name))
    raise ValueError(f"Unsupported rules file type: {source.suffix or source.name}")


def load_settings(path: str | Path, sheet_name: str = "settings") -> Settings:
    """Read engine settings from the ``settings`` sheet of a rules workbook.

    The sheet holds ``key``/``value`` rows; files without it (or non-Excel
    files) give default settings.
    """
    source = Path(path)
    if source.suffix.casefold() not in {".xlsx", ".xls"}:
        return Settings()
    with pd.ExcelFile(source) as workbook:
        if sheet_name not in workbook.sheet_names:
            return Settings()
        df = workbook.parse(sheet_name)
    if df.empty:
        return Settings()
    column_map = _build_column_map([str(col) for col in df.columns])
    values: dict[str, Any] = {}
    for _, row in df.iterrows():
        key = _get_column_value(row, column_map, ["key", "setting"])
        if key is None:
            continue
        value = _get_column_value(row, column_map, ["value"])
        if value is None:
            continue
        values[str(key).strip()] = value
    return Settings.model_validate(values)
