"""Excel export helpers."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from openpyxl.utils import get_column_letter

from holidaycalc.engine import HolidayReport
from holidaycalc.report import failure_rows, holiday_rows


def _auto_fit_columns(worksheet) -> None:
    for column_cells in worksheet.columns:
        values = [str(cell.value) if cell.value is not None else "" for cell in column_cells]
        max_length = max((len(value) for value in values), default=0)
        column_letter = get_column_letter(column_cells[0].column)
        worksheet.column_dimensions[column_letter].width = min(max_length + 2, 60)


def _apply_sheet_formatting(worksheet) -> None:
    worksheet.freeze_panes = "A2"
    worksheet.auto_filter.ref = worksheet.dimensions
    _auto_fit_columns(worksheet)


def export_holidays_excel(path: str | Path, report: HolidayReport) -> None:
    output_path = Path(path)

    holidays_df = pd.DataFrame(
        holiday_rows(report),
        columns=["name", "date", "weekday", "days_from_start"],
    )
    problems = failure_rows(report)
    if problems:
        problems_df = pd.DataFrame(problems, columns=["name", "status", "message"])
    else:
        problems_df = pd.DataFrame([{"name": "", "status": "ok", "message": "OK"}])

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        holidays_df.to_excel(writer, sheet_name="holidays", index=False)
        problems_df.to_excel(writer, sheet_name="problems", index=False)

        for sheet_name in ("holidays", "problems"):
            worksheet = writer.sheets[sheet_name]
            _apply_sheet_formatting(worksheet)
