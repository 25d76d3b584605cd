from __future__ import annotations

import io
import logging
from datetime import date
from typing import List, Optional

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from models import ScheduleDay, StudyPlanParameters

logger = logging.getLogger(__name__)

SHEET_NAME = "MCAT Study Plan"
SUMMARY_ROWS = 5  # title, test date, hours, stats, spacer
HEADER_ROW = SUMMARY_ROWS + 1

COLUMNS = [
    ("Days Left", 12),
    ("Day", 8),
    ("Day of Week", 12),
    ("Practice Questions", 40),
    ("CARS", 30),
    ("Other/Review", 20),
]
PRACTICE_COL = 4
CARS_COL = 5
REVIEW_COL = 6

HEADER_FILL = "E6F0FF"
ROW_FILLS = {
    "practice_test": "FFFF00",
    "review": "FFCC99",
    "blackout": "D3D3D3",
    "taper": "E6F3FF",
}
QUESTIONS_COLOR = "0066CC"
CARS_COLOR = "009900"
REVIEW_COLOR = "9900CC"

THIN = Side(style="thin")
THIN_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)
MIN_ROW_HEIGHT = 20


def day_style(day: ScheduleDay, taper_days: int) -> Optional[str]:
    if day.is_practice_test:
        return "practice_test"
    if day.is_review_day:
        return "review"
    if day.is_blackout:
        return "blackout"
    if day.days_left <= taper_days:
        return "taper"
    return None


def schedule_to_frame(schedule: List[ScheduleDay]) -> pd.DataFrame:
    rows = [
        {
            "Days Left": day.days_left,
            "Day": day.date,
            "Day of Week": day.day_of_week,
            "Practice Questions": day.practice_questions or "",
            "CARS": day.cars or "",
            "Other/Review": day.review or "",
        }
        for day in schedule
    ]
    return pd.DataFrame(rows, columns=[name for name, _ in COLUMNS])


def workbook_filename(generated_on: Optional[date] = None) -> str:
    generated_on = generated_on or date.today()
    return f"mcat-study-plan-{generated_on.isoformat()}.xlsx"


def render_workbook(schedule: List[ScheduleDay], params: StudyPlanParameters) -> bytes:
    frame = schedule_to_frame(schedule)

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=SHEET_NAME, index=False, startrow=SUMMARY_ROWS)
    buf.seek(0)

    wb = load_workbook(buf)
    ws = wb[SHEET_NAME]
    _write_summary(ws, schedule, params)
    _style_header(ws)
    _style_rows(ws, schedule, params.taper_days)
    _apply_min_height(ws)

    out = io.BytesIO()
    wb.save(out)
    logger.info("Rendered workbook with %d schedule rows", len(schedule))
    return out.getvalue()


def _write_summary(ws: Worksheet, schedule: List[ScheduleDay], params: StudyPlanParameters) -> None:
    practice_test_count = sum(1 for day in schedule if day.is_practice_test)

    ws.cell(row=1, column=1, value="MCAT Study Plan").font = Font(size=16, bold=True)
    ws.row_dimensions[1].height = 25
    ws.cell(row=2, column=1, value=f"Test Date: {params.test_date.isoformat()}").font = Font(size=12, bold=True)
    ws.cell(
        row=3,
        column=1,
        value=f"Study Hours: {params.weekday_hours:g}h weekdays, {params.weekend_hours:g}h weekends",
    ).font = Font(size=11)
    ws.cell(
        row=4,
        column=1,
        value=f"Schedule: {len(schedule)} total days, {practice_test_count} practice tests",
    ).font = Font(size=11)


def _style_header(ws: Worksheet) -> None:
    center = Alignment(horizontal="center", vertical="center")
    fill = PatternFill("solid", fgColor=HEADER_FILL)
    for col, (_, width) in enumerate(COLUMNS, start=1):
        cell = ws.cell(row=HEADER_ROW, column=col)
        cell.font = Font(bold=True, size=12)
        cell.fill = fill
        cell.alignment = center
        cell.border = THIN_BORDER
        ws.column_dimensions[cell.column_letter].width = width
    ws.freeze_panes = ws.cell(row=HEADER_ROW + 1, column=1).coordinate


def _style_rows(ws: Worksheet, schedule: List[ScheduleDay], taper_days: int) -> None:
    for offset, day in enumerate(schedule, start=1):
        row = HEADER_ROW + offset
        cells = [ws.cell(row=row, column=col) for col in range(1, len(COLUMNS) + 1)]

        style = day_style(day, taper_days)
        if style:
            fill = PatternFill("solid", fgColor=ROW_FILLS[style])
            for cell in cells:
                cell.fill = fill

        for cell in cells:
            cell.border = THIN_BORDER
            cell.alignment = Alignment(vertical="center", wrap_text=True)
        for cell in cells[:3]:
            cell.alignment = Alignment(horizontal="center", vertical="center")

        practice_cell = cells[PRACTICE_COL - 1]
        if day.is_practice_test:
            practice_cell.font = Font(bold=True, color="FF0000")
        elif day.is_review_day:
            practice_cell.font = Font(color="FF6600")
        elif day.practice_questions:
            practice_cell.font = Font(color=QUESTIONS_COLOR)
        if day.cars:
            cells[CARS_COL - 1].font = Font(color=CARS_COLOR)
        if day.review:
            cells[REVIEW_COL - 1].font = Font(color=REVIEW_COLOR)


def _apply_min_height(ws: Worksheet) -> None:
    for row in range(1, ws.max_row + 1):
        ws.row_dimensions[row].height = max(MIN_ROW_HEIGHT, ws.row_dimensions[row].height or 0)
