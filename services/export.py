"""
Excel work log export
"""
import calendar
import time
from datetime import date
from io import BytesIO
from typing import Dict, Iterable, Optional

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

SUMMARY_HEADERS = [
    "JIRA#",
    "Description",
    "Project Name",
    "Related JIRA#",
    "JIRA status",
    "Actual status",
    "Effort Estimation (MHRs)",
    "Total Effort (MHRs)",
    "Assignee",
]
DETAIL_HEADERS = ["No.", "Reference Project/JIRA#", "Description", "Total HRs"]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    return (start is None or day >= start) and (end is None or day <= end)


def _style_header(ws, column_count: int):
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    for col_idx in range(1, column_count + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.freeze_panes = "A2"


def export_filename(now: Optional[float] = None) -> str:
    """``work_log_YYYYMMDD_<epoch-ms>.xlsx``"""
    now = time.time() if now is None else now
    stamp = time.strftime("%Y%m%d", time.gmtime(now))
    return f"work_log_{stamp}_{int(now * 1000)}.xlsx"


def build_work_log_workbook(jiras: Iterable, start: Optional[date] = None, end: Optional[date] = None,
                            live_statuses: Optional[Dict[str, str]] = None,
                            today: Optional[date] = None) -> bytes:
    """Build the Summary and Detail sheets and return the xlsx bytes.

    Only logs inside ``start``..``end`` count. Summary rows with no effort in
    range are left out. Detail columns cover every day of the month that
    contains ``end`` (or ``today`` when no range is given).
    """
    jiras = list(jiras)
    live_statuses = live_statuses or {}
    today = today or date.today()

    wb = openpyxl.Workbook()
    ws_summary = wb.active
    ws_summary.title = "Summary"
    ws_summary.append(SUMMARY_HEADERS)

    for jira in jiras:
        logs = [log for log in jira.daily_logs if _in_range(log.log_date, start, end)]
        total_effort = sum(float(log.time_spent or 0) for log in logs)
        if total_effort <= 0:
            continue
        ws_summary.append([
            jira.jira_number or "",
            jira.description or "",
            jira.project_name or "",
            jira.related_jira or "",
            live_statuses.get(jira.jira_number) or jira.jira_status or "",
            jira.actual_status or "",
            jira.effort_estimation if jira.effort_estimation is not None else "",
            total_effort,
            jira.assignee or "",
        ])
    _style_header(ws_summary, len(SUMMARY_HEADERS))
    for col_idx, width in enumerate([15, 50, 25, 15, 18, 18, 14, 14, 20], start=1):
        ws_summary.column_dimensions[get_column_letter(col_idx)].width = width

    anchor = end or today
    days_in_month = calendar.monthrange(anchor.year, anchor.month)[1]

    ws_detail = wb.create_sheet("Detail")
    ws_detail.append(DETAIL_HEADERS + [str(day) for day in range(1, days_in_month + 1)])

    details: Dict[str, Dict] = {}
    for jira in jiras:
        for log in jira.daily_logs:
            if not _in_range(log.log_date, start, end):
                continue
            row = details.setdefault(jira.jira_number, {
                "no": len(details) + 1,
                "description": jira.description or "",
                "total": 0.0,
                "days": {},
            })
            hours = float(log.time_spent or 0)
            row["days"][log.log_date.day] = row["days"].get(log.log_date.day, 0.0) + hours
            row["total"] += hours

    for jira_number, row in details.items():
        ws_detail.append(
            [row["no"], jira_number, row["description"], row["total"]]
            + [row["days"].get(day, "") for day in range(1, days_in_month + 1)]
        )
    _style_header(ws_detail, len(DETAIL_HEADERS) + days_in_month)
    ws_detail.column_dimensions["B"].width = 25
    ws_detail.column_dimensions["C"].width = 50

    output = BytesIO()
    wb.save(output)
    return output.getvalue()
