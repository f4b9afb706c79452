"""
Inspection compliance and defects workbooks.
"""
import io
from typing import Iterable, List, Sequence, Tuple

import xlsxwriter

from workforce.reports.common import format_date

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

COMPLIANCE_COLUMNS = [
    ("Vehicle Reg", 12),
    ("Vehicle Type", 15),
    ("Inspector", 20),
    ("Employee ID", 12),
    ("Week Ending", 14),
    ("Status", 12),
    ("Submitted", 14),
    ("Reviewed", 14),
]

DEFECT_COLUMNS = [
    ("Vehicle Reg", 12),
    ("Vehicle Type", 15),
    ("Inspector", 20),
    ("Week Ending", 14),
    ("Item #", 8),
    ("Item Description", 30),
    ("Defect Comments", 40),
    ("Inspection Status", 16),
]


def format_status(status) -> str:
    value = getattr(status, "value", status) or ""
    return value.replace("_", " ").title()


def build_workbook(sheet_name: str, columns: Sequence[Tuple[str, int]],
                   rows: Iterable[Sequence], summary: Sequence) -> bytes:
    """One sheet: bold header, data rows, a blank row, then the summary row."""
    buffer = io.BytesIO()
    workbook = xlsxwriter.Workbook(buffer, {"in_memory": True})
    worksheet = workbook.add_worksheet(sheet_name[:31])
    header_format = workbook.add_format({"bold": True, "bg_color": "#E2E8F0", "border": 1})
    summary_format = workbook.add_format({"bold": True})

    for col, (header, width) in enumerate(columns):
        worksheet.write(0, col, header, header_format)
        worksheet.set_column(col, col, width)
    worksheet.freeze_panes(1, 0)

    row_index = 1
    for row in rows:
        worksheet.write_row(row_index, 0, list(row))
        row_index += 1

    # Leave one empty row before the summary
    worksheet.write_row(row_index + 1, 0, list(summary), summary_format)
    workbook.close()
    return buffer.getvalue()


def compliance_rows(inspections: Iterable) -> List[list]:
    rows = []
    for inspection in inspections:
        vehicle = inspection.vehicle
        inspector = inspection.inspector
        rows.append([
            vehicle.reg_number if vehicle else "-",
            (vehicle.vehicle_type or vehicle.category_name or "-") if vehicle else "-",
            inspector.full_name if inspector else "Unknown",
            (inspector.employee_id or "-") if inspector else "-",
            format_date(inspection.week_ending),
            format_status(inspection.status),
            format_date(inspection.submitted_at) or "-",
            format_date(inspection.reviewed_at) or "-",
        ])
    return rows


def compliance_summary(inspections: Sequence) -> dict:
    total = len(inspections)
    submitted = sum(1 for i in inspections if getattr(i.status, "value", i.status) != "draft")
    reviewed = sum(1 for i in inspections if getattr(i.status, "value", i.status) == "reviewed")
    rate = round(submitted / total * 100, 1) if total else 0.0
    return {"total": total, "submitted": submitted, "reviewed": reviewed, "compliance_rate": rate}


def render_compliance_report(inspections: Sequence) -> bytes:
    stats = compliance_summary(inspections)
    summary = [
        "SUMMARY", "", "", "",
        f"Total: {stats['total']}",
        f"Submitted: {stats['submitted']}",
        f"Reviewed: {stats['reviewed']}",
        f"Compliance: {stats['compliance_rate']}%",
    ]
    return build_workbook("Inspection Compliance", COMPLIANCE_COLUMNS, compliance_rows(inspections), summary)


def defect_rows(inspections: Iterable) -> List[list]:
    """One row per item marked as requiring attention."""
    rows = []
    for inspection in inspections:
        vehicle = inspection.vehicle
        inspector = inspection.inspector
        for item in inspection.items:
            if getattr(item.status, "value", item.status) != "attention":
                continue
            rows.append([
                vehicle.reg_number if vehicle else "-",
                (vehicle.vehicle_type or vehicle.category_name or "-") if vehicle else "-",
                inspector.full_name if inspector else "Unknown",
                format_date(inspection.week_ending),
                item.item_number,
                item.item_description,
                item.comments or "-",
                format_status(inspection.status),
            ])
    return rows


def render_defects_report(rows: Sequence[list]) -> bytes:
    affected = len({row[0] for row in rows})
    summary = [
        "SUMMARY", "", "",
        f"Total Defects: {len(rows)}",
        "",
        f"Affected Vehicles: {affected}",
        "", "",
    ]
    return build_workbook("Defects Report", DEFECT_COLUMNS, rows, summary)


def report_filename(prefix: str, date_from, date_to, today) -> str:
    """``{prefix}_{from}_to_{to}.xlsx``, or today's date when no range was given."""
    if date_from and date_to:
        return f"{prefix}_{date_from}_to_{date_to}.xlsx"
    return f"{prefix}_{today.isoformat()}.xlsx"
