"""
Weekly timesheet form.
"""
import io

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from workforce.reports.common import (
    draw_company_header, draw_form_number, draw_signature, fit, format_date,
)
from workforce.services.timesheets import format_remarks, total_hours, week_days

FOOTER_TEXT = "All time and other details are correct and should be used as a basis for wages etc."

# (heading, width) left to right
COLUMNS = [
    ("", 28 * mm),
    ("Time\nStarted", 20 * mm),
    ("Working\nin Yard", 20 * mm),
    ("Time\nFinished", 20 * mm),
    ("Daily\nTotal", 20 * mm),
    ("Remarks\n(Type of work, reason for delay etc.)", 72 * mm),
]


def _draw_box(c, x, y, label, value, label_width, value_width, height=7 * mm):
    c.setFont("Helvetica-Bold", 8)
    c.drawString(x, y + 2.2 * mm, label)
    c.rect(x + label_width, y, value_width, height)
    c.setFont("Helvetica", 9)
    c.drawString(x + label_width + 1.5 * mm, y + 2.2 * mm, fit(c, value, "Helvetica", 9, value_width - 3 * mm))


def draw_timesheet(c: canvas.Canvas, timesheet, employee_name: str = "") -> None:
    """Draw one timesheet on the current page and finish the page."""
    width, height = A4
    left = 15 * mm
    draw_form_number(c, timesheet.id, width, height - 12 * mm)
    y = draw_company_header(c, width, height - 18 * mm, with_registration=False)

    y -= 8 * mm
    _draw_box(c, left, y, "Reg No.", timesheet.reg_number or "", 16 * mm, 50 * mm)
    _draw_box(c, left + 95 * mm, y, "W/E Sunday", format_date(timesheet.week_ending), 22 * mm, 63 * mm)
    y -= 10 * mm
    _draw_box(c, left, y, "Driver", employee_name or "", 16 * mm, 164 * mm)

    # Table header
    y -= 16 * mm
    header_height = 12 * mm
    row_height = 9 * mm
    x = left
    for heading, col_width in COLUMNS:
        c.rect(x, y, col_width, header_height)
        c.setFont("Helvetica-Bold", 7)
        lines = heading.split("\n")
        text_y = y + header_height / 2 + (len(lines) - 1) * 1.6 * mm - 1 * mm
        for line in lines:
            c.drawCentredString(x + col_width / 2, text_y, line)
            text_y -= 3.2 * mm
        x += col_width

    for row in week_days(timesheet.entries):
        y -= row_height
        if row.did_not_work:
            cells = [row.day_name, "", "", "", "", "DID NOT WORK"]
        else:
            cells = [
                row.day_name,
                row.time_started or "",
                "Yes" if row.working_in_yard else "",
                row.time_finished or "",
                f"{row.daily_total:.2f}" if row.daily_total else "",
                format_remarks(row),
            ]
        x = left
        for index, ((_, col_width), value) in enumerate(zip(COLUMNS, cells)):
            c.rect(x, y, col_width, row_height)
            c.setFont("Helvetica", 8)
            text = fit(c, value, "Helvetica", 8, col_width - 3 * mm)
            if index in (0, 5):
                c.drawString(x + 1.5 * mm, y + 3.2 * mm, text)
            else:
                c.drawCentredString(x + col_width / 2, y + 3.2 * mm, text)
            x += col_width

    # Total row
    y -= row_height
    x = left
    for index, (_, col_width) in enumerate(COLUMNS):
        c.rect(x, y, col_width, row_height)
        c.setFont("Helvetica-Bold", 8)
        if index == 0:
            c.drawString(x + 1.5 * mm, y + 3.2 * mm, "TOTAL")
        elif index == 4:
            c.drawCentredString(x + col_width / 2, y + 3.2 * mm, f"{total_hours(timesheet.entries):.2f}")
        x += col_width

    y -= 12 * mm
    c.setFont("Helvetica-Oblique", 8)
    c.drawString(left, y, FOOTER_TEXT)

    y -= 14 * mm
    c.setFont("Helvetica-Bold", 9)
    c.drawString(left, y, "Driver:")
    c.setFont("Helvetica", 9)
    c.drawString(left + 14 * mm, y, employee_name or "")
    c.setFont("Helvetica-Bold", 9)
    c.drawString(left + 100 * mm, y, "Signature")
    c.line(left + 118 * mm, y - 1 * mm, left + 180 * mm, y - 1 * mm)
    draw_signature(c, timesheet.signature_data, left + 120 * mm, y, 55 * mm, 14 * mm)

    if timesheet.manager_comments:
        y -= 14 * mm
        c.setFont("Helvetica-Bold", 8)
        c.drawString(left, y, "Manager comments:")
        c.setFont("Helvetica", 8)
        c.drawString(left + 30 * mm, y, fit(c, timesheet.manager_comments, "Helvetica", 8, 150 * mm))

    c.showPage()


def render_timesheet_pdf(timesheet, employee_name: str = "") -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Timesheet {timesheet.id}")
    draw_timesheet(c, timesheet, employee_name)
    c.save()
    return buffer.getvalue()
