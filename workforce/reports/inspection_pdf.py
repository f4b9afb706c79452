"""
Weekly vehicle inspection pads, truck and van variants.

Each checklist item is a row and each day a column; cells carry the status
glyph from ``workforce.checklists``.
"""
import io

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from workforce.checklists import (
    DAY_HEADINGS, TRAILER_SECTION_START, TRUCK_CHECKLIST_ITEMS, VAN_CHECKLIST_ITEMS,
    build_check_grid, defects_and_comments, is_van_category, unique_items,
)
from workforce.reports.common import (
    DOTTED_LINE, draw_company_header, draw_form_number, fit, format_date, wrap,
)

LEGEND = "USE THE FOLLOWING:-  / = IN ORDER    X = REQUIRES ATTENTION    O = N/A"
LEGEND_NOTES = [
    "Any apparent defect which may effect safe operation of the vehicle or may lead to damage or imminent",
    "breakdown must be reported to your supervisor/workshop immediately",
]
DISTRIBUTION = "Distribution: White - Workshop Manager.    Yellow - Retained in Vehicle"

LEFT = 15 * mm
NUMBER_WIDTH = 8 * mm
ITEM_WIDTH = 81 * mm
DAY_WIDTH = 13 * mm
ROW_HEIGHT = 5.2 * mm


def _top_box(c, x, y, label, value, width):
    c.rect(x, y, width, 7 * mm)
    c.setFont("Helvetica-Bold", 7)
    c.drawString(x + 1.5 * mm, y + 2.3 * mm, label)
    label_width = c.stringWidth(label, "Helvetica-Bold", 7) + 3 * mm
    c.setFont("Helvetica", 9)
    c.drawString(x + label_width, y + 2.3 * mm, fit(c, value, "Helvetica", 9, width - label_width - 2 * mm))


def _day_header(c, y, label, value):
    """WEEK ENDING box followed by the day column headings."""
    label_width = NUMBER_WIDTH + ITEM_WIDTH
    _top_box(c, LEFT, y, label, value, label_width)
    x = LEFT + label_width
    c.setFont("Helvetica-Bold", 7)
    for heading in DAY_HEADINGS:
        c.rect(x, y, DAY_WIDTH, 7 * mm)
        c.drawCentredString(x + DAY_WIDTH / 2, y + 2.3 * mm, heading)
        x += DAY_WIDTH


def stored_descriptions(inspection) -> dict:
    """
    Item descriptions saved with the inspection, by item number. These win
    over the current checklist so older inspections print as they were recorded.
    """
    return {number: description for number, description in unique_items(inspection.items) if description}


def _item_row(c, y, number, description, grid):
    c.rect(LEFT, y, NUMBER_WIDTH, ROW_HEIGHT)
    c.rect(LEFT + NUMBER_WIDTH, y, ITEM_WIDTH, ROW_HEIGHT)
    c.setFont("Helvetica-Bold", 7)
    c.drawCentredString(LEFT + NUMBER_WIDTH / 2, y + 1.6 * mm, f"{number:02d}")
    c.setFont("Helvetica", 7.5)
    c.drawString(LEFT + NUMBER_WIDTH + 1.5 * mm, y + 1.6 * mm,
                 fit(c, description, "Helvetica", 7.5, ITEM_WIDTH - 3 * mm))
    x = LEFT + NUMBER_WIDTH + ITEM_WIDTH
    c.setFont("Helvetica-Bold", 9)
    for day in range(1, 8):
        c.rect(x, y, DAY_WIDTH, ROW_HEIGHT)
        glyph = grid.get((number, day), "")
        if glyph:
            c.drawCentredString(x + DAY_WIDTH / 2, y + 1.4 * mm, glyph)
        x += DAY_WIDTH


def _section_header(c, y, text):
    full_width = NUMBER_WIDTH + ITEM_WIDTH + 7 * DAY_WIDTH
    c.setFillGray(0.85)
    c.rect(LEFT, y, full_width, ROW_HEIGHT, fill=1)
    c.setFillGray(0)
    c.setFont("Helvetica-Bold", 8)
    c.drawCentredString(LEFT + full_width / 2, y + 1.6 * mm, text)


def _text_box(c, y, title, text, height):
    """Titled box with wrapped text; returns the y below it."""
    full_width = NUMBER_WIDTH + ITEM_WIDTH + 7 * DAY_WIDTH
    y -= height
    c.rect(LEFT, y, full_width, height)
    c.setFont("Helvetica-Bold", 8)
    c.drawString(LEFT + 2 * mm, y + height - 4 * mm, title)
    c.setFont("Helvetica", 7.5)
    line_y = y + height - 8 * mm
    for line in wrap(text or DOTTED_LINE, "Helvetica", 7.5, full_width - 4 * mm):
        if line_y < y + 1.5 * mm:
            break
        c.drawString(LEFT + 2 * mm, line_y, line)
        line_y -= 3.3 * mm
    return y


def _footer(c, y, inspection, employee_name, checklist):
    y -= 6 * mm
    c.setFont("Helvetica-Bold", 8)
    c.drawString(LEFT, y, f"Checked By: {inspection.checked_by or employee_name or ''}")

    y -= 2 * mm
    defects = defects_and_comments(inspection.items, checklist)
    if inspection.defects_comments:
        defects = f"{defects}\n{inspection.defects_comments}" if defects else inspection.defects_comments
    y = _text_box(c, y, "DEFECTS / COMMENTS", defects, 24 * mm)
    y = _text_box(c, y - 2 * mm, "ACTION TAKEN (office use only)",
                  inspection.action_taken or inspection.manager_comments, 16 * mm)

    y -= 5 * mm
    c.setFont("Helvetica-Bold", 7.5)
    c.drawString(LEFT, y, LEGEND)
    c.setFont("Helvetica", 6.5)
    for note in LEGEND_NOTES:
        y -= 3.2 * mm
        c.drawString(LEFT, y, note)
    y -= 5 * mm
    c.setFont("Helvetica-Bold", 7)
    c.drawString(LEFT, y, DISTRIBUTION)


def draw_truck_inspection(c: canvas.Canvas, inspection, vehicle_reg: str = "", employee_name: str = "") -> None:
    """Vehicle inspection pad with the artic/trailer section."""
    width, height = A4
    draw_form_number(c, inspection.id, width, height - 10 * mm)
    y = draw_company_header(c, width, height - 14 * mm)
    c.setFont("Helvetica-Bold", 12)
    c.drawCentredString(width / 2, y, "VEHICLE INSPECTION PAD")

    y -= 10 * mm
    _top_box(c, LEFT, y, "REG NO.", vehicle_reg, 45 * mm)
    _top_box(c, LEFT + 45 * mm, y, "MILEAGE.", str(inspection.mileage or ""), 45 * mm)
    _top_box(c, LEFT + 90 * mm, y, "DRIVER NAME.", employee_name, 90 * mm)
    y -= 7 * mm
    _day_header(c, y, "WEEK ENDING.", format_date(inspection.week_ending))

    descriptions = stored_descriptions(inspection)
    grid = build_check_grid(inspection.items)
    for number, description in enumerate(TRUCK_CHECKLIST_ITEMS, start=1):
        if number == TRAILER_SECTION_START:
            y -= ROW_HEIGHT
            _section_header(c, y, "ARTIC / TRAILER COMBINATIONS")
        y -= ROW_HEIGHT
        _item_row(c, y, number, descriptions.get(number, description), grid)

    _footer(c, y, inspection, employee_name, TRUCK_CHECKLIST_ITEMS)
    c.showPage()


def draw_van_inspection(c: canvas.Canvas, inspection, vehicle_reg: str = "", employee_name: str = "") -> None:
    """Company van inspection pad."""
    width, height = A4
    draw_form_number(c, inspection.id, width, height - 10 * mm)
    y = draw_company_header(c, width, height - 14 * mm)
    c.setFont("Helvetica-Bold", 12)
    c.drawCentredString(width / 2, y, "COMPANY VAN INSPECTION PAD")

    y -= 10 * mm
    _top_box(c, LEFT, y, "REG NO.", vehicle_reg, 45 * mm)
    _top_box(c, LEFT + 45 * mm, y, "MILEAGE", str(inspection.mileage or ""), 45 * mm)
    _top_box(c, LEFT + 90 * mm, y, "DRIVER NAME", employee_name, 90 * mm)
    y -= 7 * mm
    _day_header(c, y, "WEEK ENDING DATE.", format_date(inspection.week_ending))

    descriptions = stored_descriptions(inspection)
    count = max([len(VAN_CHECKLIST_ITEMS)] + list(descriptions))
    grid = build_check_grid(inspection.items)
    for number in range(1, count + 1):
        fallback = VAN_CHECKLIST_ITEMS[number - 1] if number <= len(VAN_CHECKLIST_ITEMS) else f"Item {number}"
        y -= ROW_HEIGHT
        _item_row(c, y, number, descriptions.get(number, fallback), grid)

    _footer(c, y, inspection, employee_name, VAN_CHECKLIST_ITEMS)
    c.showPage()


def draw_inspection(c: canvas.Canvas, inspection) -> None:
    """Pick the van or truck pad from the vehicle's category."""
    vehicle = inspection.vehicle
    vehicle_reg = vehicle.reg_number if vehicle else ""
    employee_name = inspection.inspector.full_name if inspection.inspector else ""
    if vehicle is not None and is_van_category(vehicle.template_type):
        draw_van_inspection(c, inspection, vehicle_reg, employee_name)
    else:
        draw_truck_inspection(c, inspection, vehicle_reg, employee_name)


def render_inspection_pdf(inspection) -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Inspection {inspection.id}")
    draw_inspection(c, inspection)
    c.save()
    return buffer.getvalue()
