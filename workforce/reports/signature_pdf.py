"""
Signature records for toolbox talks and RAMS documents.
"""
import io
from datetime import datetime
from typing import Iterable, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from workforce.reports.common import draw_signature, format_date, format_datetime, wrap

RAMS_ACTION_LABELS = {
    "downloaded": "Downloaded",
    "opened": "Opened in browser",
    "emailed": "Email",
}


def compliance_summary(total: int, signed: int) -> dict:
    rate = round(signed / total * 100) if total else 0
    return {"total": total, "signed": signed, "pending": total - signed, "rate": rate}


def _status(value) -> str:
    return getattr(value, "value", value) or ""


def _when(value) -> str:
    return value.isoformat() if value else ""


class _Writer:
    """Top-down text writer that starts a new page when it runs out of room."""

    def __init__(self, c: canvas.Canvas, footer: str):
        self.c = c
        self.footer = footer
        self.width, self.height = A4
        self.left = 20 * mm
        self.right = self.width - 20 * mm
        self.y = self.height - 20 * mm

    def _finish_page(self):
        self.c.setFont("Helvetica", 7)
        self.c.setFillGray(0.45)
        self.c.drawCentredString(self.width / 2, 10 * mm, self.footer)
        self.c.setFillGray(0)

    def new_page(self):
        self._finish_page()
        self.c.showPage()
        self.y = self.height - 20 * mm

    def need(self, space: float):
        if self.y - space < 20 * mm:
            self.new_page()

    def text(self, value: str, font: str = "Helvetica", size: float = 9, gap: float = 1.5 * mm):
        for line in wrap(value, font, size, self.right - self.left):
            self.need(size + gap)
            self.c.setFont(font, size)
            self.c.drawString(self.left, self.y, line)
            self.y -= size + gap

    def title(self, value: str, subtitle: Optional[str] = None):
        self.text(value, "Helvetica-Bold", 16, 3 * mm)
        if subtitle:
            self.text(subtitle, "Helvetica", 10, 2 * mm)
        self.y -= 2 * mm

    def field(self, label: str, value: str):
        self.need(6 * mm)
        self.c.setFont("Helvetica-Bold", 9)
        self.c.drawString(self.left, self.y, label)
        self.c.setFont("Helvetica", 9)
        lines = wrap(value, "Helvetica", 9, self.right - self.left - 40 * mm)
        for line in lines:
            self.c.drawString(self.left + 40 * mm, self.y, line)
            self.y -= 4.5 * mm
            self.need(5 * mm)

    def section(self, value: str):
        self.y -= 3 * mm
        self.need(12 * mm)
        self.text(value, "Helvetica-Bold", 12, 2 * mm)
        self.c.line(self.left, self.y + 1 * mm, self.right, self.y + 1 * mm)
        self.y -= 2 * mm

    def stats(self, items: List[tuple]):
        """A row of labelled boxes."""
        self.need(20 * mm)
        box_width = (self.right - self.left) / len(items)
        top = self.y
        for index, (value, label) in enumerate(items):
            x = self.left + index * box_width
            self.c.rect(x + 1 * mm, top - 16 * mm, box_width - 2 * mm, 16 * mm)
            self.c.setFont("Helvetica-Bold", 14)
            self.c.drawCentredString(x + box_width / 2, top - 8 * mm, str(value))
            self.c.setFont("Helvetica", 7.5)
            self.c.drawCentredString(x + box_width / 2, top - 13 * mm, label)
        self.y = top - 20 * mm

    def signature(self, data: Optional[str]):
        self.need(24 * mm)
        self.c.setFont("Helvetica-Bold", 9)
        self.c.drawString(self.left, self.y, "Signature:")
        box_y = self.y - 20 * mm
        self.c.rect(self.left + 40 * mm, box_y, 70 * mm, 20 * mm)
        if not draw_signature(self.c, data, self.left + 41 * mm, box_y + 1 * mm, 68 * mm, 18 * mm):
            self.c.setFont("Helvetica-Oblique", 8)
            self.c.drawString(self.left + 42 * mm, box_y + 9 * mm, "No signature image")
        self.y = box_y - 4 * mm

    def divider(self):
        self.c.setStrokeGray(0.8)
        self.c.line(self.left, self.y + 2 * mm, self.right, self.y + 2 * mm)
        self.c.setStrokeGray(0)
        self.y -= 3 * mm

    def close(self):
        self._finish_page()
        self.c.showPage()


def render_toolbox_talk_pdf(message, recipients: Iterable, sender_name: str = "") -> bytes:
    """
    Signature record for a toolbox talk: the talk itself, a compliance
    summary, every signature, then who is still outstanding.
    """
    recipients = list(recipients)
    signed = [r for r in recipients if _status(r.status) == "SIGNED"]
    pending = [r for r in recipients if _status(r.status) != "SIGNED"]
    summary = compliance_summary(len(recipients), len(signed))
    generated = datetime.now().strftime("%d/%m/%Y")

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Toolbox Talk - {message.subject}")
    writer = _Writer(c, f"Generated by MPDEE Digidocs - {generated}")

    writer.title(message.subject, "Toolbox Talk - Signature Record")
    writer.field("Sent By:", sender_name or "")
    writer.field("Sent Date:", format_datetime(message.created_at))
    writer.field("Priority:", _status(message.priority))

    writer.section("Message")
    writer.text(message.body or "")

    writer.section("Compliance Summary")
    writer.stats([
        (summary["total"], "Total Recipients"),
        (summary["signed"], "Signed"),
        (summary["pending"], "Pending"),
        (f"{summary['rate']}%", "Compliance Rate"),
    ])

    if signed:
        writer.section("Signatures")
        for recipient in sorted(signed, key=lambda r: _when(r.signed_at)):
            writer.field("Employee Name:", recipient.user.full_name if recipient.user else "")
            writer.field("Signed Date:", format_datetime(recipient.signed_at))
            writer.signature(recipient.signature_data)
            writer.divider()

    if pending:
        writer.section("Pending Signatures")
        for recipient in sorted(pending, key=lambda r: r.user.full_name if r.user else ""):
            name = recipient.user.full_name if recipient.user else ""
            writer.text(f"{name} - {_status(recipient.status).title()}")

    writer.close()
    c.save()
    return buffer.getvalue()


def render_rams_pdf(document, assignments: Iterable, visitor_signatures: Iterable) -> bytes:
    """
    Signature record for a RAMS document covering employees and visitors.
    """
    assignments = list(assignments)
    visitors = list(visitor_signatures)
    signed = [a for a in assignments if _status(a.status) == "signed"]
    outstanding = [a for a in assignments if _status(a.status) != "signed"]
    summary = compliance_summary(len(assignments), len(signed))
    generated = datetime.now().strftime("%d/%m/%Y")

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"RAMS - {document.title}")
    writer = _Writer(c, f"Generated by MPDEE Digidocs - {generated}")

    writer.title(document.title, "Risk Assessment & Method Statement - Signature Record")
    writer.section("Document Information")
    if document.description:
        writer.field("Description:", document.description)
    writer.field("File Name:", document.file_name)
    writer.field("File Type:", _status(document.file_type).upper())
    writer.field("Uploaded By:", document.uploader.full_name if document.uploader else "")
    writer.field("Upload Date:", format_date(document.created_at))

    writer.section("Compliance Summary")
    writer.stats([
        (summary["total"], "Total Assigned"),
        (summary["signed"], "Total Signed"),
        (f"{summary['rate']}%", "Compliance Rate"),
        (len(visitors), "Visitor Signatures"),
    ])

    if signed:
        writer.new_page()
        writer.title("Employee Signatures", document.title)
        for assignment in sorted(signed, key=lambda a: _when(a.signed_at)):
            employee = assignment.employee
            writer.field("Employee Name:", employee.full_name if employee else "")
            if employee is not None and employee.role is not None:
                writer.field("Role:", employee.role.display_name)
            writer.field("Signed Date:", format_datetime(assignment.signed_at))
            if assignment.action_taken:
                label = RAMS_ACTION_LABELS.get(assignment.action_taken, assignment.action_taken)
                writer.field("Document Viewed:", label)
            writer.signature(assignment.signature_data)
            if assignment.comments:
                writer.field("Comments:", assignment.comments)
            writer.divider()

    if outstanding:
        writer.section("Outstanding")
        for assignment in outstanding:
            name = assignment.employee.full_name if assignment.employee else ""
            writer.text(f"{name} - {_status(assignment.status).title()}")

    if visitors:
        writer.new_page()
        writer.title("Visitor Signatures", document.title)
        for visitor in sorted(visitors, key=lambda v: _when(v.signed_at)):
            writer.field("Visitor Name:", visitor.visitor_name)
            if visitor.visitor_company:
                writer.field("Company:", visitor.visitor_company)
            if visitor.visitor_role:
                writer.field("Role:", visitor.visitor_role)
            writer.field("Signed Date:", format_datetime(visitor.signed_at))
            if visitor.recorder is not None:
                writer.field("Recorded By:", visitor.recorder.full_name)
            writer.signature(visitor.signature_data)
            writer.divider()

    writer.close()
    c.save()
    return buffer.getvalue()
