"""
Drawing helpers shared by the PDF forms.
"""
import base64
import binascii
import io
from datetime import date, datetime
from typing import List, Optional

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from workforce.config import get_settings
from workforce.logging_config import get_logger

logger = get_logger(__name__)

DOTTED_LINE = "." * 150


def form_number(record_id) -> str:
    """Printed form number: the record id padded to five digits."""
    try:
        return f"{int(record_id):05d}"
    except (TypeError, ValueError):
        return "00000"


def format_date(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")
    return ""


def format_datetime(value) -> str:
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M")
    return format_date(value)


def decode_data_url(data: Optional[str]) -> Optional[bytes]:
    """Raw image bytes from a ``data:image/png;base64,...`` string."""
    if not data:
        return None
    payload = data.split(",", 1)[1] if data.startswith("data:") else data
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        return None


def draw_signature(c: canvas.Canvas, data: Optional[str], x: float, y: float,
                   width: float, height: float) -> bool:
    """Draw a captured signature image with its bottom-left corner at (x, y)."""
    raw = decode_data_url(data)
    if not raw:
        return False
    try:
        c.drawImage(ImageReader(io.BytesIO(raw)), x, y, width=width, height=height,
                    preserveAspectRatio=True, anchor="sw", mask="auto")
    except (OSError, ValueError) as exc:
        logger.warning(f"Could not draw signature image: {exc}")
        return False
    return True


def wrap(text: str, font: str, size: float, width: float) -> List[str]:
    lines = []
    for paragraph in (text or "").splitlines() or [""]:
        lines.extend(simpleSplit(paragraph, font, size, width) or [""])
    return lines


def fit(c: canvas.Canvas, text: str, font: str, size: float, width: float) -> str:
    """Trim text with an ellipsis so it fits ``width``."""
    text = text or ""
    if c.stringWidth(text, font, size) <= width:
        return text
    while text and c.stringWidth(text + "...", font, size) > width:
        text = text[:-1]
    return text + "..."


def draw_form_number(c: canvas.Canvas, record_id, page_width: float, top: float) -> None:
    c.setFont("Helvetica-Bold", 10)
    c.drawRightString(page_width - 15 * mm, top, form_number(record_id))


def draw_company_header(c: canvas.Canvas, page_width: float, top: float,
                        with_registration: bool = True) -> float:
    """Company name, address and phone centred from ``top``; returns the next free y."""
    settings = get_settings()
    centre = page_width / 2
    y = top
    c.setFont("Helvetica-Bold", 16)
    c.drawCentredString(centre, y, settings.company_name)
    y -= 5 * mm
    c.setFont("Helvetica", 6.5)
    for line in simpleSplit(settings.company_address, "Helvetica", 6.5, page_width - 40 * mm):
        c.drawCentredString(centre, y, line)
        y -= 3 * mm
    c.drawCentredString(centre, y, settings.company_phone)
    y -= 3 * mm
    if with_registration:
        c.drawCentredString(centre, y, settings.company_registration)
        y -= 3 * mm
    return y - 2 * mm
