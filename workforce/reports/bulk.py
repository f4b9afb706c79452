"""
Bulk inspection export: every inspection in a date range drawn onto shared
canvases, split into parts once a part would exceed the configured size.
"""
import base64
import io
import json
import zipfile
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from workforce.config import get_settings
from workforce.logging_config import get_logger
from workforce.reports.inspection_pdf import draw_inspection

logger = get_logger(__name__)


@dataclass
class BulkExport:
    file_name: str
    content_type: str
    data: bytes


def chunked(items: Sequence, size: int) -> List[Sequence]:
    return [items[i:i + size] for i in range(0, len(items), size)]


def part_name(date_from, date_to, part: Optional[int] = None) -> str:
    suffix = f"_Part{part}" if part else ""
    return f"All_Inspections_{date_from}_to_{date_to}{suffix}.pdf"


def iter_bulk_export(inspections: Sequence, date_from, date_to,
                     max_per_pdf: Optional[int] = None) -> Iterator[dict]:
    """
    Yield ``init``, one ``progress`` per inspection, then ``complete`` whose
    ``export`` holds the finished file.

    Inspections without items still count towards progress but add no pages.
    """
    max_per_pdf = max_per_pdf or get_settings().max_inspections_per_pdf
    chunks = chunked(list(inspections), max_per_pdf)
    total = len(inspections)
    yield {"type": "init", "total": total, "needsZip": len(chunks) > 1, "numParts": len(chunks)}

    parts = []
    processed = 0
    for index, chunk in enumerate(chunks, start=1):
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        c.setTitle(f"Inspections {date_from} to {date_to}")
        for inspection in chunk:
            processed += 1
            if inspection.items:
                draw_inspection(c, inspection)
            else:
                logger.warning(f"Skipping inspection {inspection.id}: no items recorded")
            yield {
                "type": "progress",
                "current": processed,
                "total": total,
                "currentPart": index,
                "totalParts": len(chunks),
            }
        c.save()
        parts.append((part_name(date_from, date_to, index if len(chunks) > 1 else None), buffer.getvalue()))

    if len(parts) == 1:
        name, data = parts[0]
        export = BulkExport(name, "application/pdf", data)
    else:
        archive = io.BytesIO()
        with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
            for name, data in parts:
                zf.writestr(name, data)
        export = BulkExport(f"All_Inspections_{date_from}_to_{date_to}.zip", "application/zip", archive.getvalue())

    logger.info(f"Bulk export of {total} inspection(s) built as {export.file_name}")
    yield {"type": "complete", "export": export}


def build_bulk_export(inspections: Sequence, date_from, date_to,
                      max_per_pdf: Optional[int] = None) -> BulkExport:
    export = None
    for event in iter_bulk_export(inspections, date_from, date_to, max_per_pdf):
        if event["type"] == "complete":
            export = event["export"]
    return export


def ndjson_lines(inspections: Sequence, date_from, date_to,
                 max_per_pdf: Optional[int] = None) -> Iterator[str]:
    """Progress events as newline-delimited JSON, the file base64 encoded."""
    try:
        for event in iter_bulk_export(inspections, date_from, date_to, max_per_pdf):
            if event["type"] == "complete":
                export = event["export"]
                event = {
                    "type": "complete",
                    "data": base64.b64encode(export.data).decode("ascii"),
                    "fileName": export.file_name,
                    "contentType": export.content_type,
                }
            yield json.dumps(event) + "\n"
    except Exception as e:
        logger.exception("Streaming bulk PDF generation failed")
        yield json.dumps({"type": "error", "error": "Failed to generate PDFs", "details": str(e)}) + "\n"
