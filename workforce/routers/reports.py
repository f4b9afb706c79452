"""
Reporting routes: dashboard statistics and inspection exports.
"""
import json
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response, StreamingResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import require_manager_admin
from workforce.database import get_db
from workforce.logging_config import get_logger
from workforce.models.inspection import InspectionStatus, VehicleInspection
from workforce.models.user import Profile
from workforce.reports.bulk import build_bulk_export, ndjson_lines
from workforce.reports.excel import (
    XLSX_MEDIA_TYPE, defect_rows, render_compliance_report, render_defects_report, report_filename,
)
from workforce.routers.timesheets import timesheet_pdf_response
from workforce.schemas.report import BulkPdfRequest, Stats
from workforce.services.stats import get_stats

router = APIRouter(prefix="/reports", tags=["reports"])
logger = get_logger(__name__)


async def _inspections_between(db: AsyncSession, date_from: Optional[date], date_to: Optional[date],
                               newest_first: bool = True,
                               exclude_drafts: bool = False) -> List[VehicleInspection]:
    query = select(VehicleInspection)
    if date_from is not None:
        query = query.where(VehicleInspection.week_ending >= date_from)
    if date_to is not None:
        query = query.where(VehicleInspection.week_ending <= date_to)
    if exclude_drafts:
        query = query.where(VehicleInspection.status != InspectionStatus.DRAFT)
    if newest_first:
        query = query.order_by(VehicleInspection.week_ending.desc(), VehicleInspection.id.desc())
    else:
        query = query.order_by(VehicleInspection.week_ending, VehicleInspection.id)
    result = await db.execute(query)
    return list(result.scalars().all())


def _xlsx_response(content: bytes, file_name: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/stats", response_model=Stats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Hours, approvals and inspection health for the manager dashboard.
    """
    return await get_stats(db)


@router.get("/inspections/compliance")
async def get_compliance_report(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Inspection compliance workbook, one row per inspection.
    """
    inspections = await _inspections_between(db, date_from, date_to)
    if not inspections:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No inspections found for the specified criteria",
        )
    file_name = report_filename("Inspection_Compliance", date_from, date_to, date.today())
    return _xlsx_response(await run_in_threadpool(render_compliance_report, inspections), file_name)


@router.get("/inspections/defects")
async def get_defects_report(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Defects workbook, one row per item marked as requiring attention.
    """
    rows = defect_rows(await _inspections_between(db, date_from, date_to))
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No defects found for the specified criteria",
        )
    file_name = report_filename("Defects_Report", date_from, date_to, date.today())
    return _xlsx_response(await run_in_threadpool(render_defects_report, rows), file_name)


@router.get("/inspections/bulk-pdf")
async def get_bulk_inspection_pdf(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Every submitted inspection in the range as one PDF, or a ZIP of parts
    when there are too many for a single file.
    """
    if date_from is None or date_to is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from and date_to are required",
        )
    inspections = await _inspections_between(db, date_from, date_to, newest_first=False, exclude_drafts=True)
    if not inspections:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No inspections found in the selected date range",
        )

    export = await run_in_threadpool(build_bulk_export, inspections, date_from, date_to)
    return Response(
        content=export.data,
        media_type=export.content_type,
        headers={"Content-Disposition": f'attachment; filename="{export.file_name}"'},
    )


def _error_line(message: str):
    yield json.dumps({"type": "error", "error": message}) + "\n"


@router.post("/inspections/bulk-pdf")
async def stream_bulk_inspection_pdf(
    payload: BulkPdfRequest,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Same export as the GET variant, streamed as newline-delimited JSON
    progress events ending with the base64 encoded file.
    """
    media_type = "application/x-ndjson"
    if not payload.date_from or not payload.date_to:
        return StreamingResponse(_error_line("date_from and date_to are required"), media_type=media_type)
    try:
        date_from = date.fromisoformat(payload.date_from)
        date_to = date.fromisoformat(payload.date_to)
    except ValueError:
        return StreamingResponse(_error_line("Dates must be in YYYY-MM-DD format"), media_type=media_type)

    inspections = await _inspections_between(db, date_from, date_to, newest_first=False, exclude_drafts=True)
    if not inspections:
        return StreamingResponse(
            _error_line("No inspections found in the selected date range"), media_type=media_type
        )

    logger.info(f"Streaming bulk export of {len(inspections)} inspection(s) for user {current_user.id}")
    return StreamingResponse(ndjson_lines(inspections, date_from, date_to), media_type=media_type)


@router.get("/timesheets/{timesheet_id}/pdf")
async def get_timesheet_report_pdf(
    timesheet_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    return await timesheet_pdf_response(db, timesheet_id, current_user)
