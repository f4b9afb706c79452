"""
Timesheet routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import get_current_active_user, require_manager_admin
from workforce.database import get_db
from workforce.models.timesheet import Timesheet, TimesheetStatus
from workforce.models.user import Profile
from workforce.reports.timesheet_pdf import render_timesheet_pdf
from workforce.schemas.timesheet import (
    Manager, Timesheet as TimesheetSchema, TimesheetAdjust, TimesheetCreate, TimesheetReview,
    TimesheetSubmit, TimesheetUpdate,
)
from workforce.services import timesheets as service

router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@router.get("/", response_model=List[TimesheetSchema])
async def get_timesheets(
    status_filter: Optional[TimesheetStatus] = Query(None, alias="status"),
    user_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Get timesheets, newest week first. Employees only see their own.
    """
    query = select(Timesheet).order_by(Timesheet.week_ending.desc(), Timesheet.id.desc())
    if service.can_manage(current_user):
        if user_id is not None:
            query = query.where(Timesheet.user_id == user_id)
    else:
        query = query.where(Timesheet.user_id == current_user.id)
    if status_filter is not None:
        query = query.where(Timesheet.status == status_filter)

    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/managers", response_model=List[Manager])
async def get_managers(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Managers who can be notified about an adjustment.
    """
    return await service.list_managers(db)


@router.post("/", response_model=TimesheetSchema, status_code=status.HTTP_201_CREATED)
async def create_timesheet(
    payload: TimesheetCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    return await service.create_timesheet(
        db, current_user, payload.week_ending, payload.reg_number, payload.entries
    )


@router.get("/{timesheet_id}", response_model=TimesheetSchema)
async def get_timesheet(
    timesheet_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    timesheet = await service.load_timesheet(db, timesheet_id)
    service.ensure_can_view(timesheet, current_user)
    return timesheet


@router.put("/{timesheet_id}", response_model=TimesheetSchema)
async def update_timesheet(
    timesheet_id: int,
    payload: TimesheetUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Replace the registration and/or entries of a draft or rejected timesheet.
    """
    timesheet = await service.load_timesheet(db, timesheet_id)
    return await service.update_timesheet(
        db, timesheet, current_user, payload.reg_number, payload.entries
    )


@router.post("/{timesheet_id}/submit", response_model=TimesheetSchema)
async def submit_timesheet(
    timesheet_id: int,
    payload: TimesheetSubmit,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    timesheet = await service.load_timesheet(db, timesheet_id)
    return await service.submit_timesheet(db, timesheet, current_user, payload.signature_data)


@router.post("/{timesheet_id}/review", response_model=TimesheetSchema)
async def review_timesheet(
    timesheet_id: int,
    payload: TimesheetReview,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    timesheet = await service.load_timesheet(db, timesheet_id)
    return await service.review_timesheet(
        db, timesheet, current_user, payload.decision, payload.manager_comments
    )


@router.post("/{timesheet_id}/adjust", response_model=TimesheetSchema)
async def adjust_timesheet(
    timesheet_id: int,
    payload: TimesheetAdjust,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Mark an approved timesheet as adjusted and notify the employee and
    any selected managers.
    """
    timesheet = await service.load_timesheet(db, timesheet_id)
    return await service.adjust_timesheet(
        db, timesheet, current_user, payload.comments, payload.notify_manager_ids
    )


@router.post("/{timesheet_id}/process", response_model=TimesheetSchema)
async def process_timesheet(
    timesheet_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    timesheet = await service.load_timesheet(db, timesheet_id)
    return await service.process_timesheet(db, timesheet)


async def timesheet_pdf_response(db: AsyncSession, timesheet_id: int, user: Profile) -> Response:
    timesheet = await service.load_timesheet(db, timesheet_id)
    service.ensure_can_view(timesheet, user)
    employee_name = timesheet.employee.full_name if timesheet.employee else ""
    content = await run_in_threadpool(render_timesheet_pdf, timesheet, employee_name)
    file_name = f"timesheet-{employee_name.replace(' ', '-') or 'employee'}-{timesheet.week_ending}.pdf"
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/{timesheet_id}/pdf")
async def get_timesheet_pdf(
    timesheet_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Download the timesheet as the printed form.
    """
    return await timesheet_pdf_response(db, timesheet_id, current_user)
