"""
Dashboard statistics for managers.
"""
from datetime import date, timedelta
from typing import Optional
import calendar

from sqlalchemy import func, select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.models.inspection import InspectionItem, InspectionStatus, ItemStatus, VehicleInspection
from workforce.models.timesheet import Timesheet, TimesheetEntry, TimesheetStatus
from workforce.models.user import Profile, Role

APPROVED_TIMESHEET_STATUSES = (
    TimesheetStatus.APPROVED, TimesheetStatus.ADJUSTED, TimesheetStatus.PROCESSED,
)


def week_bounds(today: date):
    """Monday and Sunday of the week containing ``today``."""
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


def month_bounds(today: date):
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


async def _approved_hours(db: AsyncSession, start: date, end: date) -> float:
    result = await db.execute(
        select(func.coalesce(func.sum(TimesheetEntry.daily_total), 0.0))
        .join(Timesheet, TimesheetEntry.timesheet_id == Timesheet.id)
        .where(
            Timesheet.status.in_(APPROVED_TIMESHEET_STATUSES),
            Timesheet.week_ending >= start,
            Timesheet.week_ending <= end,
            TimesheetEntry.did_not_work.is_(False),
        )
    )
    return round(float(result.scalar_one() or 0), 2)


async def _count(db: AsyncSession, statement) -> int:
    result = await db.execute(statement)
    return int(result.scalar_one() or 0)


async def get_stats(db: AsyncSession, today: Optional[date] = None) -> dict:
    today = today or date.today()
    week_start, week_end = week_bounds(today)
    month_start, month_end = month_bounds(today)

    pending_timesheets = await _count(
        db, select(func.count(Timesheet.id)).where(Timesheet.status == TimesheetStatus.SUBMITTED)
    )
    active_employees = await _count(
        db,
        select(func.count(Profile.id))
        .outerjoin(Role, Profile.role_id == Role.id)
        .where(
            Profile.is_active.is_(True),
            or_(Role.id.is_(None), Role.is_manager_admin.is_(False)),
        ),
    )

    completed = VehicleInspection.status != InspectionStatus.DRAFT
    week_completed = await _count(
        db,
        select(func.count(VehicleInspection.id)).where(
            completed,
            VehicleInspection.week_ending >= week_start,
            VehicleInspection.week_ending <= week_end,
        ),
    )
    month_completed = await _count(
        db,
        select(func.count(VehicleInspection.id)).where(
            completed,
            VehicleInspection.week_ending >= month_start,
            VehicleInspection.week_ending <= month_end,
        ),
    )
    pending_inspections = await _count(
        db,
        select(func.count(VehicleInspection.id)).where(
            VehicleInspection.status == InspectionStatus.SUBMITTED
        ),
    )

    item_counts = await db.execute(
        select(InspectionItem.status, func.count(InspectionItem.id))
        .join(VehicleInspection, InspectionItem.inspection_id == VehicleInspection.id)
        .where(
            VehicleInspection.week_ending >= month_start,
            VehicleInspection.week_ending <= month_end,
            InspectionItem.status.in_([ItemStatus.OK, ItemStatus.ATTENTION]),
        )
        .group_by(InspectionItem.status)
    )
    counts = {ItemStatus(status): count for status, count in item_counts.all()}
    passed = counts.get(ItemStatus.OK, 0)
    failed = counts.get(ItemStatus.ATTENTION, 0)
    pass_rate = round(passed / (passed + failed) * 100, 1) if (passed + failed) else 0.0

    outstanding_defects = await _count(
        db,
        select(func.count(InspectionItem.id))
        .join(VehicleInspection, InspectionItem.inspection_id == VehicleInspection.id)
        .where(
            InspectionItem.status == ItemStatus.ATTENTION,
            VehicleInspection.week_ending >= today - timedelta(days=30),
            VehicleInspection.status != InspectionStatus.REVIEWED,
        ),
    )

    return {
        "timesheets": {
            "week_hours": await _approved_hours(db, week_start, week_end),
            "month_hours": await _approved_hours(db, month_start, month_end),
            "pending_approvals": pending_timesheets,
        },
        "inspections": {
            "week_completed": week_completed,
            "month_completed": month_completed,
            "pending_approvals": pending_inspections,
            "pass_rate": pass_rate,
            "outstanding_defects": outstanding_defects,
        },
        "employees": {"active": active_employees},
        "summary": {
            "total_pending_approvals": pending_timesheets + pending_inspections,
            "needs_attention": outstanding_defects,
        },
    }
