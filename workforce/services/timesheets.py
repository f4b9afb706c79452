"""
Timesheet maths and the draft -> submitted -> approved -> processed workflow.

Days run 1 (Monday) to 7 (Sunday) and the week ends on the Sunday.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.checklists import DAY_NAMES
from workforce.database import utcnow
from workforce.exceptions import NotFoundError, PermissionDeniedError, ValidationError, ConflictError
from workforce.logging_config import get_logger
from workforce.models.message import MessagePriority, MessageType
from workforce.models.timesheet import Timesheet, TimesheetEntry, TimesheetStatus
from workforce.models.user import Profile, Role
from workforce.services.notifications import create_message

logger = get_logger(__name__)

EDITABLE_STATUSES = (TimesheetStatus.DRAFT, TimesheetStatus.REJECTED)


@dataclass
class DayRow:
    """A printable timesheet line; blank when nothing was recorded."""
    day_of_week: int
    day_name: str
    time_started: Optional[str] = None
    time_finished: Optional[str] = None
    job_number: Optional[str] = None
    working_in_yard: bool = False
    did_not_work: bool = False
    daily_total: Optional[float] = None
    remarks: Optional[str] = None


def _to_minutes(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes


def calculate_daily_total(time_started: Optional[str], time_finished: Optional[str]) -> Optional[float]:
    """
    Hours worked between two ``HH:MM`` times, to 2 decimal places.

    A finish before the start is taken as the next day.
    """
    start = _to_minutes(time_started)
    finish = _to_minutes(time_finished)
    if start is None or finish is None:
        return None
    if finish < start:
        finish += 24 * 60
    return round((finish - start) / 60, 2)


def normalise_entry(data: dict) -> dict:
    """Apply the did-not-work rule and fill in a missing daily total."""
    entry = dict(data)
    if entry.get("did_not_work"):
        entry["time_started"] = None
        entry["time_finished"] = None
        entry["working_in_yard"] = False
        entry["daily_total"] = None
    elif entry.get("daily_total") is None:
        entry["daily_total"] = calculate_daily_total(entry.get("time_started"), entry.get("time_finished"))
    return entry


def week_days(entries: Iterable) -> List[DayRow]:
    """Seven rows Monday to Sunday, blank where no entry exists."""
    by_day = {int(entry.day_of_week): entry for entry in entries}
    rows = []
    for day in range(1, 8):
        entry = by_day.get(day)
        row = DayRow(day_of_week=day, day_name=DAY_NAMES[day - 1])
        if entry is not None:
            row.time_started = entry.time_started
            row.time_finished = entry.time_finished
            row.job_number = entry.job_number
            row.working_in_yard = bool(entry.working_in_yard)
            row.did_not_work = bool(entry.did_not_work)
            row.daily_total = entry.daily_total
            row.remarks = entry.remarks
        rows.append(row)
    return rows


def total_hours(entries: Iterable) -> float:
    total = 0.0
    for entry in entries:
        if entry.did_not_work:
            continue
        total += entry.daily_total or 0
    return round(total, 2)


def format_remarks(entry) -> str:
    job_number = getattr(entry, "job_number", None)
    remarks = getattr(entry, "remarks", None)
    if job_number and remarks:
        return f"Job number {job_number} - {remarks}"
    if job_number:
        return f"Job number {job_number}"
    return remarks or ""


def validate_week_ending(week_ending: date) -> date:
    if week_ending.weekday() != 6:
        raise ValidationError("Week ending must be a Sunday")
    return week_ending


def week_ending_for(day: date) -> date:
    """The Sunday that closes the week containing ``day``."""
    return day + timedelta(days=6 - day.weekday())


def format_week_ending(week_ending: date) -> str:
    return week_ending.strftime("%d/%m/%Y")


async def load_timesheet(db: AsyncSession, timesheet_id: int) -> Timesheet:
    result = await db.execute(
        select(Timesheet)
        .where(Timesheet.id == timesheet_id)
        .execution_options(populate_existing=True)
    )
    timesheet = result.scalar_one_or_none()
    if timesheet is None:
        raise NotFoundError("Timesheet not found")
    return timesheet


def can_manage(user: Profile) -> bool:
    return user.is_manager_admin or user.is_admin


def ensure_can_view(timesheet: Timesheet, user: Profile) -> None:
    if timesheet.user_id != user.id and not can_manage(user):
        raise PermissionDeniedError("Access denied")


def _build_entries(entries: Iterable) -> List[TimesheetEntry]:
    rows = []
    seen = set()
    for entry in entries:
        data = normalise_entry(entry.model_dump() if hasattr(entry, "model_dump") else entry)
        if data["day_of_week"] in seen:
            raise ValidationError(f"Duplicate entry for {DAY_NAMES[data['day_of_week'] - 1]}")
        seen.add(data["day_of_week"])
        rows.append(TimesheetEntry(**data))
    return rows


async def create_timesheet(db: AsyncSession, user: Profile, week_ending: date,
                           reg_number: Optional[str] = None, entries: Iterable = ()) -> Timesheet:
    validate_week_ending(week_ending)
    existing = await db.execute(
        select(Timesheet.id).where(Timesheet.user_id == user.id, Timesheet.week_ending == week_ending)
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("A timesheet already exists for this week")

    timesheet = Timesheet(user_id=user.id, week_ending=week_ending, reg_number=reg_number)
    timesheet.entries = _build_entries(entries)
    db.add(timesheet)
    await db.commit()
    logger.info(f"Timesheet {timesheet.id} created for user {user.id}, w/e {week_ending}")
    return await load_timesheet(db, timesheet.id)


async def update_timesheet(db: AsyncSession, timesheet: Timesheet, user: Profile,
                           reg_number: Optional[str] = None, entries: Optional[Iterable] = None) -> Timesheet:
    if timesheet.user_id != user.id:
        raise PermissionDeniedError("Only the owner can edit a timesheet")
    if timesheet.status not in EDITABLE_STATUSES:
        raise ValidationError("Only draft or rejected timesheets can be edited")

    if reg_number is not None:
        timesheet.reg_number = reg_number
    if entries is not None:
        new_entries = _build_entries(entries)
        # Old rows must be gone before the new ones hit the unique day constraint
        timesheet.entries.clear()
        await db.flush()
        timesheet.entries.extend(new_entries)
    await db.commit()
    return await load_timesheet(db, timesheet.id)


async def submit_timesheet(db: AsyncSession, timesheet: Timesheet, user: Profile,
                           signature_data: str) -> Timesheet:
    if timesheet.user_id != user.id:
        raise PermissionDeniedError("Only the owner can submit a timesheet")
    if timesheet.status not in EDITABLE_STATUSES:
        raise ValidationError("Only draft or rejected timesheets can be submitted")
    if not (signature_data or "").strip():
        raise ValidationError("Signature is required")

    now = utcnow()
    timesheet.signature_data = signature_data
    timesheet.signed_at = now
    timesheet.submitted_at = now
    timesheet.status = TimesheetStatus.SUBMITTED
    await db.commit()
    logger.info(f"Timesheet {timesheet.id} submitted")
    return await load_timesheet(db, timesheet.id)


async def review_timesheet(db: AsyncSession, timesheet: Timesheet, reviewer: Profile,
                           decision: str, manager_comments: Optional[str] = None) -> Timesheet:
    if timesheet.status != TimesheetStatus.SUBMITTED:
        raise ValidationError("Only submitted timesheets can be reviewed")
    if decision == "rejected" and not (manager_comments or "").strip():
        raise ValidationError("Comments are required when rejecting a timesheet")

    timesheet.status = TimesheetStatus(decision)
    timesheet.reviewed_by = reviewer.id
    timesheet.reviewed_at = utcnow()
    timesheet.manager_comments = manager_comments
    await db.commit()
    logger.info(f"Timesheet {timesheet.id} {decision} by {reviewer.id}")
    return await load_timesheet(db, timesheet.id)


async def adjust_timesheet(db: AsyncSession, timesheet: Timesheet, manager: Profile,
                           comments: Optional[str], notify_manager_ids: Iterable[int] = ()) -> Timesheet:
    """
    Record a post-approval correction and tell the employee and any
    selected managers about it.
    """
    comments = (comments or "").strip()
    if not comments:
        raise ValidationError("Adjustment comments are required")
    if timesheet.status != TimesheetStatus.APPROVED:
        raise ValidationError("Only approved timesheets can be adjusted")

    recipients = list(dict.fromkeys(int(i) for i in notify_manager_ids))
    timesheet.status = TimesheetStatus.ADJUSTED
    timesheet.adjusted_by = manager.id
    timesheet.adjusted_at = utcnow()
    timesheet.adjustment_recipients = recipients
    timesheet.manager_comments = comments

    week = format_week_ending(timesheet.week_ending)
    employee_name = timesheet.employee.full_name if timesheet.employee else "Employee"

    await create_message(
        db,
        sender_id=manager.id,
        type=MessageType.REMINDER,
        subject=f"Timesheet Adjusted - Week Ending {week}",
        body=(
            f"Your timesheet for the week ending {week} has been adjusted by "
            f"{manager.full_name}.\n\nComments: {comments}"
        ),
        recipient_ids=[timesheet.user_id],
        priority=MessagePriority.HIGH,
        created_via="timesheet_adjustment",
        require_active=False,
    )

    if recipients:
        await create_message(
            db,
            sender_id=manager.id,
            type=MessageType.REMINDER,
            subject=f"Timesheet Adjusted: {employee_name} - Week Ending {week}",
            body=(
                f"{manager.full_name} adjusted the timesheet of {employee_name} for the "
                f"week ending {week}.\n\nComments: {comments}"
            ),
            recipient_ids=recipients,
            priority=MessagePriority.LOW,
            created_via="timesheet_adjustment",
        )

    await db.commit()
    logger.info(f"Timesheet {timesheet.id} adjusted by {manager.id}; notified {len(recipients)} manager(s)")
    return await load_timesheet(db, timesheet.id)


async def process_timesheet(db: AsyncSession, timesheet: Timesheet) -> Timesheet:
    if timesheet.status not in (TimesheetStatus.APPROVED, TimesheetStatus.ADJUSTED):
        raise ValidationError("Only approved or adjusted timesheets can be processed")
    timesheet.status = TimesheetStatus.PROCESSED
    timesheet.processed_at = utcnow()
    await db.commit()
    return await load_timesheet(db, timesheet.id)


async def list_managers(db: AsyncSession) -> List[dict]:
    """Active managers and admins, sorted by name."""
    result = await db.execute(
        select(Profile)
        .join(Role, Profile.role_id == Role.id)
        .where(Role.is_manager_admin.is_(True), Profile.is_active.is_(True))
        .order_by(Profile.full_name)
    )
    return [
        {
            "id": profile.id,
            "full_name": profile.full_name,
            "email": profile.email,
            "role": {"name": profile.role.name, "display_name": profile.role.display_name},
        }
        for profile in result.scalars().all()
    ]
