"""
Pydantic schemas for Timesheet and TimesheetEntry.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import List, Literal, Optional
from workforce.models.timesheet import TimesheetStatus


class TimesheetEntryIn(BaseModel):
    day_of_week: int = Field(ge=1, le=7)
    time_started: Optional[str] = None
    time_finished: Optional[str] = None
    job_number: Optional[str] = None
    working_in_yard: bool = False
    did_not_work: bool = False
    daily_total: Optional[float] = None
    remarks: Optional[str] = None


class TimesheetEntry(TimesheetEntryIn):
    id: int

    model_config = ConfigDict(from_attributes=True)


class TimesheetCreate(BaseModel):
    """Schema for creating a timesheet."""
    week_ending: date
    reg_number: Optional[str] = None
    entries: List[TimesheetEntryIn] = []


class TimesheetUpdate(BaseModel):
    """Schema for updating a timesheet."""
    reg_number: Optional[str] = None
    entries: Optional[List[TimesheetEntryIn]] = None


class TimesheetSubmit(BaseModel):
    signature_data: str


class TimesheetReview(BaseModel):
    decision: Literal["approved", "rejected"]
    manager_comments: Optional[str] = None


class TimesheetAdjust(BaseModel):
    comments: Optional[str] = None
    notify_manager_ids: List[int] = []


class Timesheet(BaseModel):
    """Schema for timesheet responses."""
    id: int
    user_id: int
    reg_number: Optional[str] = None
    week_ending: date
    status: TimesheetStatus
    signed_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    manager_comments: Optional[str] = None
    adjusted_by: Optional[int] = None
    adjusted_at: Optional[datetime] = None
    adjustment_recipients: Optional[List[int]] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    entries: List[TimesheetEntry] = []
    total_hours: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class ManagerRole(BaseModel):
    name: str
    display_name: str


class Manager(BaseModel):
    id: int
    full_name: str
    email: Optional[str] = None
    role: Optional[ManagerRole] = None
