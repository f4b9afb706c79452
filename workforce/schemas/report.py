"""
Pydantic schemas for report responses and requests.
"""
from pydantic import BaseModel
from typing import Optional


class TimesheetStats(BaseModel):
    week_hours: float
    month_hours: float
    pending_approvals: int


class InspectionStats(BaseModel):
    week_completed: int
    month_completed: int
    pending_approvals: int
    pass_rate: float
    outstanding_defects: int


class EmployeeStats(BaseModel):
    active: int


class StatsSummary(BaseModel):
    total_pending_approvals: int
    needs_attention: int


class Stats(BaseModel):
    timesheets: TimesheetStats
    inspections: InspectionStats
    employees: EmployeeStats
    summary: StatsSummary


class BulkPdfRequest(BaseModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None
