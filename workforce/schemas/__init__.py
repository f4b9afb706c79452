"""
Pydantic schemas for request/response validation.
"""
from workforce.schemas.user import (
    Role, RoleCreate, RoleUpdate, Profile, UserCreate, UserUpdate, Token, LoginRequest,
)
from workforce.schemas.vehicle import Vehicle, VehicleCreate, VehicleCategory, VehicleCategoryCreate
from workforce.schemas.inspection import Inspection, InspectionSave, InspectionReview, Action
from workforce.schemas.timesheet import Timesheet, TimesheetCreate, TimesheetUpdate, TimesheetAdjust
from workforce.schemas.rams import RamsDocument, RamsAssign, RamsSign
from workforce.schemas.message import Message, MessageCreate, InboxItem
from workforce.schemas.report import Stats

__all__ = [
    "Role", "RoleCreate", "RoleUpdate", "Profile", "UserCreate", "UserUpdate", "Token", "LoginRequest",
    "Vehicle", "VehicleCreate", "VehicleCategory", "VehicleCategoryCreate",
    "Inspection", "InspectionSave", "InspectionReview", "Action",
    "Timesheet", "TimesheetCreate", "TimesheetUpdate", "TimesheetAdjust",
    "RamsDocument", "RamsAssign", "RamsSign",
    "Message", "MessageCreate", "InboxItem",
    "Stats",
]
