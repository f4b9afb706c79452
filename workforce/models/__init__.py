"""
SQLAlchemy database models.
"""
from workforce.models.user import Role, Profile
from workforce.models.vehicle import VehicleCategory, Vehicle
from workforce.models.inspection import VehicleInspection, InspectionItem, Action
from workforce.models.timesheet import Timesheet, TimesheetEntry
from workforce.models.rams import RamsDocument, RamsAssignment, RamsVisitorSignature
from workforce.models.message import Message, MessageRecipient

__all__ = [
    "Role", "Profile",
    "VehicleCategory", "Vehicle",
    "VehicleInspection", "InspectionItem", "Action",
    "Timesheet", "TimesheetEntry",
    "RamsDocument", "RamsAssignment", "RamsVisitorSignature",
    "Message", "MessageRecipient",
]
