"""
Pydantic schemas for vehicle inspections, checklist items and actions.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import List, Optional
from workforce.models.inspection import (
    InspectionStatus, ItemStatus, ActionPriority, ActionStatus,
)


class InspectionItemIn(BaseModel):
    item_number: int = Field(ge=1)
    day_of_week: int = Field(ge=1, le=7)
    status: ItemStatus = ItemStatus.OK
    item_description: Optional[str] = None
    comments: Optional[str] = None


class InspectionItem(BaseModel):
    id: int
    item_number: int
    day_of_week: int
    item_description: str
    status: ItemStatus
    comments: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InspectionSave(BaseModel):
    """Create or update an inspection; ``submit`` finalises it."""
    vehicle_id: int
    user_id: Optional[int] = None
    week_ending: date
    mileage: Optional[int] = None
    checked_by: Optional[str] = None
    defects_comments: Optional[str] = None
    items: List[InspectionItemIn] = []
    submit: bool = False
    signature_data: Optional[str] = None


class InspectionReview(BaseModel):
    status: InspectionStatus
    manager_comments: Optional[str] = None
    action_taken: Optional[str] = None


class Inspection(BaseModel):
    """Schema for inspection responses."""
    id: int
    vehicle_id: int
    user_id: int
    week_ending: date
    mileage: Optional[int] = None
    checked_by: Optional[str] = None
    defects_comments: Optional[str] = None
    action_taken: Optional[str] = None
    status: InspectionStatus
    signed_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    manager_comments: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[InspectionItem] = []

    model_config = ConfigDict(from_attributes=True)


class Checklist(BaseModel):
    category: Optional[str] = None
    template: str
    items: List[str]


class Action(BaseModel):
    id: int
    inspection_id: Optional[int] = None
    inspection_item_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    priority: ActionPriority
    status: ActionStatus
    actioned: bool
    actioned_at: Optional[datetime] = None
    actioned_by: Optional[int] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
