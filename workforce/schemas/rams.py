"""
Pydantic schemas for RAMS documents.
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Literal, Optional
from workforce.models.rams import AssignmentStatus, RamsFileType


class RamsAssignment(BaseModel):
    id: int
    rams_document_id: int
    employee_id: int
    assigned_at: Optional[datetime] = None
    assigned_by: Optional[int] = None
    status: AssignmentStatus
    read_at: Optional[datetime] = None
    signed_at: Optional[datetime] = None
    comments: Optional[str] = None
    action_taken: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RamsVisitorSignatureCreate(BaseModel):
    visitor_name: str
    visitor_company: Optional[str] = None
    visitor_role: Optional[str] = None
    signature_data: str


class RamsVisitorSignature(BaseModel):
    id: int
    rams_document_id: int
    visitor_name: str
    visitor_company: Optional[str] = None
    visitor_role: Optional[str] = None
    signed_at: Optional[datetime] = None
    recorded_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class RamsDocument(BaseModel):
    """Schema for RAMS document responses."""
    id: int
    title: str
    description: Optional[str] = None
    file_name: str
    file_size: int
    file_type: RamsFileType
    uploaded_by: Optional[int] = None
    is_active: bool
    version: int
    created_at: Optional[datetime] = None
    assignments: List[RamsAssignment] = []

    model_config = ConfigDict(from_attributes=True)


class RamsAssign(BaseModel):
    employee_ids: List[int]


class RamsRead(BaseModel):
    action_taken: Literal["downloaded", "opened", "emailed"] = "opened"


class RamsSign(BaseModel):
    signature_data: str
    comments: Optional[str] = None
