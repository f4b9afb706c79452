"""
Pydantic schemas for messages (toolbox talks and reminders).
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional
from workforce.models.message import MessageType, MessagePriority, RecipientStatus


class MessageCreate(BaseModel):
    type: MessageType
    subject: str
    body: str
    priority: MessagePriority = MessagePriority.LOW
    recipient_ids: List[int]


class MessageRecipient(BaseModel):
    id: int
    message_id: int
    user_id: int
    status: RecipientStatus
    signed_at: Optional[datetime] = None
    first_shown_at: Optional[datetime] = None
    cleared_from_inbox_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Message(BaseModel):
    """Schema for message responses."""
    id: int
    type: MessageType
    subject: str
    body: str
    priority: MessagePriority
    sender_id: Optional[int] = None
    created_via: str
    created_at: Optional[datetime] = None
    recipients: List[MessageRecipient] = []

    model_config = ConfigDict(from_attributes=True)


class InboxItem(BaseModel):
    recipient_id: int
    message_id: int
    type: MessageType
    subject: str
    body: str
    priority: MessagePriority
    sender_name: Optional[str] = None
    status: RecipientStatus
    created_at: Optional[datetime] = None


class MessageSign(BaseModel):
    signature_data: str
