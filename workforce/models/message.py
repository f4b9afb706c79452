"""
Message and MessageRecipient models for database.
"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey,
    UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from workforce.database import Base, utcnow
import enum


class MessageType(str, enum.Enum):
    TOOLBOX_TALK = "TOOLBOX_TALK"
    REMINDER = "REMINDER"


class MessagePriority(str, enum.Enum):
    HIGH = "HIGH"
    LOW = "LOW"


class RecipientStatus(str, enum.Enum):
    """Recipient status enumeration."""
    PENDING = "PENDING"
    SHOWN = "SHOWN"
    SIGNED = "SIGNED"
    DISMISSED = "DISMISSED"


class Message(Base):
    """Message database model."""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(SQLEnum(MessageType), nullable=False)
    subject = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    priority = Column(SQLEnum(MessagePriority), default=MessagePriority.LOW, nullable=False)
    sender_id = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_via = Column(String, default="web", nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    sender = relationship("Profile", lazy="selectin")
    recipients = relationship(
        "MessageRecipient", back_populates="message", cascade="all, delete-orphan", lazy="selectin"
    )


class MessageRecipient(Base):
    """Delivery of a message to one user."""

    __tablename__ = "message_recipients"
    __table_args__ = (
        UniqueConstraint("message_id", "user_id", name="uq_message_recipient"),
    )

    id = Column(Integer, primary_key=True, index=True)
    message_id = Column(Integer, ForeignKey("messages.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    status = Column(SQLEnum(RecipientStatus), default=RecipientStatus.PENDING, nullable=False)
    signed_at = Column(DateTime(timezone=True), nullable=True)
    first_shown_at = Column(DateTime(timezone=True), nullable=True)
    cleared_from_inbox_at = Column(DateTime(timezone=True), nullable=True)
    signature_data = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    message = relationship("Message", back_populates="recipients")
    user = relationship("Profile", lazy="selectin")
