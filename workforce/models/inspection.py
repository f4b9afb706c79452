"""
Vehicle inspection, checklist item and action models for database.
"""
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey,
    UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from workforce.database import Base, utcnow
import enum


class InspectionStatus(str, enum.Enum):
    """Inspection status enumeration."""
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    REJECTED = "rejected"


class ItemStatus(str, enum.Enum):
    """Checklist item status enumeration."""
    OK = "ok"
    ATTENTION = "attention"
    NA = "na"


class ActionPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ActionStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class VehicleInspection(Base):
    """Weekly vehicle inspection database model."""

    __tablename__ = "vehicle_inspections"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    week_ending = Column(Date, nullable=False, index=True)
    mileage = Column(Integer, nullable=True)
    checked_by = Column(String, nullable=True)
    defects_comments = Column(Text, nullable=True)
    action_taken = Column(Text, nullable=True)
    status = Column(SQLEnum(InspectionStatus), default=InspectionStatus.DRAFT, nullable=False)
    signature_data = Column(Text, nullable=True)
    signed_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    manager_comments = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    vehicle = relationship("Vehicle", back_populates="inspections", lazy="selectin")
    inspector = relationship("Profile", foreign_keys=[user_id], lazy="selectin")
    items = relationship(
        "InspectionItem",
        back_populates="inspection",
        cascade="all, delete-orphan",
        order_by=lambda: [InspectionItem.item_number, InspectionItem.day_of_week],
        lazy="selectin",
    )
    actions = relationship(
        "Action", back_populates="inspection", cascade="all, delete-orphan", passive_deletes=True
    )


class InspectionItem(Base):
    """One checklist tick: an item number on a day of the week."""

    __tablename__ = "inspection_items"
    __table_args__ = (
        UniqueConstraint("inspection_id", "item_number", "day_of_week", name="uq_inspection_item_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    inspection_id = Column(Integer, ForeignKey("vehicle_inspections.id", ondelete="CASCADE"), nullable=False)
    item_number = Column(Integer, nullable=False)
    day_of_week = Column(Integer, nullable=False)
    item_description = Column(String, nullable=False, default="")
    status = Column(SQLEnum(ItemStatus), default=ItemStatus.OK, nullable=False)
    comments = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    # Relationships
    inspection = relationship("VehicleInspection", back_populates="items")


class Action(Base):
    """Follow-up action raised from a failed inspection item."""

    __tablename__ = "actions"

    id = Column(Integer, primary_key=True, index=True)
    inspection_id = Column(Integer, ForeignKey("vehicle_inspections.id", ondelete="CASCADE"), nullable=True)
    inspection_item_id = Column(Integer, ForeignKey("inspection_items.id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(SQLEnum(ActionPriority), default=ActionPriority.MEDIUM, nullable=False)
    status = Column(SQLEnum(ActionStatus), default=ActionStatus.PENDING, nullable=False)
    actioned = Column(Boolean, default=False, nullable=False)
    actioned_at = Column(DateTime(timezone=True), nullable=True)
    actioned_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    inspection = relationship("VehicleInspection", back_populates="actions")
