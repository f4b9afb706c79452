"""
Timesheet and TimesheetEntry models for database.
"""
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Float, Date, DateTime, ForeignKey, JSON,
    UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from workforce.database import Base, utcnow
import enum


class TimesheetStatus(str, enum.Enum):
    """Timesheet status enumeration."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSED = "processed"
    ADJUSTED = "adjusted"


class Timesheet(Base):
    """Weekly timesheet database model."""

    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("user_id", "week_ending", name="uq_timesheet_user_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    reg_number = Column(String, nullable=True)
    week_ending = Column(Date, nullable=False, index=True)
    status = Column(SQLEnum(TimesheetStatus), default=TimesheetStatus.DRAFT, nullable=False)
    signature_data = Column(Text, nullable=True)
    signed_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    manager_comments = Column(Text, nullable=True)
    adjusted_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    adjusted_at = Column(DateTime(timezone=True), nullable=True)
    adjustment_recipients = Column(JSON, nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    employee = relationship("Profile", foreign_keys=[user_id], lazy="selectin")
    entries = relationship(
        "TimesheetEntry",
        back_populates="timesheet",
        cascade="all, delete-orphan",
        order_by="TimesheetEntry.day_of_week",
        lazy="selectin",
    )

    @property
    def total_hours(self) -> float:
        """Hours worked in the week, ignoring did-not-work days."""
        from workforce.services.timesheets import total_hours
        return total_hours(self.entries)


class TimesheetEntry(Base):
    """One day of a timesheet."""

    __tablename__ = "timesheet_entries"
    __table_args__ = (
        UniqueConstraint("timesheet_id", "day_of_week", name="uq_timesheet_entry_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    timesheet_id = Column(Integer, ForeignKey("timesheets.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    time_started = Column(String(8), nullable=True)
    time_finished = Column(String(8), nullable=True)
    job_number = Column(String, nullable=True)
    working_in_yard = Column(Boolean, default=False, nullable=False)
    did_not_work = Column(Boolean, default=False, nullable=False)
    daily_total = Column(Float, nullable=True)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    timesheet = relationship("Timesheet", back_populates="entries")
