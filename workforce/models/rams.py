"""
RAMS document, assignment and visitor signature models for database.
"""
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey,
    UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from workforce.database import Base, utcnow
import enum


class RamsFileType(str, enum.Enum):
    PDF = "pdf"
    DOCX = "docx"


class AssignmentStatus(str, enum.Enum):
    """RAMS assignment status enumeration."""
    PENDING = "pending"
    READ = "read"
    SIGNED = "signed"


class RamsDocument(Base):
    """RAMS document database model."""

    __tablename__ = "rams_documents"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    file_type = Column(SQLEnum(RamsFileType), nullable=False)
    uploaded_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    uploader = relationship("Profile", lazy="selectin")
    assignments = relationship(
        "RamsAssignment", back_populates="document", cascade="all, delete-orphan", lazy="selectin"
    )
    visitor_signatures = relationship(
        "RamsVisitorSignature", back_populates="document", cascade="all, delete-orphan", lazy="selectin"
    )


class RamsAssignment(Base):
    """An employee's copy of a RAMS document awaiting sign-off."""

    __tablename__ = "rams_assignments"
    __table_args__ = (
        UniqueConstraint("rams_document_id", "employee_id", name="uq_rams_assignment"),
    )

    id = Column(Integer, primary_key=True, index=True)
    rams_document_id = Column(Integer, ForeignKey("rams_documents.id", ondelete="CASCADE"), nullable=False)
    employee_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    assigned_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    assigned_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    status = Column(SQLEnum(AssignmentStatus), default=AssignmentStatus.PENDING, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    signed_at = Column(DateTime(timezone=True), nullable=True)
    signature_data = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    action_taken = Column(String, nullable=True)

    # Relationships
    document = relationship("RamsDocument", back_populates="assignments")
    employee = relationship("Profile", foreign_keys=[employee_id], lazy="selectin")


class RamsVisitorSignature(Base):
    """Signature recorded on site for someone without an account."""

    __tablename__ = "rams_visitor_signatures"

    id = Column(Integer, primary_key=True, index=True)
    rams_document_id = Column(Integer, ForeignKey("rams_documents.id", ondelete="CASCADE"), nullable=False)
    visitor_name = Column(String, nullable=False)
    visitor_company = Column(String, nullable=True)
    visitor_role = Column(String, nullable=True)
    signature_data = Column(Text, nullable=False)
    signed_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    recorded_by = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    document = relationship("RamsDocument", back_populates="visitor_signatures")
    recorder = relationship("Profile", lazy="selectin")
