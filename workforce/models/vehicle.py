"""
Vehicle and VehicleCategory models for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from workforce.database import Base, utcnow


class VehicleCategory(Base):
    """Vehicle category database model."""

    __tablename__ = "vehicle_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    vehicles = relationship("Vehicle", back_populates="category", passive_deletes=True)


class Vehicle(Base):
    """Vehicle database model."""

    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    reg_number = Column(String, unique=True, nullable=False, index=True)
    vehicle_type = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("vehicle_categories.id", ondelete="SET NULL"), nullable=True)
    status = Column(String, default="active", nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    # Relationships
    category = relationship("VehicleCategory", back_populates="vehicles", lazy="selectin")
    inspections = relationship(
        "VehicleInspection", back_populates="vehicle", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def template_type(self) -> str:
        """Category name, falling back to the free-text vehicle type."""
        return self.category_name or self.vehicle_type or ""
