"""
Pydantic schemas for Vehicle and VehicleCategory.
"""
from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import Optional


class VehicleCategoryBase(BaseModel):
    name: str
    description: Optional[str] = None


class VehicleCategoryCreate(VehicleCategoryBase):
    pass


class VehicleCategory(VehicleCategoryBase):
    """Schema for vehicle category responses."""
    id: int

    model_config = ConfigDict(from_attributes=True)


class VehicleCreate(BaseModel):
    """Schema for creating a vehicle."""
    reg_number: str
    category_id: Optional[int] = None
    vehicle_type: Optional[str] = None


class Vehicle(BaseModel):
    """Schema for vehicle responses."""
    id: int
    reg_number: str
    vehicle_type: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VehicleWithInspector(Vehicle):
    last_inspector: Optional[str] = None
    last_inspection_date: Optional[date] = None
