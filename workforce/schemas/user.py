"""
Pydantic schemas for Roles, Profiles and Authentication.
"""
from pydantic import BaseModel, EmailStr, ConfigDict
from datetime import datetime
from typing import Optional


class RoleBase(BaseModel):
    """Base role schema with common fields."""
    name: str
    display_name: str
    description: Optional[str] = None
    is_manager_admin: bool = False
    is_super_admin: bool = False


class RoleCreate(RoleBase):
    """Schema for creating a role."""
    pass


class RoleUpdate(BaseModel):
    """Schema for updating a role."""
    display_name: Optional[str] = None
    description: Optional[str] = None
    is_manager_admin: Optional[bool] = None
    is_super_admin: Optional[bool] = None


class Role(RoleBase):
    """Schema for role responses."""
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoleSummary(BaseModel):
    id: int
    name: str
    display_name: str
    is_manager_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class Profile(BaseModel):
    """Schema for profile responses."""
    id: int
    email: str
    full_name: str
    employee_id: Optional[str] = None
    phone_number: Optional[str] = None
    role_id: Optional[int] = None
    role: Optional[RoleSummary] = None
    must_change_password: bool = False
    is_active: bool = True
    annual_holiday_allowance_days: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Schema for creating a user. The password is generated."""
    email: EmailStr
    full_name: str
    role_id: Optional[int] = None
    phone_number: Optional[str] = None
    employee_id: Optional[str] = None
    annual_holiday_allowance_days: Optional[int] = None
    override_email: Optional[EmailStr] = None


class UserUpdate(BaseModel):
    """Schema for updating a user."""
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    employee_id: Optional[str] = None
    role_id: Optional[int] = None
    is_active: Optional[bool] = None
    annual_holiday_allowance_days: Optional[int] = None


class UserCreatedResponse(BaseModel):
    success: bool = True
    user: Profile
    temporary_password: str
    email_sent: bool
    is_demo_account: bool = False
    demo_email: Optional[str] = None


class PasswordResetRequest(BaseModel):
    override_email: Optional[EmailStr] = None


class PasswordResetResponse(BaseModel):
    success: bool = True
    temporary_password: str
    email_sent: bool
    is_demo_account: bool = False
    demo_email: Optional[str] = None


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: str
    password: str


class Token(BaseModel):
    """Schema for authentication token."""
    access_token: str
    token_type: str = "bearer"
    must_change_password: bool = False
    user: Profile


class ChangePasswordRequest(BaseModel):
    current_password: Optional[str] = None
    new_password: str
    confirm_password: str
