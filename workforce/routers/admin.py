"""
Administration routes: users, roles, vehicles and demo data.
"""
import json
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import get_current_active_user, hash_password, require_admin, require_super_admin
from workforce.database import AsyncSessionLocal, get_db
from workforce.logging_config import get_logger
from workforce.models.inspection import Action, VehicleInspection
from workforce.models.timesheet import Timesheet
from workforce.models.user import Profile, Role
from workforce.models.vehicle import Vehicle, VehicleCategory
from workforce.schemas.user import (
    PasswordResetRequest, PasswordResetResponse, Profile as ProfileSchema, Role as RoleSchema,
    RoleCreate, RoleUpdate, UserCreate, UserCreatedResponse, UserUpdate,
)
from workforce.schemas.vehicle import (
    Vehicle as VehicleSchema, VehicleCategory as VehicleCategorySchema, VehicleCategoryCreate,
    VehicleCreate, VehicleWithInspector,
)
from workforce.services.demo import DemoDataGenerator, clear_demo_data
from workforce.services.email import send_password_email
from workforce.services.passwords import generate_secure_password

router = APIRouter(prefix="/admin", tags=["admin"])
logger = get_logger(__name__)


async def _get_profile(db: AsyncSession, user_id: int) -> Profile:
    result = await db.execute(
        select(Profile).where(Profile.id == user_id).execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


async def _get_role(db: AsyncSession, role_id: int) -> Role:
    result = await db.execute(select(Role).where(Role.id == role_id))
    role = result.scalar_one_or_none()
    if not role:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    return role


# Users

@router.get("/users", response_model=List[ProfileSchema])
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Get all users ordered by name.
    """
    result = await db.execute(select(Profile).order_by(Profile.full_name))
    return result.scalars().all()


@router.post("/users", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Create a user with a generated temporary password and email it to them.

    Demo-domain accounts are only emailed when an override address is given.
    """
    if not payload.full_name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and full name are required")
    if payload.role_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role is required")

    result = await db.execute(select(Role).where(Role.id == payload.role_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid role selected. Please select a valid role.",
        )

    email = payload.email.lower()
    result = await db.execute(select(Profile.id).where(Profile.email == email))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A user with this email address has already been registered",
        )

    temporary_password = generate_secure_password()
    user = Profile(
        email=email,
        hashed_password=hash_password(temporary_password),
        full_name=payload.full_name.strip(),
        employee_id=payload.employee_id,
        phone_number=payload.phone_number,
        role_id=payload.role_id,
        annual_holiday_allowance_days=payload.annual_holiday_allowance_days,
        must_change_password=True,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Database error creating new user")

    user = await _get_profile(db, user.id)
    logger.info(f"User {user.id} created by {current_user.id}")

    email_result = await send_password_email(
        to=user.email,
        user_name=user.full_name,
        temporary_password=temporary_password,
        override_email=payload.override_email,
    )
    if not email_result.success:
        logger.warning(f"Welcome email for user {user.id} not sent: {email_result.error}")

    return {
        "success": True,
        "user": user,
        "temporary_password": temporary_password,
        "email_sent": email_result.success,
        "is_demo_account": email_result.is_demo_account,
        "demo_email": user.email if email_result.is_demo_account else None,
    }


@router.put("/users/{user_id}", response_model=ProfileSchema)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Update a user's details or role.
    """
    user = await _get_profile(db, user_id)
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("role_id") is not None:
        await _get_role(db, update_data["role_id"])

    for field, value in update_data.items():
        setattr(user, field, value)

    await db.commit()
    return await _get_profile(db, user_id)


# Columns that record who reviewed or actioned a row; they outlive the profile
USER_REFERENCE_COLUMNS = (
    VehicleInspection.reviewed_by,
    Timesheet.reviewed_by,
    Timesheet.adjusted_by,
    Action.actioned_by,
    Action.created_by,
)


async def _release_user_references(db: AsyncSession, user_id: int) -> None:
    """Clear review and action references to a profile about to be deleted."""
    for column in USER_REFERENCE_COLUMNS:
        await db.execute(
            update(column.class_).where(column == user_id).values({column.key: None})
        )


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Delete a user. Admins cannot delete their own account.
    """
    if user_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")

    user = await _get_profile(db, user_id)
    await _release_user_references(db, user_id)
    await db.delete(user)
    await db.commit()
    logger.info(f"User {user_id} deleted by {current_user.id}")
    return None


@router.post("/users/{user_id}/reset-password", response_model=PasswordResetResponse)
async def reset_user_password(
    user_id: int,
    payload: Optional[PasswordResetRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Issue a new temporary password and force a change at next login.
    """
    user = await _get_profile(db, user_id)
    temporary_password = generate_secure_password()
    user.hashed_password = hash_password(temporary_password)
    user.must_change_password = True
    await db.commit()
    logger.info(f"Password for user {user.id} reset by {current_user.id}")

    email_result = await send_password_email(
        to=user.email,
        user_name=user.full_name,
        temporary_password=temporary_password,
        is_reset=True,
        override_email=payload.override_email if payload else None,
    )
    if not email_result.success:
        logger.warning(f"Reset email for user {user.id} not sent: {email_result.error}")

    return {
        "success": True,
        "temporary_password": temporary_password,
        "email_sent": email_result.success,
        "is_demo_account": email_result.is_demo_account,
        "demo_email": user.email if email_result.is_demo_account else None,
    }


# Roles

@router.get("/roles", response_model=List[RoleSchema])
async def list_roles(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    result = await db.execute(select(Role).order_by(Role.name))
    return result.scalars().all()


@router.post("/roles", response_model=RoleSchema, status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: RoleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Create a role. Names are stored lower-case.
    """
    name = payload.name.strip().lower()
    result = await db.execute(select(Role.id).where(Role.name == name))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role name already exists")

    role = Role(**{**payload.model_dump(), "name": name})
    db.add(role)
    await db.commit()
    await db.refresh(role)
    return role


@router.put("/roles/{role_id}", response_model=RoleSchema)
async def update_role(
    role_id: int,
    payload: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    role = await _get_role(db, role_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(role, field, value)
    await db.commit()
    await db.refresh(role)
    return role


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Delete a role that no user holds.
    """
    role = await _get_role(db, role_id)
    result = await db.execute(select(func.count(Profile.id)).where(Profile.role_id == role_id))
    in_use = result.scalar_one()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete role: {in_use} user(s) are assigned to it",
        )
    await db.delete(role)
    await db.commit()
    return None


# Vehicles

@router.get("/vehicles", response_model=List[VehicleWithInspector])
async def list_vehicles(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    """
    Get all vehicles with their category and who inspected them last.
    """
    result = await db.execute(select(Vehicle).order_by(Vehicle.reg_number))
    vehicles = result.scalars().all()

    result = await db.execute(
        select(VehicleInspection)
        .order_by(VehicleInspection.week_ending.desc(), VehicleInspection.id.desc())
    )
    latest = {}
    for inspection in result.scalars().all():
        latest.setdefault(inspection.vehicle_id, inspection)

    response = []
    for vehicle in vehicles:
        item = VehicleWithInspector.model_validate(vehicle)
        inspection = latest.get(vehicle.id)
        if inspection is not None:
            item.last_inspector = inspection.inspector.full_name if inspection.inspector else None
            item.last_inspection_date = inspection.week_ending
        response.append(item)
    return response


@router.post("/vehicles", response_model=VehicleSchema, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    payload: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Create a vehicle. Any signed-in user may add one from the inspection form.
    """
    reg_number = payload.reg_number.strip().upper()
    if not reg_number:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Registration number is required")

    if payload.category_id is not None:
        result = await db.execute(select(VehicleCategory.id).where(VehicleCategory.id == payload.category_id))
        if result.scalar_one_or_none() is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Vehicle category not found")

    vehicle = Vehicle(
        reg_number=reg_number,
        category_id=payload.category_id,
        vehicle_type=payload.vehicle_type,
        status="active",
    )
    db.add(vehicle)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vehicle with this registration already exists",
        )

    result = await db.execute(
        select(Vehicle).where(Vehicle.id == vehicle.id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get("/vehicle-categories", response_model=List[VehicleCategorySchema])
async def list_vehicle_categories(
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    result = await db.execute(select(VehicleCategory).order_by(VehicleCategory.name))
    return result.scalars().all()


@router.post("/vehicle-categories", response_model=VehicleCategorySchema, status_code=status.HTTP_201_CREATED)
async def create_vehicle_category(
    payload: VehicleCategoryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_admin),
):
    name = payload.name.strip()
    result = await db.execute(select(VehicleCategory.id).where(VehicleCategory.name == name))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category already exists")

    category = VehicleCategory(name=name, description=payload.description)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


# Demo data

def _event(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


async def _reset_demo_events(keep_profile_id: int):
    """Server-sent events for a full demo reset, run on a session of its own."""
    try:
        async with AsyncSessionLocal() as session:
            yield _event({"stage": "Starting reset...", "progress": 0})
            index = 0
            async for stage in clear_demo_data(session, keep_profile_id=keep_profile_id):
                index += 1
                yield _event({"stage": stage, "progress": min(5 + index * 3, 45)})

            generator = DemoDataGenerator(session)
            index = 0
            async for stage in generator.run():
                index += 1
                yield _event({"stage": stage, "progress": min(50 + index * 7, 95)})
            await session.commit()

        logger.info(f"Demo data reset by user {keep_profile_id}: {generator.counts}")
        yield _event({"stage": "Complete", "success": True, "progress": 100, "counts": generator.counts})
    except Exception as e:
        logger.exception("Demo data reset failed")
        yield _event({"error": f"Failed to reset demo data: {e}"})


@router.post("/reset-demo-data")
async def reset_demo_data(current_user: Profile = Depends(require_super_admin)):
    """
    Wipe everything except the caller's account and role, then rebuild
    the demo organisation. Progress is streamed as server-sent events.
    """
    return StreamingResponse(
        _reset_demo_events(current_user.id),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
