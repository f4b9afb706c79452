"""
Vehicle inspection routes.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import get_current_active_user, require_manager_admin
from workforce.checklists import get_checklist_for_category, is_van_category
from workforce.database import get_db
from workforce.models.inspection import InspectionStatus, VehicleInspection
from workforce.models.user import Profile
from workforce.reports.inspection_pdf import render_inspection_pdf
from workforce.schemas.inspection import (
    Checklist, Inspection as InspectionSchema, InspectionReview, InspectionSave,
)
from workforce.services import inspections as service

router = APIRouter(prefix="/inspections", tags=["inspections"])


@router.get("/", response_model=List[InspectionSchema])
async def get_inspections(
    status_filter: Optional[InspectionStatus] = Query(None, alias="status"),
    vehicle_id: Optional[int] = None,
    user_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Get inspections, newest week first. Employees only see their own.
    """
    query = select(VehicleInspection).order_by(
        VehicleInspection.week_ending.desc(), VehicleInspection.id.desc()
    )
    if service.can_manage(current_user):
        if user_id is not None:
            query = query.where(VehicleInspection.user_id == user_id)
    else:
        query = query.where(VehicleInspection.user_id == current_user.id)
    if status_filter is not None:
        query = query.where(VehicleInspection.status == status_filter)
    if vehicle_id is not None:
        query = query.where(VehicleInspection.vehicle_id == vehicle_id)
    if date_from is not None:
        query = query.where(VehicleInspection.week_ending >= date_from)
    if date_to is not None:
        query = query.where(VehicleInspection.week_ending <= date_to)

    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/checklist", response_model=Checklist)
async def get_checklist(
    category: Optional[str] = None,
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Checklist items for a vehicle category or type.
    """
    return {
        "category": category,
        "template": "van" if is_van_category(category) else "truck",
        "items": get_checklist_for_category(category),
    }


@router.post("/", response_model=InspectionSchema, status_code=status.HTTP_201_CREATED)
async def create_inspection(
    payload: InspectionSave,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Save a new inspection as a draft, or submit it straight away.
    """
    return await service.save_inspection(db, current_user, payload)


@router.get("/{inspection_id}", response_model=InspectionSchema)
async def get_inspection(
    inspection_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    inspection = await service.load_inspection(db, inspection_id)
    service.ensure_can_view(inspection, current_user)
    return inspection


@router.put("/{inspection_id}", response_model=InspectionSchema)
async def update_inspection(
    inspection_id: int,
    payload: InspectionSave,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    inspection = await service.load_inspection(db, inspection_id)
    service.ensure_can_view(inspection, current_user)
    return await service.save_inspection(db, current_user, payload, inspection)


@router.delete("/{inspection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inspection(
    inspection_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    inspection = await service.load_inspection(db, inspection_id)
    await service.delete_inspection(db, inspection, current_user)
    return None


@router.post("/{inspection_id}/review", response_model=InspectionSchema)
async def review_inspection(
    inspection_id: int,
    payload: InspectionReview,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    inspection = await service.load_inspection(db, inspection_id)
    return await service.review_inspection(
        db, inspection, current_user, payload.status, payload.manager_comments, payload.action_taken
    )


@router.get("/{inspection_id}/pdf")
async def get_inspection_pdf(
    inspection_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Download the inspection on the van or truck pad layout.
    """
    inspection = await service.load_inspection(db, inspection_id)
    service.ensure_can_view(inspection, current_user)
    reg_number = inspection.vehicle.reg_number if inspection.vehicle else "vehicle"
    file_name = f"inspection-{reg_number}-{inspection.week_ending}.pdf"
    content = await run_in_threadpool(render_inspection_pdf, inspection)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
