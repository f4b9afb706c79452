"""
Vehicle inspection workflow: saving drafts, submitting, defect actions and review.
"""
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.checklists import day_name, get_checklist_for_category
from workforce.database import utcnow
from workforce.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from workforce.logging_config import get_logger
from workforce.models.inspection import (
    Action, ActionPriority, ActionStatus, InspectionItem, InspectionStatus, ItemStatus,
    VehicleInspection,
)
from workforce.models.user import Profile
from workforce.models.vehicle import Vehicle

logger = get_logger(__name__)

EDITABLE_STATUSES = (InspectionStatus.DRAFT, InspectionStatus.IN_PROGRESS)
REVIEW_OUTCOMES = (InspectionStatus.REVIEWED, InspectionStatus.REJECTED)


def can_manage(user: Profile) -> bool:
    return user.is_manager_admin or user.is_admin


async def load_inspection(db: AsyncSession, inspection_id: int) -> VehicleInspection:
    result = await db.execute(
        select(VehicleInspection)
        .where(VehicleInspection.id == inspection_id)
        .execution_options(populate_existing=True)
    )
    inspection = result.scalar_one_or_none()
    if inspection is None:
        raise NotFoundError("Inspection not found")
    return inspection


def ensure_can_view(inspection: VehicleInspection, user: Profile) -> None:
    if inspection.user_id != user.id and not can_manage(user):
        raise PermissionDeniedError("Access denied")


def checklist_for_vehicle(vehicle: Optional[Vehicle]) -> List[str]:
    return get_checklist_for_category(vehicle.template_type if vehicle else None)


def build_items(items_in: Iterable, checklist: List[str]) -> List[InspectionItem]:
    """
    Turn submitted ticks into rows, one per (item, day). A repeated pair
    replaces the earlier one. Numbers past the end of the checklist are refused.
    """
    by_key = {}
    for item in items_in:
        data = item.model_dump() if hasattr(item, "model_dump") else dict(item)
        if not 1 <= data["item_number"] <= len(checklist):
            raise ValidationError(
                f"Item {data['item_number']} is not on the {len(checklist)}-item checklist for this vehicle"
            )
        comments = (data.get("comments") or "").strip() or None
        by_key[(data["item_number"], data["day_of_week"])] = InspectionItem(
            item_number=data["item_number"],
            day_of_week=data["day_of_week"],
            item_description=data.get("item_description") or checklist[data["item_number"] - 1],
            status=ItemStatus(data.get("status") or ItemStatus.OK),
            comments=comments,
        )
    return [by_key[key] for key in sorted(by_key)]


def missing_defect_comments(items: Iterable[InspectionItem]) -> List[str]:
    """Labels like ``Tyres (Wednesday)`` for attention items with no comment."""
    return [
        f"{item.item_description} ({day_name(item.day_of_week)})"
        for item in items
        if item.status == ItemStatus.ATTENTION and not item.comments
    ]


def validate_submission(week_ending, mileage: Optional[int], items: List[InspectionItem],
                        signature_data: Optional[str]) -> None:
    if week_ending.weekday() != 6:
        raise ValidationError("Week ending must be a Sunday")
    if mileage is None or mileage < 0:
        raise ValidationError("Please enter a valid current mileage")
    missing = missing_defect_comments(items)
    if missing:
        raise ValidationError(f"Please add comments for all defects: {', '.join(missing)}")
    if not (signature_data or "").strip():
        raise ValidationError("Signature is required")


def create_defect_actions(inspection: VehicleInspection, created_by: int) -> List[Action]:
    """One high priority action per item that needs attention."""
    actions = []
    for item in inspection.items:
        if item.status != ItemStatus.ATTENTION:
            continue
        day = day_name(item.day_of_week)
        actions.append(Action(
            inspection_id=inspection.id,
            inspection_item_id=item.id,
            title=f"Defect: {item.item_description or f'Item {item.item_number}'} ({day})",
            description=f"Vehicle inspection item failed during {day} inspection",
            priority=ActionPriority.HIGH,
            status=ActionStatus.PENDING,
            created_by=created_by,
        ))
    return actions


async def save_inspection(db: AsyncSession, user: Profile, data,
                          inspection: Optional[VehicleInspection] = None) -> VehicleInspection:
    """
    Create a new inspection or update a draft, submitting it when
    ``data.submit`` is set.
    """
    result = await db.execute(select(Vehicle).where(Vehicle.id == data.vehicle_id))
    vehicle = result.scalar_one_or_none()
    if vehicle is None:
        raise NotFoundError("Vehicle not found")

    owner_id = data.user_id or (inspection.user_id if inspection else user.id)
    if owner_id != user.id and not can_manage(user):
        raise PermissionDeniedError("You can only record your own inspections")

    if inspection is not None and inspection.status not in EDITABLE_STATUSES:
        raise ValidationError("Only draft inspections can be edited")

    checklist = checklist_for_vehicle(vehicle)
    items = build_items(data.items, checklist)
    if data.submit:
        validate_submission(data.week_ending, data.mileage, items, data.signature_data)

    if inspection is None:
        inspection = VehicleInspection(user_id=owner_id, status=InspectionStatus.DRAFT)
        db.add(inspection)
    else:
        inspection.user_id = owner_id
        # Old rows must be gone before the new ones hit the unique item/day constraint
        inspection.items.clear()
        await db.flush()

    inspection.vehicle_id = vehicle.id
    inspection.week_ending = data.week_ending
    inspection.mileage = data.mileage
    inspection.checked_by = data.checked_by
    inspection.defects_comments = data.defects_comments
    inspection.items.extend(items)

    if data.submit:
        now = utcnow()
        inspection.status = InspectionStatus.SUBMITTED
        inspection.signature_data = data.signature_data
        inspection.signed_at = now
        inspection.submitted_at = now
        await db.flush()
        actions = create_defect_actions(inspection, created_by=user.id)
        db.add_all(actions)
        logger.info(f"Inspection {inspection.id} submitted with {len(actions)} defect action(s)")

    await db.commit()
    return await load_inspection(db, inspection.id)


async def review_inspection(db: AsyncSession, inspection: VehicleInspection, reviewer: Profile,
                            status: InspectionStatus, manager_comments: Optional[str] = None,
                            action_taken: Optional[str] = None) -> VehicleInspection:
    if status not in REVIEW_OUTCOMES:
        raise ValidationError("Review status must be reviewed or rejected")
    if inspection.status != InspectionStatus.SUBMITTED:
        raise ValidationError("Only submitted inspections can be reviewed")

    inspection.status = status
    inspection.reviewed_by = reviewer.id
    inspection.reviewed_at = utcnow()
    inspection.manager_comments = manager_comments
    if action_taken is not None:
        inspection.action_taken = action_taken
    await db.commit()
    logger.info(f"Inspection {inspection.id} marked {status.value} by {reviewer.id}")
    return await load_inspection(db, inspection.id)


async def delete_inspection(db: AsyncSession, inspection: VehicleInspection, user: Profile) -> None:
    ensure_can_view(inspection, user)
    if inspection.status != InspectionStatus.DRAFT:
        raise ValidationError("Only draft inspections can be deleted")
    await db.delete(inspection)
    await db.commit()


async def complete_action(db: AsyncSession, action_id: int, user: Profile) -> Action:
    result = await db.execute(select(Action).where(Action.id == action_id))
    action = result.scalar_one_or_none()
    if action is None:
        raise NotFoundError("Action not found")
    action.status = ActionStatus.COMPLETED
    action.actioned = True
    action.actioned_at = utcnow()
    action.actioned_by = user.id
    await db.commit()
    await db.refresh(action)
    return action
