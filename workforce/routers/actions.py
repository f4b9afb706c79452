"""
Defect action routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import require_manager_admin
from workforce.database import get_db
from workforce.models.inspection import Action, ActionStatus
from workforce.models.user import Profile
from workforce.schemas.inspection import Action as ActionSchema
from workforce.services.inspections import complete_action

router = APIRouter(prefix="/actions", tags=["actions"])


@router.get("/", response_model=List[ActionSchema])
async def get_actions(
    status_filter: Optional[ActionStatus] = Query(None, alias="status"),
    inspection_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    """
    Get actions, open ones first.
    """
    query = select(Action).order_by(Action.actioned, Action.created_at.desc(), Action.id.desc())
    if status_filter is not None:
        query = query.where(Action.status == status_filter)
    if inspection_id is not None:
        query = query.where(Action.inspection_id == inspection_id)
    result = await db.execute(query)
    return result.scalars().all()


@router.post("/{action_id}/complete", response_model=ActionSchema)
async def mark_action_complete(
    action_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(require_manager_admin),
):
    return await complete_action(db, action_id, current_user)
