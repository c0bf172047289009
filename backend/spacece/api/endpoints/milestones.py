from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Optional

from spacece.core.database import get_db
from spacece.core.permissions import CallerIdentity
from spacece.models.milestone import DevelopmentDomain, MilestoneStatus
from spacece.modules.auth.dependencies import require_permission
from spacece.schemas.common import dump, success_response
from spacece.schemas.milestone import MilestoneCreate
from spacece.services.milestone_service import milestone_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_milestone(
    body: MilestoneCreate,
    caller: CallerIdentity = Depends(require_permission("milestones", "create")),
    db: AsyncSession = Depends(get_db)
):
    milestone = await milestone_service.create_milestone(db, body, caller)
    return success_response(dump(milestone))


@router.get("/child/{child_id}")
async def list_milestones_by_child(
    child_id: str,
    domain: Optional[DevelopmentDomain] = Query(None),
    milestone_status: Optional[MilestoneStatus] = Query(None, alias="status"),
    caller: CallerIdentity = Depends(require_permission("milestones", "list_by_child")),
    db: AsyncSession = Depends(get_db)
):
    """A child's milestones, newest first"""
    milestones = await milestone_service.list_milestones_by_child(
        db, child_id, caller, domain=domain, status=milestone_status
    )
    return success_response([dump(m) for m in milestones], count=len(milestones))


@router.get("/{milestone_id}")
async def get_milestone(
    milestone_id: str,
    caller: CallerIdentity = Depends(require_permission("milestones", "read")),
    db: AsyncSession = Depends(get_db)
):
    milestone = await milestone_service.get_milestone(db, milestone_id, caller)
    return success_response(dump(milestone))


@router.put("/{milestone_id}")
async def update_milestone(
    milestone_id: str,
    body: Dict[str, Any] = Body(..., description="MilestoneUpdate fields; parents may only send notes, mediaURL and activities"),
    caller: CallerIdentity = Depends(require_permission("milestones", "update")),
    db: AsyncSession = Depends(get_db)
):
    """Partial update, validated against the fields the caller's role may change"""
    milestone = await milestone_service.update_milestone(db, milestone_id, body, caller)
    return success_response(dump(milestone))


@router.delete("/{milestone_id}")
async def delete_milestone(
    milestone_id: str,
    caller: CallerIdentity = Depends(require_permission("milestones", "delete")),
    db: AsyncSession = Depends(get_db)
):
    await milestone_service.delete_milestone(db, milestone_id, caller)
    return success_response(message="Milestone deleted successfully")
