from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from spacece.core.database import get_db
from spacece.core.exceptions import ValidationError
from spacece.core.permissions import CallerIdentity
from spacece.models.activity import DifficultyLevel
from spacece.models.milestone import DevelopmentDomain
from spacece.modules.auth.dependencies import require_permission
from spacece.schemas.activity import ActivityCreate, ActivityUpdate
from spacece.schemas.common import dump, success_response
from spacece.services.activity_service import activity_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_activity(
    body: ActivityCreate,
    caller: CallerIdentity = Depends(require_permission("activities", "create")),
    db: AsyncSession = Depends(get_db)
):
    activity = await activity_service.create_activity(db, body, caller)
    return success_response(dump(activity))


@router.get("")
async def list_activities(
    domain: Optional[DevelopmentDomain] = Query(None),
    language: Optional[str] = Query(None),
    tags: Optional[str] = Query(None, description="Comma-separated; matches any"),
    difficulty_level: Optional[DifficultyLevel] = Query(None, alias="difficultyLevel"),
    caller: CallerIdentity = Depends(require_permission("activities", "list")),
    db: AsyncSession = Depends(get_db)
):
    activities = await activity_service.list_activities(
        db, caller,
        domain=domain,
        language=language,
        tags=tags,
        difficulty_level=difficulty_level,
    )
    return success_response([dump(a) for a in activities], count=len(activities))


@router.get("/age/{age_group}")
async def list_activities_by_age(
    age_group: str,
    domain: Optional[DevelopmentDomain] = Query(None),
    language: Optional[str] = Query(None),
    caller: CallerIdentity = Depends(require_permission("activities", "list_by_age")),
    db: AsyncSession = Depends(get_db)
):
    """Activities suitable for a child of ``age_group`` months"""
    try:
        age_in_months = int(age_group)
    except ValueError:
        raise ValidationError("Invalid age group format. Please provide age in months.", field="ageGroup")

    activities = await activity_service.list_activities_by_age(
        db, age_in_months, caller, domain=domain, language=language
    )
    return success_response([dump(a) for a in activities], count=len(activities))


@router.get("/{activity_id}")
async def get_activity(
    activity_id: str,
    caller: CallerIdentity = Depends(require_permission("activities", "read")),
    db: AsyncSession = Depends(get_db)
):
    activity = await activity_service.get_activity(db, activity_id, caller)
    return success_response(dump(activity))


@router.put("/{activity_id}")
async def update_activity(
    activity_id: str,
    body: ActivityUpdate,
    caller: CallerIdentity = Depends(require_permission("activities", "update")),
    db: AsyncSession = Depends(get_db)
):
    activity = await activity_service.update_activity(db, activity_id, body, caller)
    return success_response(dump(activity))


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: str,
    caller: CallerIdentity = Depends(require_permission("activities", "delete")),
    db: AsyncSession = Depends(get_db)
):
    await activity_service.delete_activity(db, activity_id, caller)
    return success_response(message="Activity deleted successfully")
