from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from spacece.core.database import get_db
from spacece.core.permissions import CallerIdentity
from spacece.modules.auth.dependencies import require_permission
from spacece.schemas.child import ChildCreate, ChildUpdate
from spacece.schemas.common import dump, success_response
from spacece.services.child_service import child_service

router = APIRouter()

MAX_AGE_YEARS = 150


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_child(
    body: ChildCreate,
    caller: CallerIdentity = Depends(require_permission("children", "create")),
    db: AsyncSession = Depends(get_db)
):
    """Create a child profile. Parents always become the child's parent."""
    child = await child_service.create_child(db, body, caller)
    return success_response(dump(child))


@router.get("")
async def list_children(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    min_age: Optional[int] = Query(None, ge=0, le=MAX_AGE_YEARS, alias="minAge", description="Minimum age in years"),
    max_age: Optional[int] = Query(None, ge=0, le=MAX_AGE_YEARS, alias="maxAge", description="Maximum age in years"),
    include_deleted: bool = Query(False, alias="includeDeleted", description="Admin only"),
    caller: CallerIdentity = Depends(require_permission("children", "list")),
    db: AsyncSession = Depends(get_db)
):
    """Children visible to the caller"""
    children = await child_service.list_children(
        db, caller,
        is_active=is_active,
        min_age=min_age,
        max_age=max_age,
        include_deleted=include_deleted,
    )
    return success_response([dump(c) for c in children], count=len(children))


@router.get("/{child_id}")
async def get_child(
    child_id: str,
    caller: CallerIdentity = Depends(require_permission("children", "read")),
    db: AsyncSession = Depends(get_db)
):
    child = await child_service.get_child(db, child_id, caller)
    return success_response(dump(child))


@router.put("/{child_id}")
async def update_child(
    child_id: str,
    body: ChildUpdate,
    caller: CallerIdentity = Depends(require_permission("children", "update")),
    db: AsyncSession = Depends(get_db)
):
    child = await child_service.update_child(db, child_id, body, caller)
    return success_response(dump(child))


@router.delete("/{child_id}")
async def delete_child(
    child_id: str,
    caller: CallerIdentity = Depends(require_permission("children", "delete")),
    db: AsyncSession = Depends(get_db)
):
    """Soft delete"""
    await child_service.delete_child(db, child_id, caller)
    return success_response(message="Child deleted successfully")
