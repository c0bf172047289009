from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from spacece.core.database import get_db
from spacece.core.permissions import CallerIdentity
from spacece.modules.auth.dependencies import require_permission
from spacece.schemas.common import UTCDateTime, dump, success_response
from spacece.schemas.visit import VisitCreate, VisitUpdate
from spacece.services.visit_service import visit_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_visit(
    body: VisitCreate,
    caller: CallerIdentity = Depends(require_permission("visits", "create")),
    db: AsyncSession = Depends(get_db)
):
    """Record a visit and stamp the child's last visit date"""
    visit = await visit_service.create_visit(db, body, caller)
    return success_response(dump(visit))


@router.get("/child/{child_id}")
async def list_visits_by_child(
    child_id: str,
    start_date: Optional[UTCDateTime] = Query(None, alias="startDate"),
    end_date: Optional[UTCDateTime] = Query(None, alias="endDate"),
    caller: CallerIdentity = Depends(require_permission("visits", "list_by_child")),
    db: AsyncSession = Depends(get_db)
):
    visits = await visit_service.list_visits_by_child(
        db, child_id, caller, start_date=start_date, end_date=end_date
    )
    return success_response([dump(v) for v in visits], count=len(visits))


@router.get("/volunteer/{volunteer_id}")
async def list_visits_by_volunteer(
    volunteer_id: str,
    start_date: Optional[UTCDateTime] = Query(None, alias="startDate"),
    end_date: Optional[UTCDateTime] = Query(None, alias="endDate"),
    caller: CallerIdentity = Depends(require_permission("visits", "list_by_volunteer")),
    db: AsyncSession = Depends(get_db)
):
    visits = await visit_service.list_visits_by_volunteer(
        db, volunteer_id, caller, start_date=start_date, end_date=end_date
    )
    return success_response([dump(v) for v in visits], count=len(visits))


@router.get("/{visit_id}")
async def get_visit(
    visit_id: str,
    caller: CallerIdentity = Depends(require_permission("visits", "read")),
    db: AsyncSession = Depends(get_db)
):
    visit = await visit_service.get_visit(db, visit_id, caller)
    return success_response(dump(visit))


@router.put("/{visit_id}")
async def update_visit(
    visit_id: str,
    body: VisitUpdate,
    caller: CallerIdentity = Depends(require_permission("visits", "update")),
    db: AsyncSession = Depends(get_db)
):
    visit = await visit_service.update_visit(db, visit_id, body, caller)
    return success_response(dump(visit))


@router.delete("/{visit_id}")
async def delete_visit(
    visit_id: str,
    caller: CallerIdentity = Depends(require_permission("visits", "delete")),
    db: AsyncSession = Depends(get_db)
):
    await visit_service.delete_visit(db, visit_id, caller)
    return success_response(message="Visit deleted successfully")
