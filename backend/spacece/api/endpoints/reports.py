from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from spacece.core.database import get_db
from spacece.core.permissions import CallerIdentity
from spacece.modules.auth.dependencies import require_permission
from spacece.schemas.common import success_response
from spacece.services.report_service import report_service

router = APIRouter()


@router.get("/summary")
async def summary_report(
    caller: CallerIdentity = Depends(require_permission("reports", "summary")),
    db: AsyncSession = Depends(get_db)
):
    """Organisation-wide counts for the admin dashboard"""
    return success_response(await report_service.summary_report(db))


@router.get("/child/{child_id}")
async def child_report(
    child_id: str,
    caller: CallerIdentity = Depends(require_permission("reports", "child")),
    db: AsyncSession = Depends(get_db)
):
    return success_response(await report_service.child_report(db, child_id, caller))


@router.get("/volunteer/{volunteer_id}")
async def volunteer_report(
    volunteer_id: str,
    caller: CallerIdentity = Depends(require_permission("reports", "volunteer")),
    db: AsyncSession = Depends(get_db)
):
    return success_response(await report_service.volunteer_report(db, volunteer_id, caller))
