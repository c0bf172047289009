"""
Visit Service - volunteer visit records

Creating a visit also stamps the child's ``last_visit_date``. Both writes go
out in the same commit.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import Optional, List
import logging

from spacece.core.exceptions import ForbiddenError, NotFoundError, VisitNotFoundError
from spacece.core.permissions import CallerIdentity
from spacece.models.user import User
from spacece.models.visit import Visit
from spacece.schemas.visit import VisitCreate, VisitUpdate, VisitResponse
from spacece.services.base import (
    apply_updates,
    check_child_access,
    column_values,
    get_child_or_404,
    load_child_summaries,
    load_user_summaries,
)

logger = logging.getLogger(__name__)


async def serialize_visits(db: AsyncSession, visits: List[Visit]) -> List[VisitResponse]:
    """Attach child and volunteer summaries"""
    users = await load_user_summaries(db, [v.volunteer_id for v in visits])
    children = await load_child_summaries(db, [v.child_id for v in visits])
    return [
        VisitResponse.model_validate(v).model_copy(update={
            "volunteer": users.get(v.volunteer_id),
            "child": children.get(v.child_id),
        })
        for v in visits
    ]


def _date_range(query, start_date: Optional[datetime], end_date: Optional[datetime]):
    if start_date:
        query = query.where(Visit.visit_date >= start_date)
    if end_date:
        query = query.where(Visit.visit_date <= end_date)
    return query


class VisitService:
    """Service for visit records"""

    async def _get_or_404(self, db: AsyncSession, visit_id: str) -> Visit:
        result = await db.execute(select(Visit).where(Visit.id == visit_id))
        visit = result.scalar_one_or_none()
        if not visit:
            raise VisitNotFoundError(visit_id)
        return visit

    async def _get_volunteer_or_404(self, db: AsyncSession, volunteer_id: Optional[str], message: str) -> User:
        volunteer = None
        if volunteer_id:
            result = await db.execute(select(User).where(User.id == volunteer_id))
            volunteer = result.scalar_one_or_none()
        if not volunteer or not volunteer.can_volunteer:
            raise NotFoundError(message, code="VOLUNTEER_NOT_FOUND")
        return volunteer

    async def create_visit(
        self,
        db: AsyncSession,
        body: VisitCreate,
        caller: CallerIdentity
    ) -> VisitResponse:
        """
        Record a visit.

        A volunteer caller defaults to recording under their own id and may
        only record visits for children assigned to them.
        """
        values = column_values(body)
        if caller.is_volunteer and not body.volunteer_id:
            values["volunteer_id"] = caller.id

        child = await get_child_or_404(db, body.child_id, allow_deleted=False)
        await self._get_volunteer_or_404(db, values["volunteer_id"], "Valid volunteer not found")

        if caller.is_volunteer and child.volunteer_id != caller.id:
            raise ForbiddenError("Not authorized to create visit records for this child/volunteer")

        if values.get("visit_date") is None:
            values["visit_date"] = datetime.utcnow()

        visit = Visit(**values)
        db.add(visit)
        child.last_visit_date = visit.visit_date
        await db.commit()
        await db.refresh(visit)

        logger.info(f"Recorded visit {visit.id} for child {child.id} by volunteer {visit.volunteer_id}")
        return (await serialize_visits(db, [visit]))[0]

    async def get_visit(self, db: AsyncSession, visit_id: str, caller: CallerIdentity) -> VisitResponse:
        visit = await self._get_or_404(db, visit_id)

        if caller.is_parent_like:
            child = await get_child_or_404(db, visit.child_id)
            check_child_access(child, caller, "Not authorized to view this visit")
        elif caller.is_volunteer and visit.volunteer_id != caller.id:
            raise ForbiddenError("Not authorized to view this visit")

        return (await serialize_visits(db, [visit]))[0]

    async def list_visits_by_child(
        self,
        db: AsyncSession,
        child_id: str,
        caller: CallerIdentity,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[VisitResponse]:
        child = await get_child_or_404(db, child_id)
        check_child_access(child, caller, "Not authorized to view visits for this child")

        query = select(Visit).where(Visit.child_id == child_id, Visit.is_deleted.is_(False))
        query = _date_range(query, start_date, end_date)

        result = await db.execute(query.order_by(Visit.visit_date.desc()))
        return await serialize_visits(db, list(result.scalars().all()))

    async def list_visits_by_volunteer(
        self,
        db: AsyncSession,
        volunteer_id: str,
        caller: CallerIdentity,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[VisitResponse]:
        if caller.is_volunteer and caller.id != volunteer_id:
            raise ForbiddenError("Volunteers can only view their own visits")

        await self._get_volunteer_or_404(db, volunteer_id, "Volunteer not found")

        query = select(Visit).where(Visit.volunteer_id == volunteer_id, Visit.is_deleted.is_(False))
        query = _date_range(query, start_date, end_date)

        result = await db.execute(query.order_by(Visit.visit_date.desc()))
        return await serialize_visits(db, list(result.scalars().all()))

    async def update_visit(
        self,
        db: AsyncSession,
        visit_id: str,
        body: VisitUpdate,
        caller: CallerIdentity
    ) -> VisitResponse:
        """Only the recording volunteer or an admin may update"""
        visit = await self._get_or_404(db, visit_id)

        if not caller.is_admin and visit.volunteer_id != caller.id:
            raise ForbiddenError("Not authorized to update this visit")

        values = column_values(body, exclude_unset=True)
        apply_updates(visit, values)
        await db.commit()
        await db.refresh(visit)

        logger.info(f"Updated visit {visit.id} fields={sorted(values)} by {caller.id}")
        return (await serialize_visits(db, [visit]))[0]

    async def delete_visit(self, db: AsyncSession, visit_id: str, caller: CallerIdentity) -> None:
        visit = await self._get_or_404(db, visit_id)
        visit.is_deleted = True
        await db.commit()
        logger.info(f"Soft-deleted visit {visit.id} by {caller.id}")


# Singleton instance
visit_service = VisitService()
