"""
Milestone Service - developmental checkpoints recorded against a child
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from pydantic import ValidationError as PydanticValidationError
from typing import Any, Dict, List, Optional, Type
import logging

from spacece.core.exceptions import MilestoneNotFoundError, ValidationError
from spacece.core.permissions import CallerIdentity
from spacece.models.milestone import Milestone, MilestoneStatus, DevelopmentDomain
from spacece.schemas.common import CamelModel
from spacece.schemas.milestone import (
    MilestoneCreate,
    MilestoneUpdate,
    MilestoneResponse,
    ParentMilestoneUpdate,
)
from spacece.services.base import (
    apply_updates,
    check_child_access,
    column_values,
    get_child_or_404,
    load_user_summaries,
)

logger = logging.getLogger(__name__)


def parse_update(schema: Type[CamelModel], payload: Dict[str, Any]) -> CamelModel:
    """Validate an update body, reporting the first problem as a 400"""
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        message = f"{field}: {first['msg']}" if field else first["msg"]
        raise ValidationError(message, field=field or None) from exc


async def serialize_milestones(db: AsyncSession, milestones: List[Milestone]) -> List[MilestoneResponse]:
    users = await load_user_summaries(db, [m.assessed_by for m in milestones])
    return [
        MilestoneResponse.model_validate(m).model_copy(update={"assessor": users.get(m.assessed_by)})
        for m in milestones
    ]


class MilestoneService:
    """Service for milestones"""

    async def _get_or_404(self, db: AsyncSession, milestone_id: str) -> Milestone:
        result = await db.execute(select(Milestone).where(Milestone.id == milestone_id))
        milestone = result.scalar_one_or_none()
        if not milestone:
            raise MilestoneNotFoundError(milestone_id)
        return milestone

    async def create_milestone(
        self,
        db: AsyncSession,
        body: MilestoneCreate,
        caller: CallerIdentity
    ) -> MilestoneResponse:
        child = await get_child_or_404(db, body.child_id, allow_deleted=False)
        check_child_access(child, caller, "Not authorized to add milestones for this child")

        values = column_values(body)
        values["assessed_by"] = body.assessed_by or caller.id

        milestone = Milestone(**values)
        db.add(milestone)
        await db.commit()
        await db.refresh(milestone)

        logger.info(f"Created milestone {milestone.id} ({milestone.domain.value}) for child {child.id} by {caller.id}")
        return (await serialize_milestones(db, [milestone]))[0]

    async def get_milestone(
        self,
        db: AsyncSession,
        milestone_id: str,
        caller: CallerIdentity
    ) -> MilestoneResponse:
        milestone = await self._get_or_404(db, milestone_id)
        child = await get_child_or_404(db, milestone.child_id, message="Associated child not found")
        check_child_access(child, caller, "Not authorized to view this milestone")
        return (await serialize_milestones(db, [milestone]))[0]

    async def list_milestones_by_child(
        self,
        db: AsyncSession,
        child_id: str,
        caller: CallerIdentity,
        domain: Optional[DevelopmentDomain] = None,
        status: Optional[MilestoneStatus] = None,
    ) -> List[MilestoneResponse]:
        """Non-deleted milestones for a child, newest first"""
        child = await get_child_or_404(db, child_id)
        check_child_access(child, caller, "Not authorized to view this child's milestones")

        query = select(Milestone).where(
            Milestone.child_id == child_id,
            Milestone.is_deleted.is_(False),
        )
        if domain:
            query = query.where(Milestone.domain == domain)
        if status:
            query = query.where(Milestone.status == status)

        result = await db.execute(query.order_by(Milestone.created_at.desc()))
        return await serialize_milestones(db, list(result.scalars().all()))

    async def update_milestone(
        self,
        db: AsyncSession,
        milestone_id: str,
        payload: Dict[str, Any],
        caller: CallerIdentity
    ) -> MilestoneResponse:
        """
        Partial update.

        Parent-like callers may only touch notes, media and activities; any
        other submitted field is ignored without being validated.
        """
        milestone = await self._get_or_404(db, milestone_id)
        child = await get_child_or_404(db, milestone.child_id, message="Associated child not found")
        check_child_access(child, caller, "Not authorized to update this milestone")

        schema = ParentMilestoneUpdate if caller.is_parent_like else MilestoneUpdate
        values = column_values(parse_update(schema, payload), exclude_unset=True)

        status = values.get("status") or milestone.status
        achieved_date = values["achieved_date"] if "achieved_date" in values else milestone.achieved_date
        if status == MilestoneStatus.ACHIEVED and achieved_date is None:
            raise ValidationError("achievedDate is required when status is Achieved", field="achievedDate")

        apply_updates(milestone, values)
        await db.commit()
        await db.refresh(milestone)

        logger.info(f"Updated milestone {milestone.id} fields={sorted(values)} by {caller.id}")
        return (await serialize_milestones(db, [milestone]))[0]

    async def delete_milestone(self, db: AsyncSession, milestone_id: str, caller: CallerIdentity) -> None:
        milestone = await self._get_or_404(db, milestone_id)
        milestone.is_deleted = True
        await db.commit()
        logger.info(f"Soft-deleted milestone {milestone.id} by {caller.id}")


# Singleton instance
milestone_service = MilestoneService()
