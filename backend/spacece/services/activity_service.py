"""
Activity Service - curated activity library
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, List
import logging

from spacece.core.exceptions import ActivityNotFoundError, ForbiddenError
from spacece.core.permissions import CallerIdentity
from spacece.models.activity import Activity, DifficultyLevel
from spacece.models.milestone import DevelopmentDomain
from spacece.schemas.activity import ActivityCreate, ActivityUpdate, ActivityResponse
from spacece.services.base import apply_updates, column_values

logger = logging.getLogger(__name__)


def parse_tags(tags: Optional[str]) -> List[str]:
    """Comma-separated query value to a clean list"""
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def _split_age_range(values: dict) -> dict:
    age_range = values.pop("age_range", None)
    if age_range is not None:
        values["age_min"] = age_range["min"]
        values["age_max"] = age_range["max"]
    return values


class ActivityService:
    """Service for activities"""

    async def _get_or_404(self, db: AsyncSession, activity_id: str) -> Activity:
        result = await db.execute(select(Activity).where(Activity.id == activity_id))
        activity = result.scalar_one_or_none()
        if not activity or activity.is_deleted:
            raise ActivityNotFoundError(activity_id)
        return activity

    def _visible(self, query, caller: CallerIdentity):
        query = query.where(Activity.is_deleted.is_(False))
        if not caller.is_admin:
            query = query.where(Activity.is_approved.is_(True))
        return query

    async def create_activity(
        self,
        db: AsyncSession,
        body: ActivityCreate,
        caller: CallerIdentity
    ) -> ActivityResponse:
        values = _split_age_range(column_values(body))
        activity = Activity(**values, created_by=caller.id)
        db.add(activity)
        await db.commit()
        await db.refresh(activity)

        logger.info(f"Created activity {activity.id} '{activity.title}' by {caller.id}")
        return ActivityResponse.model_validate(activity)

    async def list_activities(
        self,
        db: AsyncSession,
        caller: CallerIdentity,
        domain: Optional[DevelopmentDomain] = None,
        language: Optional[str] = None,
        tags: Optional[str] = None,
        difficulty_level: Optional[DifficultyLevel] = None,
    ) -> List[ActivityResponse]:
        """
        Visible activities, newest first.

        ``tags`` matches when any requested tag appears on the activity. Tags
        live in a JSON column, so that filter runs after the query.
        """
        query = self._visible(select(Activity), caller)
        if domain:
            query = query.where(Activity.domain == domain)
        if language:
            query = query.where(Activity.language == language)
        if difficulty_level:
            query = query.where(Activity.difficulty_level == difficulty_level)

        result = await db.execute(query.order_by(Activity.created_at.desc()))
        activities = list(result.scalars().all())

        wanted = set(parse_tags(tags))
        if wanted:
            activities = [a for a in activities if wanted.intersection(a.tags or [])]

        return [ActivityResponse.model_validate(a) for a in activities]

    async def list_activities_by_age(
        self,
        db: AsyncSession,
        age_in_months: int,
        caller: CallerIdentity,
        domain: Optional[DevelopmentDomain] = None,
        language: Optional[str] = None,
    ) -> List[ActivityResponse]:
        """Activities whose age window contains ``age_in_months``"""
        query = self._visible(select(Activity), caller).where(
            Activity.age_min <= age_in_months,
            Activity.age_max >= age_in_months,
        )
        if domain:
            query = query.where(Activity.domain == domain)
        if language:
            query = query.where(Activity.language == language)

        result = await db.execute(query.order_by(Activity.created_at.desc()))
        return [ActivityResponse.model_validate(a) for a in result.scalars().all()]

    async def get_activity(self, db: AsyncSession, activity_id: str, caller: CallerIdentity) -> ActivityResponse:
        activity = await self._get_or_404(db, activity_id)
        if not activity.is_approved and not caller.is_admin:
            raise ForbiddenError("This activity is not approved yet")
        return ActivityResponse.model_validate(activity)

    async def update_activity(
        self,
        db: AsyncSession,
        activity_id: str,
        body: ActivityUpdate,
        caller: CallerIdentity
    ) -> ActivityResponse:
        activity = await self._get_or_404(db, activity_id)

        values = _split_age_range(column_values(body, exclude_unset=True))
        apply_updates(activity, values)
        await db.commit()
        await db.refresh(activity)

        logger.info(f"Updated activity {activity.id} fields={sorted(values)} by {caller.id}")
        return ActivityResponse.model_validate(activity)

    async def delete_activity(self, db: AsyncSession, activity_id: str, caller: CallerIdentity) -> None:
        activity = await self._get_or_404(db, activity_id)
        activity.is_deleted = True
        await db.commit()
        logger.info(f"Soft-deleted activity {activity.id} by {caller.id}")


# Singleton instance
activity_service = ActivityService()
