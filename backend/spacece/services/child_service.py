"""
Child Service - child profiles, scoped by who is asking

Handles:
- Parent/volunteer reference validation on create and update
- Role-scoped listing (parents see their own, volunteers their assigned)
- Soft delete
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import date
from typing import Optional, List
import logging

from spacece.core.exceptions import (
    ChildNotFoundError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from spacece.core.permissions import CallerIdentity
from spacece.models.child import Child
from spacece.models.user import User
from spacece.schemas.child import ChildCreate, ChildUpdate, ChildResponse
from spacece.services.base import (
    apply_updates,
    check_child_access,
    column_values,
    load_user_summaries,
)

logger = logging.getLogger(__name__)


def years_ago(years: int, today: Optional[date] = None) -> date:
    """Same calendar day ``years`` back, clamped to the earliest representable year"""
    today = today or date.today()
    year = max(today.year - years, date.min.year)
    try:
        return today.replace(year=year)
    except ValueError:
        # 29 February in a non-leap target year
        return today.replace(year=year, day=28)


async def serialize_children(db: AsyncSession, children: List[Child]) -> List[ChildResponse]:
    """Attach parent and volunteer summaries"""
    users = await load_user_summaries(
        db, [c.parent_id for c in children] + [c.volunteer_id for c in children]
    )
    return [
        ChildResponse.model_validate(child).model_copy(update={
            "parent": users.get(child.parent_id),
            "volunteer": users.get(child.volunteer_id),
        })
        for child in children
    ]


class ChildService:
    """Service for child profiles"""

    async def _find_user(self, db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def _is_valid_volunteer(self, db: AsyncSession, volunteer_id: str) -> bool:
        volunteer = await self._find_user(db, volunteer_id)
        return volunteer is not None and volunteer.can_volunteer

    async def _get_or_404(self, db: AsyncSession, child_id: str) -> Child:
        result = await db.execute(select(Child).where(Child.id == child_id))
        child = result.scalar_one_or_none()
        if not child:
            raise ChildNotFoundError(child_id)
        return child

    async def create_child(
        self,
        db: AsyncSession,
        body: ChildCreate,
        caller: CallerIdentity
    ) -> ChildResponse:
        """
        Create a child profile.

        Parent-like callers always own the child they create. Anyone else
        must name an existing parent.
        """
        values = column_values(body)

        if caller.is_parent_like:
            values["parent_id"] = caller.id
        elif not body.parent_id:
            raise ValidationError("Parent ID is required", field="parentId")

        if not await self._find_user(db, values["parent_id"]):
            raise NotFoundError("Parent not found", code="PARENT_NOT_FOUND")

        if body.volunteer_id and not await self._is_valid_volunteer(db, body.volunteer_id):
            raise NotFoundError("Valid volunteer not found", code="VOLUNTEER_NOT_FOUND")

        child = Child(**values)
        db.add(child)
        await db.commit()
        await db.refresh(child)

        logger.info(f"Created child {child.id} for parent {child.parent_id} by {caller.id}")
        return (await serialize_children(db, [child]))[0]

    async def list_children(
        self,
        db: AsyncSession,
        caller: CallerIdentity,
        is_active: Optional[bool] = None,
        min_age: Optional[int] = None,
        max_age: Optional[int] = None,
        include_deleted: bool = False,
    ) -> List[ChildResponse]:
        """
        Children visible to the caller.

        Age bounds are whole years: a child is ``min_age`` or older and has
        not yet turned ``max_age + 1``.
        """
        query = select(Child)

        if caller.is_parent_like:
            query = query.where(Child.parent_id == caller.id)
        elif caller.is_volunteer:
            query = query.where(Child.volunteer_id == caller.id)

        if is_active is not None:
            query = query.where(Child.is_active == is_active)

        if min_age is not None:
            query = query.where(Child.dob <= years_ago(min_age))
        if max_age is not None:
            query = query.where(Child.dob > years_ago(max_age + 1))

        if not (caller.is_admin and include_deleted):
            query = query.where(Child.is_deleted.is_(False))

        result = await db.execute(query.order_by(Child.created_at.desc()))
        return await serialize_children(db, list(result.scalars().all()))

    async def get_child(self, db: AsyncSession, child_id: str, caller: CallerIdentity) -> ChildResponse:
        """Soft-deleted children stay readable by id"""
        child = await self._get_or_404(db, child_id)
        check_child_access(child, caller, "Not authorized to access this child's information")
        return (await serialize_children(db, [child]))[0]

    async def update_child(
        self,
        db: AsyncSession,
        child_id: str,
        body: ChildUpdate,
        caller: CallerIdentity
    ) -> ChildResponse:
        child = await self._get_or_404(db, child_id)
        check_child_access(child, caller, "Not authorized to update this child")

        values = column_values(body, exclude_unset=True)

        if values.get("volunteer_id"):
            if not (caller.is_admin or caller.is_volunteer):
                raise ForbiddenError("Not authorized to update volunteer assignment")
            if not await self._is_valid_volunteer(db, values["volunteer_id"]):
                raise ValidationError("Valid volunteer not found", field="volunteerId")
        elif "volunteer_id" in values and not (caller.is_admin or caller.is_volunteer):
            # Clearing the assignment is still an assignment change
            raise ForbiddenError("Not authorized to update volunteer assignment")

        apply_updates(child, values)
        await db.commit()
        await db.refresh(child)

        logger.info(f"Updated child {child.id} fields={sorted(values)} by {caller.id}")
        return (await serialize_children(db, [child]))[0]

    async def delete_child(self, db: AsyncSession, child_id: str, caller: CallerIdentity) -> None:
        child = await self._get_or_404(db, child_id)
        child.is_deleted = True
        await db.commit()
        logger.info(f"Soft-deleted child {child.id} by {caller.id}")


# Singleton instance
child_service = ChildService()
