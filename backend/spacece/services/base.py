"""
Helpers shared by the record services: mapping request bodies onto columns,
loading populated references and the ownership check on children.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from pydantic import BaseModel
from pydantic_core import to_jsonable_python
from typing import Any, Dict, Iterable, Optional

from spacece.core.exceptions import ForbiddenError, NotFoundError
from spacece.core.permissions import CallerIdentity
from spacece.models.child import Child
from spacece.models.user import User
from spacece.schemas.common import UserSummary, ChildSummary


def column_values(body: BaseModel, exclude_unset: bool = False) -> Dict[str, Any]:
    """
    Map a request body onto column values.

    Scalars (enums, dates) keep their Python types. Nested objects and lists
    are stored in their JSON wire shape, camelCase keys included.
    """
    names = body.model_fields_set if exclude_unset else type(body).model_fields.keys()
    values: Dict[str, Any] = {}
    for name in names:
        value = getattr(body, name)
        if isinstance(value, (BaseModel, list, dict)):
            value = to_jsonable_python(value, by_alias=True)
        values[name] = value
    return values


def apply_updates(record: Any, values: Dict[str, Any]) -> None:
    """Set submitted values, skipping explicit nulls on NOT NULL columns"""
    columns = record.__table__.columns
    for key, value in values.items():
        column = columns.get(key)
        if column is None:
            continue
        if value is None and not column.nullable:
            continue
        setattr(record, key, value)


async def load_user_summaries(db: AsyncSession, ids: Iterable[Optional[str]]) -> Dict[str, UserSummary]:
    wanted = {i for i in ids if i}
    if not wanted:
        return {}
    result = await db.execute(select(User).where(User.id.in_(wanted)))
    return {
        user.id: UserSummary(id=user.id, name=user.name, email=user.email)
        for user in result.scalars()
    }


async def load_child_summaries(db: AsyncSession, ids: Iterable[Optional[str]]) -> Dict[str, ChildSummary]:
    wanted = {i for i in ids if i}
    if not wanted:
        return {}
    result = await db.execute(select(Child).where(Child.id.in_(wanted)))
    return {
        child.id: ChildSummary(id=child.id, name=child.name, dob=child.dob, gender=child.gender.value)
        for child in result.scalars()
    }


async def get_child_or_404(
    db: AsyncSession,
    child_id: str,
    message: str = "Child not found",
    allow_deleted: bool = True
) -> Child:
    result = await db.execute(select(Child).where(Child.id == child_id))
    child = result.scalar_one_or_none()
    if not child or (child.is_deleted and not allow_deleted):
        raise NotFoundError(message, code="CHILD_NOT_FOUND")
    return child


def can_access_child(child: Child, caller: CallerIdentity) -> bool:
    """Admins see every child, parents their own, volunteers their assigned ones"""
    if caller.is_admin:
        return True
    if caller.is_parent_like:
        return child.parent_id == caller.id
    if caller.is_volunteer:
        return child.volunteer_id is not None and child.volunteer_id == caller.id
    return False


def check_child_access(child: Child, caller: CallerIdentity, message: str) -> None:
    if not can_access_child(child, caller):
        raise ForbiddenError(message)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative ratios used in reports"""
    return int(value + 0.5)
