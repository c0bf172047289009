"""
User Service - admin management of accounts and self-service profile edits
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, List
import logging

from spacece.core.exceptions import ForbiddenError, UserNotFoundError, ValidationError
from spacece.core.permissions import CallerIdentity
from spacece.models.user import User, UserRole
from spacece.schemas.user import UserUpdate, UserResponse

logger = logging.getLogger(__name__)


def _merge_profile(stored: Optional[dict], submitted: dict) -> dict:
    merged = dict(stored or {})
    merged.update(submitted)
    return merged


class UserService:
    """Service for listing and editing users"""

    async def _get_or_404(self, db: AsyncSession, user_id: str) -> User:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def list_users(self, db: AsyncSession, role: Optional[str] = None) -> List[UserResponse]:
        """All users, newest first, optionally narrowed to one role"""
        query = select(User)
        if role:
            try:
                query = query.where(User.role == UserRole(role))
            except ValueError:
                raise ValidationError("Invalid role", field="role")

        result = await db.execute(query.order_by(User.created_at.desc()))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def get_user(self, db: AsyncSession, user_id: str) -> UserResponse:
        return UserResponse.model_validate(await self._get_or_404(db, user_id))

    async def update_user(
        self,
        db: AsyncSession,
        user_id: str,
        body: UserUpdate,
        caller: CallerIdentity
    ) -> UserResponse:
        """
        Update basic fields and merge profile objects.

        Only admins or the user themselves may update. ``role`` is silently
        dropped for non-admins; for admins it must be a known role.
        """
        user = await self._get_or_404(db, user_id)

        if not caller.is_admin and caller.id != user_id:
            raise ForbiddenError("Not authorized to update this user")

        submitted = body.model_fields_set

        if "role" in submitted and body.role is not None and caller.is_admin:
            try:
                new_role = UserRole(body.role)
            except ValueError:
                raise ValidationError("Invalid role", field="role")
            if new_role != user.role:
                logger.info(f"User {user.id} role changed {user.role.value} -> {new_role.value} by {caller.id}")
            user.role = new_role

        if body.parent_profile is not None:
            submitted_profile = body.parent_profile.model_dump(by_alias=True, mode="json", exclude_unset=True)
            user.parent_profile = _merge_profile(user.parent_profile, submitted_profile)

        if body.volunteer_profile is not None:
            submitted_profile = body.volunteer_profile.model_dump(by_alias=True, mode="json", exclude_unset=True)
            user.volunteer_profile = _merge_profile(user.volunteer_profile, submitted_profile)

        if body.name:
            user.name = body.name
        if body.avatar:
            user.avatar = body.avatar
        if body.phone:
            user.phone = body.phone

        await db.commit()
        await db.refresh(user)

        logger.info(f"Updated user {user.id}")
        return UserResponse.model_validate(user)

    async def delete_user(self, db: AsyncSession, user_id: str) -> None:
        """
        Hard delete. Children, visits and milestones that reference the user
        keep the now-dangling id.
        """
        user = await self._get_or_404(db, user_id)
        await db.delete(user)
        await db.commit()
        logger.info(f"Deleted user {user_id}")


# Singleton instance
user_service = UserService()
