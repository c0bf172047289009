from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
import uuid

from spacece.core.database import get_db
from spacece.core.security import decode_token
from spacece.core.exceptions import AuthenticationError, ForbiddenError
from spacece.core.logging_config import logger, set_user_id
from spacece.core.permissions import CallerIdentity, is_allowed
from spacece.models.user import User

# auto_error=False so a missing header is reported as 401 in our envelope
security = HTTPBearer(auto_error=False)


async def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> CallerIdentity:
    """Resolve the caller from the bearer token"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized to access this route")

    payload = decode_token(credentials.credentials)

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    # Validate user_id is a valid UUID format
    try:
        uuid.UUID(str(user_id))
    except ValueError:
        raise AuthenticationError("Invalid user ID format")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        logger.log_auth_event("token", success=False, user_id=user_id, reason="user not found")
        raise AuthenticationError("User not found")

    set_user_id(str(user.id))
    return CallerIdentity(id=str(user.id), role=user.role, email=user.email, name=user.name)


def require_permission(resource: str, operation: str):
    """
    Dependency factory: resolves the caller and checks the permission table.

    Usage:
        caller: CallerIdentity = Depends(require_permission("children", "create"))
    """
    async def permission_checker(
        caller: CallerIdentity = Depends(get_caller)
    ) -> CallerIdentity:
        if not is_allowed(caller.role, resource, operation):
            logger.log_auth_event(
                f"{resource}.{operation}",
                success=False,
                user_id=caller.id,
                reason=f"role {caller.role.value} not allowed"
            )
            raise ForbiddenError(
                f"User role {caller.role.value} is not authorized to access this route"
            )
        return caller

    return permission_checker
