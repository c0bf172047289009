"""
Users Management API

Admins list, read and delete accounts. Anyone may update their own profile;
only admins may change roles.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from spacece.core.database import get_db
from spacece.core.permissions import CallerIdentity
from spacece.modules.auth.dependencies import require_permission
from spacece.schemas.common import dump, success_response
from spacece.schemas.user import UserUpdate
from spacece.services.user_service import user_service

router = APIRouter()


@router.get("")
async def list_users(
    role: Optional[str] = Query(None, description="Filter by role"),
    caller: CallerIdentity = Depends(require_permission("users", "list")),
    db: AsyncSession = Depends(get_db)
):
    users = await user_service.list_users(db, role)
    return success_response([dump(u) for u in users], count=len(users))


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    caller: CallerIdentity = Depends(require_permission("users", "read")),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.get_user(db, user_id)
    return success_response(dump(user))


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    body: UserUpdate,
    caller: CallerIdentity = Depends(require_permission("users", "update")),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.update_user(db, user_id, body, caller)
    return success_response(dump(user))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    caller: CallerIdentity = Depends(require_permission("users", "delete")),
    db: AsyncSession = Depends(get_db)
):
    """Hard delete; references held by other records are left as they are"""
    await user_service.delete_user(db, user_id)
    return success_response(message="User deleted successfully")
