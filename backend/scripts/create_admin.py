#!/usr/bin/env python3
"""
Promote a user to admin, creating the account if it doesn't exist.

Prints an access token for the admin so the API can be used before the
external auth service is wired up.

Usage:
    python scripts/create_admin.py admin@example.org
    python scripts/create_admin.py admin@example.org --name "Asha Rao" --password s3cret!
"""

import asyncio
import sys
import argparse
from pathlib import Path
from typing import Optional, Tuple

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spacece.core.database import get_session_local, init_db, close_db
from spacece.core.security import create_access_token, get_password_hash
from spacece.models.user import User, UserRole
from spacece.schemas.user import AdminCreate


async def make_admin(session: AsyncSession, data: AdminCreate) -> Tuple[User, bool]:
    """Return the admin user and whether it was newly created"""
    email = data.email.lower()
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    created = False
    if user:
        user.role = UserRole.ADMIN
    else:
        user = User(
            email=email,
            name=data.name,
            role=UserRole.ADMIN,
            hashed_password=get_password_hash(data.password) if data.password else None,
            is_email_verified=True,
        )
        session.add(user)
        created = True

    await session.commit()
    await session.refresh(user)
    return user, created


async def main(email: str, name: str, password: Optional[str]) -> int:
    try:
        data = AdminCreate(email=email, name=name, password=password)
    except ValidationError as e:
        print(f"[CreateAdmin] ERROR: {e.errors()[0]['msg']}")
        return 1

    await init_db()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            user, created = await make_admin(session, data)
    finally:
        await close_db()

    action = "Created" if created else "Updated"
    print(f"[CreateAdmin] {action} {user.email} with admin role")
    token = create_access_token({"sub": user.id, "email": user.email, "role": user.role.value})
    print(f"[CreateAdmin] Access token:\n{token}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote an admin user")
    parser.add_argument("email", help="Email of the user to promote or create")
    parser.add_argument("--name", default="Administrator", help="Name for a newly created user")
    parser.add_argument("--password", default=None, help="Password for a newly created user")
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.email, args.name, args.password)))
