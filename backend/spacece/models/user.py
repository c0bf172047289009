from sqlalchemy import Column, String, Boolean, DateTime, JSON
from datetime import datetime
import enum

from spacece.core.database import Base
from spacece.core.types import GUID, generate_uuid, value_enum


class UserRole(str, enum.Enum):
    """User roles"""
    ADMIN = "admin"
    PARENT = "parent"
    VOLUNTEER = "volunteer"
    USER = "user"


# Roles that own children the way a parent does
PARENT_LIKE_ROLES = frozenset({UserRole.PARENT, UserRole.USER})


class User(Base):
    """Any platform actor: admin, parent, volunteer or plain user"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    hashed_password = Column(String(255), nullable=True)

    role = Column(value_enum(UserRole, length=20), default=UserRole.USER, nullable=False, index=True)
    is_email_verified = Column(Boolean, default=False)
    avatar = Column(String(500), nullable=True)

    # {"phone", "address": {...}, "preferredLanguage"}
    parent_profile = Column(JSON, nullable=True)
    # {"phone", "address", "specializations", "qualifications", "availability",
    #  "joinedDate", "status", "supervisor", "trainingCompleted", "assignedChildren"}
    volunteer_profile = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_parent_like(self) -> bool:
        return self.role in PARENT_LIKE_ROLES

    @property
    def can_volunteer(self) -> bool:
        """Volunteers and admins may be assigned to children and record visits"""
        return self.role in (UserRole.VOLUNTEER, UserRole.ADMIN)

    def __repr__(self):
        return f"<User {self.email}>"
