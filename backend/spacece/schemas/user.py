from pydantic import Field, EmailStr
from typing import Optional, List, Dict, Any
from datetime import datetime

from spacece.models.user import UserRole
from spacece.schemas.common import CamelModel, Address, UTCDateTime


class ParentProfile(CamelModel):
    phone: Optional[str] = None
    address: Optional[Address] = None
    preferred_language: Optional[str] = Field(None, alias="preferredLanguage")


class Availability(CamelModel):
    days: Optional[List[str]] = None
    hours: Optional[str] = None


class VolunteerProfile(CamelModel):
    phone: Optional[str] = None
    address: Optional[Address] = None
    specializations: Optional[List[str]] = None
    qualifications: Optional[List[str]] = None
    availability: Optional[Availability] = None
    joined_date: Optional[UTCDateTime] = Field(None, alias="joinedDate")
    status: Optional[str] = Field(None, pattern="^(Active|Inactive|Training|Suspended)$")
    supervisor: Optional[str] = None
    training_completed: Optional[bool] = Field(None, alias="trainingCompleted")
    assigned_children: Optional[List[str]] = Field(None, alias="assignedChildren")


class UserUpdate(CamelModel):
    """Partial update. ``role`` is validated by the service after the admin check."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    avatar: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    parent_profile: Optional[ParentProfile] = Field(None, alias="parentProfile")
    volunteer_profile: Optional[VolunteerProfile] = Field(None, alias="volunteerProfile")


class UserResponse(CamelModel):
    """User as returned by the API; credential fields are never included"""
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_email_verified: bool = Field(False, alias="isEmailVerified")
    avatar: Optional[str] = None
    parent_profile: Optional[Dict[str, Any]] = Field(None, alias="parentProfile")
    volunteer_profile: Optional[Dict[str, Any]] = Field(None, alias="volunteerProfile")
    created_at: datetime = Field(alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class AdminCreate(CamelModel):
    """Input for the create_admin script"""
    email: EmailStr
    name: str = Field("Administrator", min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=6)
