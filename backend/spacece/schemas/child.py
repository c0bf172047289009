from pydantic import Field
from typing import Optional, List
from datetime import date, datetime

from spacece.models.child import Gender, EducationLevel
from spacece.schemas.common import CamelModel, Address, UserSummary, UTCDateTime


class HealthInfo(CamelModel):
    blood_group: Optional[str] = Field(None, alias="bloodGroup")
    allergies: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)


class EmergencyContact(CamelModel):
    name: Optional[str] = None
    relationship: Optional[str] = None
    phone: Optional[str] = None


class ChildNote(CamelModel):
    content: str
    created_by: Optional[str] = Field(None, alias="createdBy")
    created_at: Optional[UTCDateTime] = Field(None, alias="createdAt")


class ChildCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    dob: date
    gender: Gender
    parent_id: Optional[str] = Field(None, alias="parentId")
    volunteer_id: Optional[str] = Field(None, alias="volunteerId")
    address: Optional[Address] = None
    health_info: Optional[HealthInfo] = Field(None, alias="healthInfo")
    education_level: Optional[EducationLevel] = Field(None, alias="educationLevel")
    preferred_language: str = Field("English", alias="preferredLanguage")
    special_needs: List[str] = Field(default_factory=list, alias="specialNeeds")
    emergency_contact: Optional[EmergencyContact] = Field(None, alias="emergencyContact")
    is_active: bool = Field(True, alias="isActive")
    notes: List[ChildNote] = Field(default_factory=list)


class ChildUpdate(CamelModel):
    """Partial update; only submitted fields change"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    dob: Optional[date] = None
    gender: Optional[Gender] = None
    volunteer_id: Optional[str] = Field(None, alias="volunteerId")
    address: Optional[Address] = None
    health_info: Optional[HealthInfo] = Field(None, alias="healthInfo")
    education_level: Optional[EducationLevel] = Field(None, alias="educationLevel")
    preferred_language: Optional[str] = Field(None, alias="preferredLanguage")
    special_needs: Optional[List[str]] = Field(None, alias="specialNeeds")
    emergency_contact: Optional[EmergencyContact] = Field(None, alias="emergencyContact")
    is_active: Optional[bool] = Field(None, alias="isActive")
    notes: Optional[List[ChildNote]] = None


class ChildResponse(CamelModel):
    id: str
    name: str
    dob: date
    age: Optional[int] = None
    gender: Gender
    parent_id: str = Field(alias="parentId")
    volunteer_id: Optional[str] = Field(None, alias="volunteerId")
    parent: Optional[UserSummary] = None
    volunteer: Optional[UserSummary] = None
    address: Optional[Address] = None
    health_info: Optional[HealthInfo] = Field(None, alias="healthInfo")
    education_level: Optional[EducationLevel] = Field(None, alias="educationLevel")
    preferred_language: Optional[str] = Field(None, alias="preferredLanguage")
    special_needs: List[str] = Field(default_factory=list, alias="specialNeeds")
    emergency_contact: Optional[EmergencyContact] = Field(None, alias="emergencyContact")
    notes: List[ChildNote] = Field(default_factory=list)
    registration_date: Optional[datetime] = Field(None, alias="registrationDate")
    last_visit_date: Optional[datetime] = Field(None, alias="lastVisitDate")
    is_active: bool = Field(True, alias="isActive")
    is_deleted: bool = Field(False, alias="isDeleted")
    created_at: datetime = Field(alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
