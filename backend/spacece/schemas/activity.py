from pydantic import Field
from typing import Optional, List
from datetime import datetime

from spacece.models.activity import DifficultyLevel
from spacece.models.milestone import DevelopmentDomain
from spacece.schemas.common import CamelModel
from spacece.schemas.milestone import AgeRange


class ActivityCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    domain: DevelopmentDomain
    age_range: AgeRange = Field(..., alias="ageRange")
    materials: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    duration: int = Field(15, ge=0, description="Minutes")
    difficulty_level: DifficultyLevel = Field(DifficultyLevel.MEDIUM, alias="difficultyLevel")
    language: str = "English"
    tags: List[str] = Field(default_factory=list)
    benefits_description: Optional[str] = Field(None, alias="benefitsDescription")
    media_url: List[str] = Field(default_factory=list, alias="mediaURL")
    is_approved: bool = Field(True, alias="isApproved")


class ActivityUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    domain: Optional[DevelopmentDomain] = None
    age_range: Optional[AgeRange] = Field(None, alias="ageRange")
    materials: Optional[List[str]] = None
    steps: Optional[List[str]] = None
    duration: Optional[int] = Field(None, ge=0)
    difficulty_level: Optional[DifficultyLevel] = Field(None, alias="difficultyLevel")
    language: Optional[str] = None
    tags: Optional[List[str]] = None
    benefits_description: Optional[str] = Field(None, alias="benefitsDescription")
    media_url: Optional[List[str]] = Field(None, alias="mediaURL")
    is_approved: Optional[bool] = Field(None, alias="isApproved")


class ActivityResponse(CamelModel):
    id: str
    title: str
    description: str
    domain: DevelopmentDomain
    age_range: AgeRange = Field(alias="ageRange")
    materials: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    duration: int = 15
    difficulty_level: DifficultyLevel = Field(DifficultyLevel.MEDIUM, alias="difficultyLevel")
    language: str = "English"
    tags: List[str] = Field(default_factory=list)
    benefits_description: Optional[str] = Field(None, alias="benefitsDescription")
    media_url: List[str] = Field(default_factory=list, alias="mediaURL")
    created_by: str = Field(alias="createdBy")
    is_approved: bool = Field(True, alias="isApproved")
    is_deleted: bool = Field(False, alias="isDeleted")
    created_at: datetime = Field(alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
