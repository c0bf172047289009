from pydantic import ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime

from spacece.models.milestone import DevelopmentDomain, MilestoneStatus
from spacece.schemas.common import CamelModel, UserSummary, UTCDateTime


class AgeRange(CamelModel):
    """Age window in months"""
    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_order(self):
        if self.min > self.max:
            raise ValueError("ageRange.min must not exceed ageRange.max")
        return self


class MilestoneActivity(CamelModel):
    title: str
    description: Optional[str] = None
    completed: bool = False
    completed_date: Optional[UTCDateTime] = Field(None, alias="completedDate")


class MilestoneCreate(CamelModel):
    child_id: str = Field(..., alias="childId")
    domain: DevelopmentDomain
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    expected_age_range: Optional[AgeRange] = Field(None, alias="expectedAgeRange")
    status: MilestoneStatus = MilestoneStatus.NOT_STARTED
    achieved_date: Optional[UTCDateTime] = Field(None, alias="achievedDate")
    notes: Optional[str] = None
    media_url: List[str] = Field(default_factory=list, alias="mediaURL")
    assessed_by: Optional[str] = Field(None, alias="assessedBy")
    activities: List[MilestoneActivity] = Field(default_factory=list)

    @model_validator(mode="after")
    def achieved_needs_date(self):
        if self.status == MilestoneStatus.ACHIEVED and self.achieved_date is None:
            raise ValueError("achievedDate is required when status is Achieved")
        return self


class MilestoneUpdate(CamelModel):
    """
    Partial update. The Achieved/achievedDate rule is checked by the service
    against the merged record, since either half may already be stored.
    """
    domain: Optional[DevelopmentDomain] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    expected_age_range: Optional[AgeRange] = Field(None, alias="expectedAgeRange")
    status: Optional[MilestoneStatus] = None
    achieved_date: Optional[UTCDateTime] = Field(None, alias="achievedDate")
    notes: Optional[str] = None
    media_url: Optional[List[str]] = Field(None, alias="mediaURL")
    assessed_by: Optional[str] = Field(None, alias="assessedBy")
    activities: Optional[List[MilestoneActivity]] = None


class MilestoneResponse(CamelModel):
    id: str
    child_id: str = Field(alias="childId")
    domain: DevelopmentDomain
    title: str
    description: Optional[str] = None
    expected_age_range: Optional[AgeRange] = Field(None, alias="expectedAgeRange")
    status: MilestoneStatus
    achieved_date: Optional[datetime] = Field(None, alias="achievedDate")
    notes: Optional[str] = None
    media_url: List[str] = Field(default_factory=list, alias="mediaURL")
    assessed_by: str = Field(alias="assessedBy")
    assessor: Optional[UserSummary] = None
    activities: List[MilestoneActivity] = Field(default_factory=list)
    is_deleted: bool = Field(False, alias="isDeleted")
    created_at: datetime = Field(alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class ParentMilestoneUpdate(CamelModel):
    """
    What a parent-like caller may submit. Anything else in the body, valid or
    not, is ignored rather than rejected.
    """
    model_config = ConfigDict(populate_by_name=True, from_attributes=True, extra="ignore")

    notes: Optional[str] = None
    media_url: Optional[List[str]] = Field(None, alias="mediaURL")
    activities: Optional[List[MilestoneActivity]] = None


# Fields a parent-like caller may change on a milestone
PARENT_EDITABLE_FIELDS = frozenset(ParentMilestoneUpdate.model_fields)
