from pydantic import Field
from typing import Optional, List, Literal
from datetime import datetime

from spacece.models.milestone import DevelopmentDomain, MilestoneStatus
from spacece.models.visit import VisitLocation
from spacece.schemas.common import CamelModel, UserSummary, ChildSummary, UTCDateTime


class ActivityConducted(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    domain: Optional[DevelopmentDomain] = None
    outcome: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)


class MilestoneAssessment(CamelModel):
    milestone_id: str = Field(..., alias="milestoneId")
    status: Optional[MilestoneStatus] = None
    notes: Optional[str] = None


class ChildObservations(CamelModel):
    mood: Optional[Literal["Happy", "Engaged", "Tired", "Unwell", "Distressed", "Other"]] = None
    participation: Optional[Literal["Enthusiastic", "Active", "Passive", "Reluctant", "Refusing"]] = None
    notes: Optional[str] = None


class ParentInteraction(CamelModel):
    present: bool = False
    participation: Optional[Literal["Active", "Observing", "Minimal", "None", "N/A"]] = None
    feedback: Optional[str] = None


class HomeEnvironment(CamelModel):
    appropriate_space: Optional[bool] = Field(None, alias="appropriateSpace")
    learning_materials: Optional[bool] = Field(None, alias="learningMaterials")
    notes: Optional[str] = None


class StatusUpdate(CamelModel):
    status: Literal["Scheduled", "Completed", "Cancelled", "Rescheduled"]
    reason: Optional[str] = None
    updated_by: Optional[str] = Field(None, alias="updatedBy")
    timestamp: Optional[UTCDateTime] = None


class VisitCreate(CamelModel):
    child_id: str = Field(..., alias="childId")
    volunteer_id: Optional[str] = Field(None, alias="volunteerId")
    visit_date: Optional[UTCDateTime] = Field(None, alias="visitDate")
    duration: int = Field(..., ge=0, description="Minutes")
    location: VisitLocation
    location_details: Optional[str] = Field(None, alias="locationDetails")
    activities_conducted: List[ActivityConducted] = Field(default_factory=list, alias="activitiesConducted")
    milestones_assessed: List[MilestoneAssessment] = Field(default_factory=list, alias="milestonesAssessed")
    child_observations: Optional[ChildObservations] = Field(None, alias="childObservations")
    parent_interaction: Optional[ParentInteraction] = Field(None, alias="parentInteraction")
    home_environment: Optional[HomeEnvironment] = Field(None, alias="homeEnvironment")
    follow_up_needed: bool = Field(False, alias="followUpNeeded")
    follow_up_reason: Optional[str] = Field(None, alias="followUpReason")
    follow_up_action: Optional[str] = Field(None, alias="followUpAction")
    notes: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    status_updates: List[StatusUpdate] = Field(default_factory=list, alias="statusUpdates")


class VisitUpdate(CamelModel):
    visit_date: Optional[UTCDateTime] = Field(None, alias="visitDate")
    duration: Optional[int] = Field(None, ge=0)
    location: Optional[VisitLocation] = None
    location_details: Optional[str] = Field(None, alias="locationDetails")
    activities_conducted: Optional[List[ActivityConducted]] = Field(None, alias="activitiesConducted")
    milestones_assessed: Optional[List[MilestoneAssessment]] = Field(None, alias="milestonesAssessed")
    child_observations: Optional[ChildObservations] = Field(None, alias="childObservations")
    parent_interaction: Optional[ParentInteraction] = Field(None, alias="parentInteraction")
    home_environment: Optional[HomeEnvironment] = Field(None, alias="homeEnvironment")
    follow_up_needed: Optional[bool] = Field(None, alias="followUpNeeded")
    follow_up_reason: Optional[str] = Field(None, alias="followUpReason")
    follow_up_action: Optional[str] = Field(None, alias="followUpAction")
    notes: Optional[str] = None
    photos: Optional[List[str]] = None
    status_updates: Optional[List[StatusUpdate]] = Field(None, alias="statusUpdates")


class VisitResponse(CamelModel):
    id: str
    child_id: str = Field(alias="childId")
    volunteer_id: str = Field(alias="volunteerId")
    child: Optional[ChildSummary] = None
    volunteer: Optional[UserSummary] = None
    visit_date: datetime = Field(alias="visitDate")
    duration: int
    location: VisitLocation
    location_details: Optional[str] = Field(None, alias="locationDetails")
    activities_conducted: List[ActivityConducted] = Field(default_factory=list, alias="activitiesConducted")
    milestones_assessed: List[MilestoneAssessment] = Field(default_factory=list, alias="milestonesAssessed")
    child_observations: Optional[ChildObservations] = Field(None, alias="childObservations")
    parent_interaction: Optional[ParentInteraction] = Field(None, alias="parentInteraction")
    home_environment: Optional[HomeEnvironment] = Field(None, alias="homeEnvironment")
    follow_up_needed: bool = Field(False, alias="followUpNeeded")
    follow_up_reason: Optional[str] = Field(None, alias="followUpReason")
    follow_up_action: Optional[str] = Field(None, alias="followUpAction")
    notes: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    status_updates: List[StatusUpdate] = Field(default_factory=list, alias="statusUpdates")
    is_deleted: bool = Field(False, alias="isDeleted")
    created_at: datetime = Field(alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
