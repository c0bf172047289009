from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, JSON, Index
from datetime import datetime
import enum

from spacece.core.database import Base
from spacece.core.types import GUID, generate_uuid, value_enum


class VisitLocation(str, enum.Enum):
    HOME = "Home"
    CENTER = "Center"
    SCHOOL = "School"
    OTHER = "Other"


class Visit(Base):
    """A home or centre visit recorded by a volunteer"""
    __tablename__ = "visits"

    __table_args__ = (
        Index('ix_visits_child_id', 'child_id'),
        Index('ix_visits_volunteer_id', 'volunteer_id'),
        Index('ix_visits_visit_date', 'visit_date'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    volunteer_id = Column(GUID, nullable=False)
    child_id = Column(GUID, nullable=False)
    visit_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    location = Column(value_enum(VisitLocation, length=10), nullable=False)
    location_details = Column(String(500), nullable=True)

    # [{"title", "description", "domain", "outcome", "duration"}]
    activities_conducted = Column(JSON, default=list)
    # [{"milestoneId", "status", "notes"}]
    milestones_assessed = Column(JSON, default=list)
    child_observations = Column(JSON, nullable=True)  # {"mood", "participation", "notes"}
    parent_interaction = Column(JSON, nullable=True)  # {"present", "participation", "feedback"}
    home_environment = Column(JSON, nullable=True)  # {"appropriateSpace", "learningMaterials", "notes"}

    follow_up_needed = Column(Boolean, default=False)
    follow_up_reason = Column(Text, nullable=True)
    follow_up_action = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    photos = Column(JSON, default=list)
    # [{"status", "reason", "updatedBy", "timestamp"}]
    status_updates = Column(JSON, default=list)
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def assessed_milestone_ids(self) -> list:
        return [
            entry.get("milestoneId")
            for entry in (self.milestones_assessed or [])
            if entry.get("milestoneId")
        ]

    def __repr__(self):
        return f"<Visit {self.child_id} {self.visit_date}>"
