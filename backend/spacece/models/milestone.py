from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, Index
from datetime import datetime
import enum

from spacece.core.database import Base
from spacece.core.types import GUID, generate_uuid, value_enum


class DevelopmentDomain(str, enum.Enum):
    """Category of child development"""
    MOTOR = "Motor"
    COGNITIVE = "Cognitive"
    LANGUAGE = "Language"
    SOCIAL = "Social"
    EMOTIONAL = "Emotional"
    OTHER = "Other"


class MilestoneStatus(str, enum.Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    ACHIEVED = "Achieved"
    CONCERN = "Concern"


class Milestone(Base):
    """One developmental checkpoint for a child"""
    __tablename__ = "milestones"

    __table_args__ = (
        Index('ix_milestones_child_domain_status', 'child_id', 'domain', 'status'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    child_id = Column(GUID, nullable=False)
    domain = Column(value_enum(DevelopmentDomain), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    expected_age_range = Column(JSON, nullable=True)  # {"min": months, "max": months}
    status = Column(value_enum(MilestoneStatus), default=MilestoneStatus.NOT_STARTED, nullable=False)
    achieved_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    media_url = Column(JSON, default=list)
    assessed_by = Column(GUID, nullable=False)
    # [{"title", "description", "completed", "completedDate"}]
    activities = Column(JSON, default=list)
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Milestone {self.domain} {self.title}>"
