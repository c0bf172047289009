from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, JSON, Index
from datetime import datetime
import enum

from spacece.core.database import Base
from spacece.core.types import GUID, generate_uuid, value_enum
from spacece.models.milestone import DevelopmentDomain


class DifficultyLevel(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Activity(Base):
    """A reusable suggested exercise"""
    __tablename__ = "activities"

    __table_args__ = (
        Index('ix_activities_domain_age_language', 'domain', 'age_min', 'age_max', 'language'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    domain = Column(value_enum(DevelopmentDomain), nullable=False)

    # Age range in months, exposed on the wire as ageRange {min, max}
    age_min = Column(Integer, nullable=False)
    age_max = Column(Integer, nullable=False)

    materials = Column(JSON, default=list)
    steps = Column(JSON, default=list)
    duration = Column(Integer, default=15)  # minutes
    difficulty_level = Column(value_enum(DifficultyLevel, length=10), default=DifficultyLevel.MEDIUM)
    language = Column(String(50), default="English")
    tags = Column(JSON, default=list)
    benefits_description = Column(Text, nullable=True)
    media_url = Column(JSON, default=list)

    created_by = Column(GUID, nullable=False)
    is_approved = Column(Boolean, default=True, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def age_range(self) -> dict:
        return {"min": self.age_min, "max": self.age_max}

    def __repr__(self):
        return f"<Activity {self.title}>"
