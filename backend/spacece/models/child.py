from sqlalchemy import Column, String, Boolean, DateTime, Date, JSON, Index
from datetime import datetime, date
from typing import Optional
import enum

from spacece.core.database import Base
from spacece.core.types import GUID, generate_uuid, value_enum


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class EducationLevel(str, enum.Enum):
    NONE = "None"
    PRESCHOOL = "Preschool"
    ELEMENTARY = "Elementary"
    SPECIAL_EDUCATION = "Special Education"
    OTHER = "Other"


def age_in_years(dob: date, today: Optional[date] = None) -> int:
    """Whole years, one less if this year's birthday hasn't happened yet"""
    today = today or date.today()
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def age_in_months(dob: date, today: Optional[date] = None) -> int:
    """Calendar-month difference, ignoring the day of month"""
    today = today or date.today()
    return (today.year - dob.year) * 12 + (today.month - dob.month)


class Child(Base):
    """A child tracked by the programme"""
    __tablename__ = "children"

    __table_args__ = (
        Index('ix_children_parent_id', 'parent_id'),
        Index('ix_children_volunteer_id', 'volunteer_id'),
        Index('ix_children_is_deleted', 'is_deleted'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    dob = Column(Date, nullable=False)
    gender = Column(value_enum(Gender, length=10), nullable=False)

    # Plain id references (no FK): deleting a user does not touch children
    parent_id = Column(GUID, nullable=False)
    volunteer_id = Column(GUID, nullable=True)

    address = Column(JSON, nullable=True)  # {"street", "city", "state", "zipCode", "country"}
    health_info = Column(JSON, nullable=True)  # {"bloodGroup", "allergies", "conditions", "medications"}
    education_level = Column(value_enum(EducationLevel), nullable=True)
    preferred_language = Column(String(50), default="English")
    special_needs = Column(JSON, default=list)
    emergency_contact = Column(JSON, nullable=True)  # {"name", "relationship", "phone"}
    notes = Column(JSON, default=list)  # [{"content", "createdBy", "createdAt"}]

    registration_date = Column(DateTime, default=datetime.utcnow)
    last_visit_date = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def age(self) -> Optional[int]:
        if not self.dob:
            return None
        return age_in_years(self.dob)

    def __repr__(self):
        return f"<Child {self.name}>"
