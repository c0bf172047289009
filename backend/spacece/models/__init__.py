# Re-export all models for convenient imports
from spacece.models.user import User, UserRole, PARENT_LIKE_ROLES
from spacece.models.child import Child, Gender, EducationLevel
from spacece.models.milestone import Milestone, DevelopmentDomain, MilestoneStatus
from spacece.models.visit import Visit, VisitLocation
from spacece.models.activity import Activity, DifficultyLevel

__all__ = [
    # User
    "User",
    "UserRole",
    "PARENT_LIKE_ROLES",
    # Child
    "Child",
    "Gender",
    "EducationLevel",
    # Milestone
    "Milestone",
    "DevelopmentDomain",
    "MilestoneStatus",
    # Visit
    "Visit",
    "VisitLocation",
    # Activity
    "Activity",
    "DifficultyLevel",
]
