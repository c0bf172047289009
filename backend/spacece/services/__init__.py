# Business services
from spacece.services.user_service import user_service
from spacece.services.child_service import child_service
from spacece.services.milestone_service import milestone_service
from spacece.services.visit_service import visit_service
from spacece.services.activity_service import activity_service
from spacece.services.report_service import report_service

__all__ = [
    "user_service",
    "child_service",
    "milestone_service",
    "visit_service",
    "activity_service",
    "report_service",
]
