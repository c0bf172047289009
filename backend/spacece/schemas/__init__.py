# Pydantic schemas
from spacece.schemas.common import (
    CamelModel,
    UserSummary,
    ChildSummary,
    Address,
    dump,
    success_response,
)
from spacece.schemas.user import UserUpdate, UserResponse, AdminCreate
from spacece.schemas.child import ChildCreate, ChildUpdate, ChildResponse
from spacece.schemas.milestone import (
    AgeRange,
    MilestoneCreate,
    MilestoneUpdate,
    MilestoneResponse,
    PARENT_EDITABLE_FIELDS,
    ParentMilestoneUpdate,
)
from spacece.schemas.visit import VisitCreate, VisitUpdate, VisitResponse
from spacece.schemas.activity import ActivityCreate, ActivityUpdate, ActivityResponse
