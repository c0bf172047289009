from fastapi import APIRouter
from spacece.api.endpoints import users, children, milestones, visits, activities, reports

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(children.router, prefix="/children", tags=["Children"])
api_router.include_router(milestones.router, prefix="/milestones", tags=["Milestones"])
api_router.include_router(visits.router, prefix="/visits", tags=["Visits"])
api_router.include_router(activities.router, prefix="/activities", tags=["Activities"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
