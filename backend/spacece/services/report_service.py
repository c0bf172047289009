"""
Report Service - read-only aggregates over children, milestones and visits

Handles:
- Per-child progress report, including age-appropriate progress against a
  fixed expectation table
- Organisation-wide summary for the admin dashboard
- Per-volunteer activity report
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from spacece.core.exceptions import ForbiddenError, NotFoundError
from spacece.core.permissions import CallerIdentity
from spacece.models.child import Child, age_in_months
from spacece.models.milestone import Milestone, MilestoneStatus, DevelopmentDomain
from spacece.models.user import User, UserRole
from spacece.models.visit import Visit
from spacece.schemas.common import dump
from spacece.services.base import check_child_access, get_child_or_404, round_half_up
from spacece.services.child_service import serialize_children
from spacece.services.milestone_service import serialize_milestones
from spacece.services.visit_service import serialize_visits

RECENT_LIMIT = 10
HISTOGRAM_MONTHS = 6

# Domains scored against the expectation table ("Other" is not)
SCORED_DOMAINS = [
    DevelopmentDomain.MOTOR,
    DevelopmentDomain.COGNITIVE,
    DevelopmentDomain.LANGUAGE,
    DevelopmentDomain.SOCIAL,
    DevelopmentDomain.EMOTIONAL,
]

# Achieved milestones expected per domain at each developmental stage
EXPECTED_MILESTONES: Dict[str, Dict[str, int]] = {
    "infant": {"Motor": 5, "Cognitive": 4, "Language": 3, "Social": 3, "Emotional": 2, "Total": 17},
    "toddler": {"Motor": 6, "Cognitive": 5, "Language": 6, "Social": 4, "Emotional": 4, "Total": 25},
    "preschool": {"Motor": 5, "Cognitive": 6, "Language": 7, "Social": 5, "Emotional": 5, "Total": 28},
    "school": {"Motor": 4, "Cognitive": 8, "Language": 8, "Social": 6, "Emotional": 6, "Total": 32},
}

_STATUS_KEYS = {
    MilestoneStatus.ACHIEVED: "achieved",
    MilestoneStatus.IN_PROGRESS: "inProgress",
    MilestoneStatus.NOT_STARTED: "notStarted",
    MilestoneStatus.CONCERN: "concern",
}


# ==================== Pure aggregation ====================

def percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole > 0 else 0


def status_counts(milestones: Sequence[Milestone]) -> Dict[str, int]:
    counts = {"total": len(milestones)}
    for status, key in _STATUS_KEYS.items():
        counts[key] = sum(1 for m in milestones if m.status == status)
    return counts


def milestone_stats(milestones: Sequence[Milestone], detailed_domains: bool = True) -> Dict[str, Any]:
    """
    Totals by status plus a per-domain breakdown over all six domains.

    With ``detailed_domains`` off each domain only carries total, achieved
    and progressPercent (the summary report's shape).
    """
    stats: Dict[str, Any] = status_counts(milestones)
    by_domain: Dict[str, Dict[str, int]] = {}
    for domain in DevelopmentDomain:
        in_domain = [m for m in milestones if m.domain == domain]
        counts = status_counts(in_domain)
        if not detailed_domains:
            counts = {"total": counts["total"], "achieved": counts["achieved"]}
        counts["progressPercent"] = percent(counts["achieved"], counts["total"])
        by_domain[domain.value] = counts
    stats["byDomain"] = by_domain
    return stats


def developmental_stage(months: int) -> str:
    if months <= 12:
        return "infant"
    if months <= 36:
        return "toddler"
    if months <= 60:
        return "preschool"
    return "school"


def age_appropriate_progress(
    dob: date,
    milestones: Sequence[Milestone],
    today: Optional[date] = None
) -> Dict[str, Any]:
    """Achieved milestones per domain against the stage's expectations, capped at 100%"""
    months = age_in_months(dob, today)
    stage = developmental_stage(months)
    expected = EXPECTED_MILESTONES[stage]

    progress: Dict[str, Dict[str, int]] = {}
    total_achieved = 0
    for domain in SCORED_DOMAINS:
        achieved = sum(
            1 for m in milestones
            if m.domain == domain and m.status == MilestoneStatus.ACHIEVED
        )
        progress[domain.value] = {
            "achieved": achieved,
            "expected": expected[domain.value],
            "percentage": min(100, percent(achieved, expected[domain.value])),
        }
        total_achieved += achieved

    progress["Overall"] = {
        "achieved": total_achieved,
        "expected": expected["Total"],
        "percentage": min(100, percent(total_achieved, expected["Total"])),
    }

    return {
        "ageInMonths": months,
        "developmentalStage": stage,
        "progress": progress,
    }


def visits_by_month(visits: Sequence[Visit], today: Optional[date] = None) -> Dict[str, int]:
    """Visit counts for the last six calendar months, current month first"""
    today = today or date.today()
    histogram: Dict[str, int] = {}
    for offset in range(HISTOGRAM_MONTHS):
        year, month = divmod(today.year * 12 + (today.month - 1) - offset, 12)
        month += 1
        name = date(year, month, 1).strftime("%B")
        histogram[name] = sum(
            1 for v in visits
            if v.visit_date.year == year and v.visit_date.month == month
        )
    return histogram


def ratio(numerator: int, denominator: int) -> float:
    return round(numerator / denominator, 2) if denominator > 0 else 0


# ==================== Reports ====================

class ReportService:
    """Service for derived reports"""

    async def _count(self, db: AsyncSession, query) -> int:
        result = await db.execute(query)
        return result.scalar_one()

    async def child_report(self, db: AsyncSession, child_id: str, caller: CallerIdentity) -> Dict[str, Any]:
        child = await get_child_or_404(db, child_id)
        check_child_access(child, caller, "Not authorized to view this child's report")

        result = await db.execute(
            select(Milestone)
            .where(Milestone.child_id == child_id, Milestone.is_deleted.is_(False))
            .order_by(Milestone.created_at.desc())
        )
        milestones = list(result.scalars().all())

        visit_filter = (Visit.child_id == child_id, Visit.is_deleted.is_(False))
        result = await db.execute(
            select(Visit).where(*visit_filter).order_by(Visit.visit_date.desc()).limit(RECENT_LIMIT)
        )
        recent_visits = list(result.scalars().all())
        visit_count = await self._count(db, select(func.count(Visit.id)).where(*visit_filter))

        child_data = (await serialize_children(db, [child]))[0]
        return {
            "child": dump(child_data),
            "milestoneStats": milestone_stats(milestones),
            "recentMilestones": [dump(m) for m in await serialize_milestones(db, milestones[:RECENT_LIMIT])],
            "recentVisits": [dump(v) for v in await serialize_visits(db, recent_visits)],
            "visitCount": visit_count,
            "ageAppropriateProgress": age_appropriate_progress(child.dob, milestones),
        }

    async def summary_report(self, db: AsyncSession) -> Dict[str, Any]:
        child_count = await self._count(
            db, select(func.count(Child.id)).where(Child.is_deleted.is_(False))
        )
        volunteer_count = await self._count(
            db, select(func.count(User.id)).where(User.role == UserRole.VOLUNTEER)
        )
        parent_count = await self._count(
            db, select(func.count(User.id)).where(User.role == UserRole.PARENT)
        )
        visit_count = await self._count(
            db, select(func.count(Visit.id)).where(Visit.is_deleted.is_(False))
        )

        result = await db.execute(select(Milestone).where(Milestone.is_deleted.is_(False)))
        milestones = list(result.scalars().all())

        result = await db.execute(
            select(Visit)
            .where(Visit.is_deleted.is_(False))
            .order_by(Visit.visit_date.desc(), Visit.created_at.desc())
            .limit(RECENT_LIMIT)
        )
        recent_visits = list(result.scalars().all())

        return {
            "counts": {
                "children": child_count,
                "volunteers": volunteer_count,
                "parents": parent_count,
                "visits": visit_count,
                "milestones": len(milestones),
            },
            "milestoneStats": milestone_stats(milestones, detailed_domains=False),
            "recentVisits": [dump(v) for v in await serialize_visits(db, recent_visits)],
            "visitsPerChild": ratio(visit_count, child_count),
            "childrenPerVolunteer": ratio(child_count, volunteer_count),
        }

    async def volunteer_report(
        self,
        db: AsyncSession,
        volunteer_id: str,
        caller: CallerIdentity
    ) -> Dict[str, Any]:
        if caller.is_volunteer and caller.id != volunteer_id:
            raise ForbiddenError("Volunteers can only access their own reports")

        result = await db.execute(select(User).where(User.id == volunteer_id))
        volunteer = result.scalar_one_or_none()
        if not volunteer or not volunteer.can_volunteer:
            raise NotFoundError("Volunteer not found", code="VOLUNTEER_NOT_FOUND")

        result = await db.execute(
            select(Child)
            .where(Child.volunteer_id == volunteer_id, Child.is_deleted.is_(False))
            .order_by(Child.created_at.desc())
        )
        assigned_children = list(result.scalars().all())

        result = await db.execute(
            select(Visit)
            .where(Visit.volunteer_id == volunteer_id, Visit.is_deleted.is_(False))
            .order_by(Visit.visit_date.desc())
        )
        visits = list(result.scalars().all())

        milestone_ids = {mid for v in visits for mid in v.assessed_milestone_ids}
        assessed: List[Milestone] = []
        if milestone_ids:
            result = await db.execute(
                select(Milestone).where(Milestone.id.in_(milestone_ids), Milestone.is_deleted.is_(False))
            )
            assessed = list(result.scalars().all())

        return {
            "volunteer": {
                **(volunteer.volunteer_profile or {}),
                "id": volunteer.id,
                "name": volunteer.name,
                "email": volunteer.email,
            },
            "stats": {
                "assignedChildren": len(assigned_children),
                "totalVisits": len(visits),
                "totalHours": sum((v.duration or 0) for v in visits) / 60,
                "visitsByMonth": visits_by_month(visits),
                "milestonesAssessed": len(assessed),
                "milestonesAchieved": sum(1 for m in assessed if m.status == MilestoneStatus.ACHIEVED),
            },
            "assignedChildren": [dump(c) for c in await serialize_children(db, assigned_children)],
            "recentVisits": [dump(v) for v in await serialize_visits(db, visits[:RECENT_LIMIT])],
        }


# Singleton instance
report_service = ReportService()


__all__ = [
    "report_service",
    "milestone_stats",
    "age_appropriate_progress",
    "developmental_stage",
    "visits_by_month",
    "EXPECTED_MILESTONES",
]
