"""
Role-based access table.

Every (resource, operation) pair an endpoint can perform is listed here with
the roles allowed to call it. Ownership rules (a parent only sees their own
children, a volunteer only their assigned ones) are enforced in the services
on top of this coarse check.
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from spacece.models.user import UserRole, PARENT_LIKE_ROLES


@dataclass(frozen=True)
class CallerIdentity:
    """The authenticated actor, resolved once per request"""
    id: str
    role: UserRole
    email: str = ""
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_volunteer(self) -> bool:
        return self.role == UserRole.VOLUNTEER

    @property
    def is_parent_like(self) -> bool:
        return self.role in PARENT_LIKE_ROLES


ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)
ADMIN_ONLY: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})
STAFF: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.VOLUNTEER})


PERMISSIONS: Dict[Tuple[str, str], FrozenSet[UserRole]] = {
    # Activities
    ("activities", "create"): ADMIN_ONLY,
    ("activities", "update"): ADMIN_ONLY,
    ("activities", "delete"): ADMIN_ONLY,
    ("activities", "list"): ALL_ROLES,
    ("activities", "read"): ALL_ROLES,
    ("activities", "list_by_age"): ALL_ROLES,

    # Children
    ("children", "create"): ALL_ROLES,
    ("children", "list"): ALL_ROLES,
    ("children", "read"): ALL_ROLES,
    ("children", "update"): ALL_ROLES,
    ("children", "delete"): ADMIN_ONLY,

    # Milestones
    ("milestones", "create"): ALL_ROLES,
    ("milestones", "read"): ALL_ROLES,
    ("milestones", "list_by_child"): ALL_ROLES,
    ("milestones", "update"): ALL_ROLES,
    ("milestones", "delete"): ADMIN_ONLY,

    # Visits
    ("visits", "create"): STAFF,
    ("visits", "update"): STAFF,
    ("visits", "read"): ALL_ROLES,
    ("visits", "list_by_child"): ALL_ROLES,
    ("visits", "list_by_volunteer"): STAFF,
    ("visits", "delete"): ADMIN_ONLY,

    # Users
    ("users", "list"): ADMIN_ONLY,
    ("users", "read"): ADMIN_ONLY,
    ("users", "delete"): ADMIN_ONLY,
    ("users", "update"): ALL_ROLES,

    # Reports
    ("reports", "child"): ALL_ROLES,
    ("reports", "summary"): ADMIN_ONLY,
    ("reports", "volunteer"): STAFF,
}


def allowed_roles(resource: str, operation: str) -> FrozenSet[UserRole]:
    """Roles allowed for an operation. Unknown pairs allow nobody."""
    return PERMISSIONS.get((resource, operation), frozenset())


def is_allowed(role: UserRole, resource: str, operation: str) -> bool:
    return role in allowed_roles(resource, operation)
