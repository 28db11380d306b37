"""Role defaults and the single capability check used by every route.

Each role carries a fixed set of ``(resource, action)`` capabilities. Admins
can do everything; anything outside a role's defaults can still be granted
per role through a ``Permission`` row named ``"<resource>:<action>"``.
"""
import enum
from typing import Optional

from .models import User


class RoleName(str, enum.Enum):
    admin = "Admin"
    teacher = "Teacher"
    student = "Student"
    parent = "Parent"


class Resource(str, enum.Enum):
    submissions = "submissions"
    rubrics = "rubrics"
    courses = "courses"
    progress = "progress"
    grades = "grades"
    quizzes = "quizzes"
    expenses = "expenses"
    users = "users"


class Action(str, enum.Enum):
    read = "read"
    update = "update"
    grade = "grade"
    manage = "manage"
    take = "take"


Capability = tuple[Resource, Action]

ROLE_CAPABILITIES: dict[RoleName, frozenset[Capability]] = {
    RoleName.admin: frozenset(),
    RoleName.teacher: frozenset({
        (Resource.submissions, Action.grade),
        (Resource.rubrics, Action.read),
        (Resource.rubrics, Action.manage),
        (Resource.courses, Action.read),
        (Resource.progress, Action.read),
    }),
    RoleName.student: frozenset({
        (Resource.courses, Action.read),
        (Resource.progress, Action.read),
        (Resource.progress, Action.update),
        (Resource.quizzes, Action.take),
        (Resource.grades, Action.read),
    }),
    RoleName.parent: frozenset({
        (Resource.courses, Action.read),
        (Resource.grades, Action.read),
    }),
}


def permission_name(resource: Resource, action: Action) -> str:
    return f"{resource.value}:{action.value}"


def role_of(user: User) -> Optional[RoleName]:
    try:
        return RoleName(user.role_name)
    except ValueError:
        return None


def can(user: Optional[User], resource: Resource, action: Action) -> bool:
    """Return True if ``user`` may perform ``action`` on ``resource``."""
    if user is None or not user.is_active:
        return False

    role = role_of(user)
    if role is RoleName.admin:
        return True
    if role is not None and (resource, action) in ROLE_CAPABILITIES[role]:
        return True

    # Fall back to explicit grants attached to the user's role
    if user.role is None:
        return False
    wanted = permission_name(resource, action)
    return any(p.name == wanted for p in user.role.permissions)
