"""Role dispatch at the session boundary.

A request is resolved once into either a StudentSession or a TeacherSession;
downstream code branches on the session type instead of re-reading the role.
"""

import logging
from dataclasses import dataclass

from ClassroomApp.core.choices import UserRole
from ClassroomApp.core.exceptions import ProfileMissing
from ClassroomApp.users.models import Profile, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentSession:
    user: User
    profile: Profile

    role = UserRole.STUDENT


@dataclass(frozen=True)
class TeacherSession:
    user: User
    profile: Profile

    role = UserRole.TEACHER


Session = StudentSession | TeacherSession


def resolve_session(user: User) -> Session:
    """Return the role-tagged session for an authenticated user.

    Raises:
        ProfileMissing: the account exists but has no profile row.
    """
    try:
        profile = Profile.objects.get(user=user)
    except Profile.DoesNotExist:
        logger.info("User %s has no profile; refusing session", user.pk)
        raise ProfileMissing()
    if profile.role == UserRole.TEACHER:
        return TeacherSession(user=user, profile=profile)
    return StudentSession(user=user, profile=profile)
