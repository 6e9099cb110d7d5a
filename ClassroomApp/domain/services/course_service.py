"""Domain service functions for course lifecycle and enrollment.

These helpers encapsulate business rules (only teachers create courses, only
the owner edits or deletes one, only students enroll) and keep view and
serializer layers thin. The id projections `list_enrolled_course_ids` and
`list_owned_course_ids` scope every other query in the application.
"""
import logging
from typing import Any

from django.db import IntegrityError, transaction
from rest_framework.exceptions import PermissionDenied

from ClassroomApp.courses.models import Course, Enrollment
from ClassroomApp.core.choices import UserRole
from ClassroomApp.core.exceptions import AlreadyEnrolled
from ClassroomApp.users.models import Profile, User

logger = logging.getLogger(__name__)


def _has_role(user: User, role: str) -> bool:
    return Profile.objects.filter(user=user, role=role).exists()

def _ensure_owner(user: User, course: Course) -> None:
    """Raise PermissionDenied if user does not own the course."""
    if course.teacher_id != user.id:
        raise PermissionDenied("Only the course teacher can do this")

@transaction.atomic
def create_course(teacher: User, data: dict[str, Any]) -> Course:
    """Create a course owned by `teacher`.

    Args:
        teacher: User creating (and owning) the course; must have a teacher profile.
        data: Validated payload (title, description, duration).

    Returns:
        The newly created Course instance.
    """
    if not _has_role(teacher, UserRole.TEACHER):
        raise PermissionDenied("Teacher role required")
    course = Course.objects.create(teacher=teacher, **data)
    logger.info("Course %s created by teacher %s", course.pk, teacher.pk)
    return course

@transaction.atomic
def update_course(teacher: User, course: Course, data: dict[str, Any]) -> Course:
    _ensure_owner(teacher, course)
    for field, value in data.items():
        setattr(course, field, value)
    course.save()
    return course

@transaction.atomic
def delete_course(teacher: User, course: Course) -> None:
    """Delete a course and everything hanging off it (owner only)."""
    _ensure_owner(teacher, course)
    course_id = course.pk
    course.delete()
    logger.info("Course %s deleted by teacher %s", course_id, teacher.pk)

@transaction.atomic
def enroll(course: Course, student: User) -> Enrollment:
    """Enroll a student in a course.

    Raises:
        PermissionDenied: caller is not a student.
        AlreadyEnrolled: the (course, student) pair already exists.
    """
    if not _has_role(student, UserRole.STUDENT):
        raise PermissionDenied("Student role required")
    if Enrollment.objects.filter(course=course, student=student).exists():
        raise AlreadyEnrolled()
    try:
        with transaction.atomic():
            enrollment = Enrollment.objects.create(course=course, student=student)
    except IntegrityError:
        raise AlreadyEnrolled()
    logger.info("Student %s enrolled in course %s", student.pk, course.pk)
    return enrollment

@transaction.atomic
def unenroll(course: Course, student: User) -> None:
    """Remove the enrollment if present; a no-op otherwise."""
    deleted, _ = Enrollment.objects.filter(course=course, student=student).delete()
    if deleted:
        logger.info("Student %s unenrolled from course %s", student.pk, course.pk)

def list_enrolled_course_ids(student: User) -> list[int]:
    return list(
        Enrollment.objects.for_student(student).order_by("course_id").values_list("course_id", flat=True)
    )

def list_owned_course_ids(teacher: User) -> list[int]:
    return list(Course.objects.for_teacher(teacher).order_by("id").values_list("id", flat=True))

def roster(course: Course):
    """Students currently enrolled in the course, in enrollment order."""
    return (
        User.objects.filter(enrollments__course=course)
        .select_related("profile")
        .order_by("enrollments__enrolled_at", "id")
    )
