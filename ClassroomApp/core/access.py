"""Role & object access helpers."""

from typing import Any
from ClassroomApp.courses.models import Course, Enrollment
from ClassroomApp.learning.models import Assignment, Submission, AttendanceRecord, CourseFile


def course_from(obj: Any) -> Course | None:
    if obj is None:
        return None
    if isinstance(obj, Course):
        return obj
    if isinstance(obj, Submission):
        return obj.assignment.course
    if isinstance(obj, (Assignment, AttendanceRecord, CourseFile, Enrollment)):
        return obj.course
    return getattr(obj, "course", None)


def is_owner(user, course: Course | None) -> bool:
    return bool(user and course and course.teacher_id == user.id)


def is_enrolled(user, course: Course | None) -> bool:
    if not (user and course):
        return False
    return Enrollment.objects.filter(course=course, student=user).exists()


def is_member(user, course: Course | None) -> bool:
    """Owner or enrolled student."""
    return is_owner(user, course) or is_enrolled(user, course)


def is_submission_participant(user, obj: Any) -> bool:
    """User authored the submission or owns its course."""
    course = course_from(obj)
    if not course:
        return False
    if isinstance(obj, Submission) and obj.student_id == user.id:
        return True
    return is_owner(user, course)
