from rest_framework.permissions import BasePermission, SAFE_METHODS
from django.shortcuts import get_object_or_404

from ClassroomApp.courses.models import Course
from ClassroomApp.core.access import course_from, is_owner, is_member, is_submission_participant
from ClassroomApp.core.choices import UserRole


def _role_of(user) -> str | None:
    profile = getattr(user, "profile", None) if user and user.is_authenticated else None
    return profile.role if profile else None


class IsTeacher(BasePermission):
    """Caller's profile role is teacher."""
    message = "Teacher role required"

    def has_permission(self, request, view):
        return _role_of(request.user) == UserRole.TEACHER


class IsStudent(BasePermission):
    message = "Student role required"

    def has_permission(self, request, view):
        return _role_of(request.user) == UserRole.STUDENT


class IsCourseOwner(BasePermission):
    def has_object_permission(self, request, view, obj):
        return is_owner(request.user, course_from(obj))


class IsCourseMember(BasePermission):
    """
    Grants access to the owning teacher and enrolled students of the course
    resolved from the nested route (`course_pk`).
    Writes are reserved to the owner unless the view opts out by setting
    `member_writes = True`.
    """
    def _course_from_view(self, view):
        if hasattr(view, "_resolved_course"):
            return view._resolved_course
        course = None
        if "course_pk" in view.kwargs:
            course = get_object_or_404(Course, pk=view.kwargs["course_pk"])
        if course:
            view._resolved_course = course
        return course

    def has_permission(self, request, view):
        course = self._course_from_view(view)
        if course is None:
            return True
        if request.method in SAFE_METHODS or getattr(view, "member_writes", False):
            return is_member(request.user, course)
        return is_owner(request.user, course)

    def has_object_permission(self, request, view, obj):
        return is_member(request.user, course_from(obj))


class IsSubmissionParticipant(BasePermission):
    def has_object_permission(self, request, view, obj):
        # obj: Submission
        return is_submission_participant(request.user, obj)
