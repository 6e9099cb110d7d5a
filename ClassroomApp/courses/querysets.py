"""Custom querysets scoping courses and learning objects to a user's role."""

from django.db.models import QuerySet, Count
from typing import Self


class CourseQuerySet(QuerySet):
    """QuerySet with helpers for course ownership and counts."""

    def for_teacher(self, user) -> Self:
        """Courses owned by the given teacher."""
        return self.filter(teacher=user)

    def with_counts(self) -> Self:
        """Annotate enrollment and assignment counts."""
        return self.annotate(
            enrollment_count=Count("enrollments", distinct=True),
            assignment_count=Count("assignments", distinct=True),
        )


class EnrollmentQuerySet(QuerySet):

    def for_student(self, user) -> Self:
        return self.filter(student=user)


class AssignmentQuerySet(QuerySet):
    """QuerySet helpers for assignment scoping."""

    def for_teacher(self, user) -> Self:
        """Assignments in courses owned by the teacher."""
        return self.filter(course__teacher=user)

    def for_student(self, user) -> Self:
        """Assignments in courses where the student is enrolled."""
        return self.filter(course__enrollments__student=user).distinct()


class SubmissionQuerySet(QuerySet):
    """QuerySet helpers for filtering submissions by role."""

    def for_teacher(self, user) -> Self:
        """Submissions in courses the teacher owns."""
        return self.filter(assignment__course__teacher=user)

    def for_student(self, user) -> Self:
        """Submissions belonging to the student."""
        return self.filter(student=user)


class AttendanceQuerySet(QuerySet):

    def for_day(self, course, date) -> Self:
        return self.filter(course=course, date=date)

    def history(self, course, student) -> Self:
        """Records of one student in one course, most recent first."""
        return self.filter(course=course, student=student).order_by("-date")
