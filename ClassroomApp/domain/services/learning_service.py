"""Domain service functions for assignments, submissions and grading.

Enforces role/ownership rules:
- Only the teacher owning a course creates assignments or grades submissions.
- Only students enrolled in the course submit.
Submission lifecycle:
    NoSubmission -> Submitted (on submit) -> Graded (after grading).
There is no path back to NoSubmission and no resubmission; grading again
simply overwrites grade and feedback.
"""

import datetime
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, NamedTuple

from django.db import IntegrityError, transaction
from django.db.models import QuerySet, F
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from ClassroomApp.learning.models import Assignment, Submission
from ClassroomApp.core.choices import SubmissionStatus
from ClassroomApp.core.exceptions import DuplicateSubmission, InvalidGrade, ValidationError
from ClassroomApp.courses.models import Course, Enrollment
from ClassroomApp.users.models import User

logger = logging.getLogger(__name__)

GRADE_MIN = Decimal(0)
GRADE_MAX = Decimal(100)


class AssignmentStatus(NamedTuple):
    """An assignment as one student sees it."""
    assignment: Assignment
    submission: Submission | None
    status: str


def _ensure_owner(user: User, course: Course) -> None:
    """Ensure user owns the course."""
    if course.teacher_id != user.id:
        raise PermissionDenied("Only the course teacher can do this")

def _ensure_enrolled(user: User, course: Course) -> None:
    """Ensure user is an enrolled student of course."""
    if not Enrollment.objects.filter(course=course, student=user).exists():
        raise PermissionDenied("Not enrolled in course")

@transaction.atomic
def create_assignment(
    teacher: User,
    course: Course,
    title: str,
    description: str = "",
    due_date: datetime.datetime | None = None,
) -> Assignment:
    """Create an assignment in a course (owner only)."""
    _ensure_owner(teacher, course)
    assignment = Assignment.objects.create(
        course=course, title=title, description=description, due_date=due_date
    )
    logger.info("Assignment %s created in course %s", assignment.pk, course.pk)
    return assignment

@transaction.atomic
def update_assignment(teacher: User, assignment: Assignment, data: dict[str, Any]) -> Assignment:
    _ensure_owner(teacher, assignment.course)
    for field, value in data.items():
        setattr(assignment, field, value)
    assignment.save()
    return assignment

@transaction.atomic
def delete_assignment(teacher: User, assignment: Assignment) -> None:
    _ensure_owner(teacher, assignment.course)
    assignment.delete()

@transaction.atomic
def submit(student: User, assignment: Assignment, content: str) -> Submission:
    """Create the student's submission for an assignment.

    Rules:
        - Student must be enrolled in the assignment's course.
        - Content must not be blank.
        - Only one submission per (assignment, student); a second call
          raises DuplicateSubmission and stores nothing.
    """
    _ensure_enrolled(student, assignment.course)
    if not content or not content.strip():
        raise ValidationError("Submission content is required")
    if Submission.objects.filter(assignment=assignment, student=student).exists():
        raise DuplicateSubmission()
    try:
        with transaction.atomic():
            submission = Submission.objects.create(
                assignment=assignment, student=student, content=content
            )
    except IntegrityError:
        raise DuplicateSubmission()
    logger.info("Submission %s: assignment %s by student %s", submission.pk, assignment.pk, student.pk)
    return submission

def _coerce_grade(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidGrade()
    try:
        grade = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidGrade()
    if not grade.is_finite() or not (GRADE_MIN <= grade <= GRADE_MAX):
        raise InvalidGrade()
    return grade.quantize(Decimal("0.01"))

@transaction.atomic
def grade_submission(
    teacher: User,
    submission: Submission,
    value: Any,
    feedback: str = "",
) -> Submission:
    """Set grade, feedback and graded_at on a submission (course owner only).

    Validates:
        value within 0–100 inclusive; on failure nothing is written.
    Re-grading an already graded submission overwrites the previous values.
    """
    _ensure_owner(teacher, submission.assignment.course)
    grade = _coerce_grade(value)
    submission = Submission.objects.select_for_update().get(pk=submission.pk)
    was_graded = submission.is_graded
    submission.grade = grade
    submission.feedback = feedback or ""
    submission.graded_at = timezone.now()
    submission.save(update_fields=["grade", "feedback", "graded_at"])
    logger.info(
        "Submission %s %s with %s by teacher %s",
        submission.pk, "regraded" if was_graded else "graded", grade, teacher.pk,
    )
    return submission

def derive_status(
    assignment: Assignment,
    submission: Submission | None,
    now: datetime.datetime | None = None,
) -> str:
    """Display status of an assignment for one student.

    Graded beats Submitted beats Overdue beats Pending; nothing is stored.
    """
    if submission is not None:
        if submission.grade is not None:
            return SubmissionStatus.GRADED
        return SubmissionStatus.SUBMITTED
    now = now or timezone.now()
    if assignment.due_date and assignment.due_date < now:
        return SubmissionStatus.OVERDUE
    return SubmissionStatus.PENDING

def list_student_assignments(
    student: User, now: datetime.datetime | None = None
) -> list[AssignmentStatus]:
    """Assignments of the student's courses, soonest due first, undated last."""
    assignments: Iterable[Assignment] = (
        Assignment.objects.for_student(student)
        .select_related("course")
        .order_by(F("due_date").asc(nulls_last=True), "id")
    )
    by_assignment = {s.assignment_id: s for s in Submission.objects.for_student(student)}
    now = now or timezone.now()
    return [
        AssignmentStatus(a, by_assignment.get(a.id), derive_status(a, by_assignment.get(a.id), now))
        for a in assignments
    ]

def list_teacher_assignments(teacher: User) -> QuerySet[Assignment]:
    return Assignment.objects.for_teacher(teacher).select_related("course").order_by("-created_at", "-id")

def list_teacher_submissions(teacher: User) -> QuerySet[Submission]:
    """Submissions across the teacher's courses, newest first."""
    return (
        Submission.objects.for_teacher(teacher)
        .select_related("assignment__course", "student__profile")
        .order_by("-submitted_at", "-id")
    )

def list_student_submissions(student: User) -> QuerySet[Submission]:
    return (
        Submission.objects.for_student(student)
        .select_related("assignment__course")
        .order_by("-submitted_at", "-id")
    )

def list_assignment_submissions(user: User, assignment: Assignment) -> QuerySet[Submission]:
    """All submissions for the course owner, only their own for a student."""
    qs = (
        assignment.submissions
        .select_related("assignment__course", "student__profile")
        .order_by("-submitted_at", "-id")
    )
    if assignment.course.teacher_id == user.id:
        return qs
    _ensure_enrolled(user, assignment.course)
    return qs.filter(student=user)
