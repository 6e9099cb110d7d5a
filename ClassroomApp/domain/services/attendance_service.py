"""Attendance marking and lookup.

Marking a day is a full replace: all records for (course, date) are removed
and one record per submitted student is written, inside one transaction so
readers never see the day half-replaced. Students left out of a mark end up
unrecorded for that day, which is not the same as absent.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.exceptions import PermissionDenied

from ClassroomApp.core.choices import AttendanceStatus, ChangeEvent
from ClassroomApp.core.exceptions import ValidationError
from ClassroomApp.core.notifications import publish
from ClassroomApp.core.validators import parse_iso_date
from ClassroomApp.courses.models import Course, Enrollment
from ClassroomApp.domain.services import course_service
from ClassroomApp.learning.models import AttendanceRecord
from ClassroomApp.users.models import User

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_STATUS = AttendanceStatus.PRESENT


@dataclass(frozen=True)
class AttendanceRow:
    """One roster line of the teacher's attendance sheet."""
    student: User
    status: str
    recorded: bool


def _coerce_day(value: Any) -> datetime.date:
    try:
        return parse_iso_date(value)
    except DjangoValidationError as exc:
        raise ValidationError(exc.messages[0])

def _ensure_owner(user: User, course: Course) -> None:
    if course.teacher_id != user.id:
        raise PermissionDenied("Only the course teacher can mark attendance")

def _normalize(course: Course, status_by_student: Mapping[Any, str]) -> dict[int, str]:
    """Validate student ids against the roster and statuses against the enum."""
    valid_statuses = set(AttendanceStatus.values)
    normalized: dict[int, str] = {}
    for raw_id, status in status_by_student.items():
        try:
            student_id = int(getattr(raw_id, "pk", raw_id))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid student id: {raw_id!r}")
        if status not in valid_statuses:
            raise ValidationError(f"Invalid attendance status {status!r} for student {student_id}")
        normalized[student_id] = status
    enrolled = set(
        Enrollment.objects.filter(course=course, student_id__in=normalized).values_list("student_id", flat=True)
    )
    missing = sorted(set(normalized) - enrolled)
    if missing:
        raise ValidationError(f"Students not enrolled in course: {missing}")
    return normalized

@transaction.atomic
def mark_attendance(
    teacher: User,
    course: Course,
    date: Any,
    status_by_student: Mapping[Any, str],
) -> list[AttendanceRecord]:
    """Replace the attendance of `course` on `date` with `status_by_student`.

    Args:
        teacher: Must own the course.
        course: Target course.
        date: A date or YYYY-MM-DD string.
        status_by_student: student (or student id) -> present/absent/late.
            An empty mapping clears the day.

    Returns:
        The newly written records.
    """
    _ensure_owner(teacher, course)
    day = _coerce_day(date)
    normalized = _normalize(course, status_by_student)

    deleted, _ = AttendanceRecord.objects.for_day(course, day).delete()
    records = AttendanceRecord.objects.bulk_create(
        [
            AttendanceRecord(course=course, student_id=student_id, date=day, status=status)
            for student_id, status in normalized.items()
        ]
    )
    for record in records:
        publish("attendance", ChangeEvent.INSERT, record)
    logger.info(
        "Attendance for course %s on %s replaced: %d removed, %d written",
        course.pk, day, deleted, len(records),
    )
    return records

def get_attendance(course: Course, date: Any) -> dict[int, str]:
    """Stored student id -> status for the day. Unrecorded students are absent from the map."""
    day = _coerce_day(date)
    return dict(AttendanceRecord.objects.for_day(course, day).values_list("student_id", "status"))

def get_attendance_sheet(course: Course, date: Any) -> list[AttendanceRow]:
    """Roster view for the teacher: unrecorded students display as present (not persisted)."""
    stored = get_attendance(course, date)
    return [
        AttendanceRow(
            student=student,
            status=stored.get(student.id, DEFAULT_DISPLAY_STATUS),
            recorded=student.id in stored,
        )
        for student in course_service.roster(course)
    ]

def get_attendance_history(course: Course, student: User):
    """All of the student's records in the course, newest date first."""
    return AttendanceRecord.objects.history(course, student)
