import datetime

import pytest
from rest_framework.exceptions import PermissionDenied

from ClassroomApp.core.choices import AttendanceStatus
from ClassroomApp.core.exceptions import ValidationError
from ClassroomApp.domain.services import attendance_service, course_service
from ClassroomApp.learning.models import AttendanceRecord

pytestmark = pytest.mark.django_db

DAY = datetime.date(2024, 3, 4)


def test_mark_then_read_back(enrolled, teacher, student, student2):
    attendance_service.mark_attendance(
        teacher, enrolled, DAY, {student.pk: AttendanceStatus.PRESENT, student2.pk: AttendanceStatus.LATE},
    )
    assert attendance_service.get_attendance(enrolled, DAY) == {
        student.pk: AttendanceStatus.PRESENT,
        student2.pk: AttendanceStatus.LATE,
    }


def test_accepts_iso_string_dates(enrolled, teacher, student):
    attendance_service.mark_attendance(teacher, enrolled, "2024-03-04", {student.pk: "absent"})
    assert attendance_service.get_attendance(enrolled, DAY) == {student.pk: "absent"}


def test_remark_replaces_whole_day(enrolled, teacher, student, student2):
    attendance_service.mark_attendance(teacher, enrolled, DAY, {student.pk: "present", student2.pk: "late"})
    attendance_service.mark_attendance(teacher, enrolled, DAY, {student.pk: "absent"})

    assert attendance_service.get_attendance(enrolled, DAY) == {student.pk: "absent"}
    assert AttendanceRecord.objects.filter(course=enrolled, student=student2, date=DAY).count() == 0


def test_empty_mark_clears_the_day(enrolled, teacher, student):
    attendance_service.mark_attendance(teacher, enrolled, DAY, {student.pk: "present"})
    records = attendance_service.mark_attendance(teacher, enrolled, DAY, {})
    assert records == []
    assert attendance_service.get_attendance(enrolled, DAY) == {}


def test_other_days_are_untouched(enrolled, teacher, student):
    other_day = DAY + datetime.timedelta(days=1)
    attendance_service.mark_attendance(teacher, enrolled, other_day, {student.pk: "late"})
    attendance_service.mark_attendance(teacher, enrolled, DAY, {})
    assert attendance_service.get_attendance(enrolled, other_day) == {student.pk: "late"}


def test_sheet_defaults_unrecorded_students_to_present(enrolled, teacher, student, student2):
    attendance_service.mark_attendance(teacher, enrolled, DAY, {student2.pk: "absent"})

    rows = attendance_service.get_attendance_sheet(enrolled, DAY)

    by_student = {row.student.pk: row for row in rows}
    assert by_student[student.pk].status == AttendanceStatus.PRESENT
    assert by_student[student.pk].recorded is False
    assert by_student[student2.pk].status == AttendanceStatus.ABSENT
    assert by_student[student2.pk].recorded is True
    # the default is display only
    assert AttendanceRecord.objects.filter(student=student).count() == 0


def test_history_is_newest_first(enrolled, teacher, student):
    for offset, status in enumerate(["present", "late", "absent"]):
        attendance_service.mark_attendance(
            teacher, enrolled, DAY + datetime.timedelta(days=offset), {student.pk: status},
        )
    history = list(attendance_service.get_attendance_history(enrolled, student))
    assert [r.date for r in history] == [
        DAY + datetime.timedelta(days=2), DAY + datetime.timedelta(days=1), DAY,
    ]
    assert [r.status for r in history] == ["absent", "late", "present"]


def test_invalid_status_rejected_without_writing(enrolled, teacher, student, student2):
    attendance_service.mark_attendance(teacher, enrolled, DAY, {student.pk: "present"})
    with pytest.raises(ValidationError):
        attendance_service.mark_attendance(teacher, enrolled, DAY, {student.pk: "absent", student2.pk: "sick"})
    assert attendance_service.get_attendance(enrolled, DAY) == {student.pk: "present"}


def test_unenrolled_student_rejected(course, teacher, student):
    with pytest.raises(ValidationError):
        attendance_service.mark_attendance(teacher, course, DAY, {student.pk: "present"})


def test_bad_date_rejected(enrolled, teacher, student):
    with pytest.raises(ValidationError):
        attendance_service.mark_attendance(teacher, enrolled, "04/03/2024", {student.pk: "present"})


def test_only_owner_marks(enrolled, other_teacher, student):
    with pytest.raises(PermissionDenied):
        attendance_service.mark_attendance(other_teacher, enrolled, DAY, {student.pk: "present"})


def test_enroll_mark_remark_scenario(course, teacher, student, student2):
    course_service.enroll(course, student)
    course_service.enroll(course, student2)

    attendance_service.mark_attendance(teacher, course, DAY, {student.pk: "present", student2.pk: "late"})
    assert [r.status for r in attendance_service.get_attendance_history(course, student2)] == ["late"]

    attendance_service.mark_attendance(teacher, course, DAY, {student.pk: "absent"})
    assert [r.status for r in attendance_service.get_attendance_history(course, student)] == ["absent"]
    assert attendance_service.get_attendance_history(course, student2).count() == 0
