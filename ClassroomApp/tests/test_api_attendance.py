import pytest

from ClassroomApp.domain.services import attendance_service
from ClassroomApp.tests.helpers import auth_client

pytestmark = pytest.mark.django_db


def attendance_url(course):
    return f"/api/v1/courses/{course.id}/attendance/"


def test_teacher_marks_and_reads_sheet(enrolled, teacher, student, student2):
    client = auth_client(teacher)
    resp = client.post(
        attendance_url(enrolled),
        {"date": "2024-05-06", "statuses": {str(student2.id): "late"}},
        format="json",
    )
    assert resp.status_code == 200
    assert [(r["student"], r["status"]) for r in resp.data] == [(student2.id, "late")]

    sheet = client.get(attendance_url(enrolled), {"date": "2024-05-06"}).json()
    assert sheet["records"] == {str(student2.id): "late"}
    roster = {row["student"]["id"]: (row["status"], row["recorded"]) for row in sheet["roster"]}
    assert roster == {student.id: ("present", False), student2.id: ("late", True)}


def test_date_is_required_and_validated(enrolled, teacher):
    client = auth_client(teacher)
    assert client.get(attendance_url(enrolled)).status_code == 400
    assert client.get(attendance_url(enrolled), {"date": "2024-13-45"}).status_code == 400


def test_invalid_status_is_rejected(enrolled, teacher, student):
    resp = auth_client(teacher).post(
        attendance_url(enrolled), {"date": "2024-05-06", "statuses": {str(student.id): "sick"}}, format="json",
    )
    assert resp.status_code == 400


def test_students_cannot_mark(enrolled, student):
    resp = auth_client(student).post(
        attendance_url(enrolled), {"date": "2024-05-06", "statuses": {str(student.id): "present"}}, format="json",
    )
    assert resp.status_code == 403


def test_student_reads_own_records_only(enrolled, teacher, student, student2):
    attendance_service.mark_attendance(teacher, enrolled, "2024-05-06", {student.id: "absent", student2.id: "present"})

    resp = auth_client(student).get(attendance_url(enrolled), {"date": "2024-05-06"})

    assert resp.status_code == 200
    assert "roster" not in resp.data
    assert [(r["student"], r["status"]) for r in resp.data["records"]] == [(student.id, "absent")]


def test_history_for_student_and_teacher(enrolled, teacher, student, student2):
    attendance_service.mark_attendance(teacher, enrolled, "2024-05-06", {student.id: "present"})
    attendance_service.mark_attendance(teacher, enrolled, "2024-05-07", {student.id: "late"})

    own = auth_client(student).get(attendance_url(enrolled) + "history/").data
    assert [r["date"] for r in own] == ["2024-05-07", "2024-05-06"]

    seen_by_teacher = auth_client(teacher).get(attendance_url(enrolled) + "history/", {"student": student.id}).data
    assert [r["status"] for r in seen_by_teacher] == ["late", "present"]

    peeking = auth_client(student2).get(attendance_url(enrolled) + "history/", {"student": student.id})
    assert peeking.status_code == 403


def test_outsiders_are_refused(course, other_teacher):
    assert auth_client(other_teacher).get(attendance_url(course), {"date": "2024-05-06"}).status_code == 403


def test_history_of_unknown_student_is_not_found(course, teacher, student):
    resp = auth_client(teacher).get(attendance_url(course) + "history/", {"student": student.id})
    assert resp.status_code == 404
