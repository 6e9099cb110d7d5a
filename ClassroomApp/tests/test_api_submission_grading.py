from decimal import Decimal

import pytest

from ClassroomApp.domain.services import learning_service
from ClassroomApp.learning.models import Submission
from ClassroomApp.tests.helpers import auth_client, results

pytestmark = pytest.mark.django_db


def submissions_url(assignment):
    return f"/api/v1/courses/{assignment.course_id}/assignments/{assignment.id}/submissions/"


def test_submit_and_grade(enrolled, assignment, student, teacher):
    post = auth_client(student).post(submissions_url(assignment), {"content": "answer"}, format="json")
    assert post.status_code == 201
    assert post.data["grade"] is None
    submission_id = post.data["id"]

    grade_resp = auth_client(teacher).post(
        f"{submissions_url(assignment)}{submission_id}/grade/",
        {"grade": 95, "feedback": "Great"},
        format="json",
    )
    assert grade_resp.status_code == 200
    assert grade_resp.data["grade"] == 95
    assert grade_resp.data["feedback"] == "Great"
    assert grade_resp.data["graded_at"] is not None


def test_second_submission_conflicts(enrolled, assignment, student):
    client = auth_client(student)
    assert client.post(submissions_url(assignment), {"content": "one"}, format="json").status_code == 201
    resp = client.post(submissions_url(assignment), {"content": "two"}, format="json")
    assert resp.status_code == 409
    assert Submission.objects.filter(assignment=assignment).count() == 1


def test_non_member_cannot_submit(course, assignment, student):
    resp = auth_client(student).post(submissions_url(assignment), {"content": "answer"}, format="json")
    assert resp.status_code == 403


def test_out_of_range_grade_is_rejected_and_nothing_changes(enrolled, assignment, student, teacher):
    submission = learning_service.submit(student, assignment, "answer")
    learning_service.grade_submission(teacher, submission, 70, "ok")

    resp = auth_client(teacher).post(
        f"{submissions_url(assignment)}{submission.id}/grade/", {"grade": 101, "feedback": "x"}, format="json",
    )
    assert resp.status_code == 400
    submission.refresh_from_db()
    assert submission.grade == Decimal("70")
    assert submission.feedback == "ok"


def test_student_cannot_grade_own_submission(enrolled, assignment, student):
    submission = learning_service.submit(student, assignment, "answer")
    resp = auth_client(student).post(
        f"{submissions_url(assignment)}{submission.id}/grade/", {"grade": 100}, format="json",
    )
    assert resp.status_code == 403
    submission.refresh_from_db()
    assert submission.grade is None


def test_listing_is_scoped_by_role(enrolled, assignment, student, student2, teacher):
    learning_service.submit(student, assignment, "a")
    learning_service.submit(student2, assignment, "b")

    teacher_rows = results(auth_client(teacher).get(submissions_url(assignment)).data)
    student_rows = results(auth_client(student).get(submissions_url(assignment)).data)

    assert len(teacher_rows) == 2
    assert [r["student"]["id"] for r in student_rows] == [student.id]


def test_student_cannot_read_classmate_submission(enrolled, assignment, student, student2):
    other = learning_service.submit(student2, assignment, "b")
    resp = auth_client(student).get(f"{submissions_url(assignment)}{other.id}/")
    assert resp.status_code == 404


def test_my_assignments_carry_status(enrolled, assignment, past_assignment, student, teacher):
    submission = learning_service.submit(student, assignment, "done")
    learning_service.grade_submission(teacher, submission, 88)

    rows = auth_client(student).get("/api/v1/assignments/").data

    statuses = {row["assignment"]["title"]: row["status"] for row in rows}
    assert statuses == {"Late one": "Overdue", "Homework 1": "Graded"}
    assert rows[0]["assignment"]["title"] == "Late one"


def test_teacher_assignments_listing(assignment, past_assignment, teacher):
    rows = auth_client(teacher).get("/api/v1/assignments/").data
    assert {row["title"] for row in rows} == {"Homework 1", "Late one"}


def test_grades_view_summarizes(enrolled, assignment, past_assignment, student, student2, teacher):
    graded = learning_service.submit(student, assignment, "a")
    learning_service.grade_submission(teacher, graded, 80)
    learning_service.submit(student2, assignment, "b")

    teacher_view = auth_client(teacher).get("/api/v1/grades/").data
    assert teacher_view["summary"]["total_count"] == 2
    assert teacher_view["summary"]["graded_count"] == 1
    assert teacher_view["summary"]["average_grade"] == 80
    assert teacher_view["summary"]["completion_rate"] == 50

    student_view = auth_client(student2).get("/api/v1/grades/").data
    assert student_view["summary"]["average_grade"] == 0
    assert len(student_view["submissions"]) == 1


def test_dashboard_by_role(enrolled, assignment, past_assignment, student, student2, teacher):
    graded = learning_service.submit(student, assignment, "a")
    learning_service.grade_submission(teacher, graded, "86.67")
    learning_service.submit(student, past_assignment, "b")
    learning_service.submit(student2, assignment, "c")

    t = auth_client(teacher).get("/api/v1/dashboard/").data
    assert t == {"role": "teacher", "courses": 1, "students": 2, "assignments": 2, "submissions": 3}

    s = auth_client(student).get("/api/v1/dashboard/").data
    assert s == {
        "role": "student",
        "enrolled_courses": 1,
        "available_courses": 1,
        "submissions": 2,
        "graded": 1,
        "average_grade": 86.7,
    }


def test_dashboard_for_student_without_submissions(enrolled, student):
    s = auth_client(student).get("/api/v1/dashboard/").data
    assert (s["submissions"], s["graded"], s["average_grade"]) == (0, 0, 0)


def test_boolean_grade_is_rejected(enrolled, assignment, student, teacher):
    submission = learning_service.submit(student, assignment, "answer")
    learning_service.grade_submission(teacher, submission, 70, "ok")

    resp = auth_client(teacher).post(
        f"{submissions_url(assignment)}{submission.id}/grade/", {"grade": True}, format="json",
    )
    assert resp.status_code == 400
    assert "grade" in resp.data
    submission.refresh_from_db()
    assert submission.grade == Decimal("70")
    assert submission.feedback == "ok"


def test_unknown_assignment_is_not_found(enrolled, student):
    resp = auth_client(student).get(f"/api/v1/courses/{enrolled.id}/assignments/999999/submissions/")
    assert resp.status_code == 404
