from unittest.mock import MagicMock, patch

import pytest
import requests

from ClassroomApp.api.throttles import AssistantRateThrottle
from ClassroomApp.tests.helpers import auth_client, make_user

pytestmark = pytest.mark.django_db

URL = "/api/v1/assistant/"
POST = "ClassroomApp.domain.services.assistant_service.requests.post"


@pytest.fixture(autouse=True)
def gemini_key(settings):
    settings.GEMINI_API_KEY = "test-key"


def gemini_reply(text):
    reply = MagicMock()
    reply.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return reply


def ask(user, **overrides):
    payload = {"question": "What is due?", "userId": user.id, "userRole": user.profile.role, **overrides}
    return auth_client(user).post(URL, payload, format="json")


def test_answer_is_returned(enrolled, student):
    with patch(POST, return_value=gemini_reply("Homework 1 is due.")):
        resp = ask(student)
    assert resp.status_code == 200
    assert resp.data == {"response": "Homework 1 is due."}


def test_teacher_can_ask_too(course, teacher):
    with patch(POST, return_value=gemini_reply("You teach Algebra.")) as post:
        resp = ask(teacher)
    assert resp.status_code == 200
    assert "Teacher's Courses:" in post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]


@pytest.mark.parametrize("missing", ["question", "userId", "userRole"])
def test_missing_fields_are_rejected(student, missing):
    payload = {"question": "Q", "userId": student.id, "userRole": "student"}
    payload.pop(missing)
    with patch(POST) as post:
        resp = auth_client(student).post(URL, payload, format="json")
    assert resp.status_code == 400
    assert resp.data["error"] == "Question, userId, and userRole are required"
    post.assert_not_called()


def test_identity_must_match_caller(student, student2):
    with patch(POST) as post:
        assert ask(student, userId=student2.id).status_code == 403
        assert ask(student, userRole="teacher").status_code == 403
    post.assert_not_called()


def test_unconfigured_assistant(student, settings):
    settings.GEMINI_API_KEY = ""
    resp = ask(student)
    assert resp.status_code == 500
    assert resp.data == {"error": "GEMINI_API_KEY is not configured"}


def test_upstream_failure(student):
    with patch(POST, side_effect=requests.Timeout("slow")):
        resp = ask(student)
    assert resp.status_code == 502
    assert resp.data == {"error": "Failed to get response from AI"}


def test_account_without_profile_gets_error_body(db):
    orphan = make_user("orphan@example.com", with_profile=False)
    resp = auth_client(orphan).post(URL, {"question": "Q", "userId": orphan.id, "userRole": "student"}, format="json")
    assert resp.status_code == 401
    assert set(resp.data) == {"error"}


def test_throttled_requests_get_error_body(enrolled, student):
    with patch.object(AssistantRateThrottle, "rate", "1/hour", create=True), patch(POST, return_value=gemini_reply("ok")):
        assert ask(student).status_code == 200
        resp = ask(student)
    assert resp.status_code == 429
    assert set(resp.data) == {"error"}
