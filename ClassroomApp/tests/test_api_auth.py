import pytest
from rest_framework.test import APIClient

from ClassroomApp.tests.helpers import PASSWORD, TOKEN_URL, auth_client, make_user
from ClassroomApp.users.models import Profile, User

pytestmark = pytest.mark.django_db


def test_register_creates_user_and_profile():
    client = APIClient()
    resp = client.post(
        "/api/v1/auth/register/",
        {"email": "new@example.com", "password": "Wide-Open-Fields-9", "full_name": "New Person", "role": "student"},
        format="json",
    )
    assert resp.status_code == 201
    assert resp.data["role"] == "student"
    assert "password" not in resp.data
    user = User.objects.get(email="new@example.com")
    assert user.profile.full_name == "New Person"


def test_register_rejects_weak_password():
    resp = APIClient().post(
        "/api/v1/auth/register/",
        {"email": "weak@example.com", "password": "123", "full_name": "W", "role": "teacher"},
        format="json",
    )
    assert resp.status_code == 400
    assert not User.objects.filter(email="weak@example.com").exists()


def test_anonymous_requests_are_rejected():
    assert APIClient().get("/api/v1/profile/").status_code == 401


def test_profile_read_and_rename(student):
    client = auth_client(student)
    resp = client.get("/api/v1/profile/")
    assert resp.status_code == 200
    assert resp.data["email"] == "s1@example.com"
    assert resp.data["role"] == "student"

    resp = client.patch("/api/v1/profile/", {"full_name": "Samuel", "role": "teacher"}, format="json")
    assert resp.status_code == 200
    profile = Profile.objects.get(user=student)
    assert profile.full_name == "Samuel"
    assert profile.role == "student"


def test_account_without_profile_is_treated_as_signed_out(db):
    orphan = make_user("orphan@example.com", with_profile=False)
    client = auth_client(orphan)
    for url in ("/api/v1/profile/", "/api/v1/dashboard/", "/api/v1/courses/", "/api/v1/grades/"):
        resp = client.get(url)
        assert resp.status_code == 401, url
        assert resp.data["detail"].code == "profile_missing"


def test_logout_blacklists_refresh_token(student):
    client = APIClient()
    tokens = client.post(TOKEN_URL, {"email": student.email, "password": PASSWORD}, format="json").data

    resp = client.post("/api/v1/auth/logout/", {"refresh": tokens["refresh"]}, format="json")
    assert resp.status_code == 205

    refreshed = client.post("/api/v1/auth/token/refresh/", {"refresh": tokens["refresh"]}, format="json")
    assert refreshed.status_code == 401


@pytest.mark.parametrize("payload", [{}, {"refresh": ""}, {"refresh": "not-a-token"}])
def test_logout_is_permissive(db, payload):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION="Bearer expired.or.garbage")
    assert client.post("/api/v1/auth/logout/", payload, format="json").status_code == 205


def test_schema_is_served(db):
    resp = APIClient().get("/api/v1/schema/")
    assert resp.status_code == 200
