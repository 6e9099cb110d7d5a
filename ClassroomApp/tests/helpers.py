from model_bakery import baker
from rest_framework.test import APIClient

from ClassroomApp.core.choices import UserRole

PASSWORD = "pass1234"
TOKEN_URL = "/api/v1/auth/token/"


def make_user(email, role=UserRole.STUDENT, full_name="", with_profile=True):
    user = baker.make("users.User", email=email, username=email)
    user.set_password(PASSWORD)
    user.save()
    if with_profile:
        baker.make("users.Profile", user=user, role=role, full_name=full_name or email.split("@")[0])
    return user


def auth_client(user):
    client = APIClient()
    token = client.post(TOKEN_URL, {"email": user.email, "password": PASSWORD}, format="json").data["access"]
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


def results(data):
    if isinstance(data, dict) and "results" in data:
        return data["results"]
    return data
