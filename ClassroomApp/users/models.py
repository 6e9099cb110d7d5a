"""User accounts and the per-user profile that carries the LMS role."""

from django.contrib.auth.models import AbstractUser
from django.db import models

from ClassroomApp.core.choices import UserRole


class User(AbstractUser):
    """Login identity. Email is the username field."""
    email = models.EmailField(unique=True)
    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    def __str__(self) -> str:
        return self.email


class Profile(models.Model):
    """Display name and role of a user.

    A user row without a profile is an unconfirmed account; the session
    resolver refuses it.
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    full_name = models.CharField(max_length=200, blank=True)
    role = models.CharField(max_length=16, choices=UserRole.choices)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name or self.user.email} ({self.role})"

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT
