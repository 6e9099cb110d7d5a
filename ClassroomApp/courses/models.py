"""Course domain models: Course, Enrollment."""

from django.db import models
from django.conf import settings

from simple_history.models import HistoricalRecords

from ClassroomApp.courses.querysets import CourseQuerySet, EnrollmentQuerySet


User = settings.AUTH_USER_MODEL

class Course(models.Model):
    """A course owned by a single teacher.

    Fields:
        title: Human readable course title.
        description: Optional longer text.
        teacher: FK to the owning teacher; deleting the course is reserved to them.
        duration: Optional free-form label ("8 weeks").
        created_at / updated_at: Timestamps.
        history: Audit history (django-simple-history).
    Deleting a course cascades to enrollments, assignments, attendance and files.
    """
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    teacher = models.ForeignKey(User, on_delete=models.CASCADE, related_name="owned_courses")
    duration = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()

    objects = CourseQuerySet.as_manager()

    def __str__(self) -> str:
        return f"{self.title} (#{self.pk})"

class Enrollment(models.Model):
    """A student's membership in a course.

    Constraints:
        uq_enrollment_course_student: one row per (course, student).
    """
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="enrollments")
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="enrollments")
    enrolled_at = models.DateTimeField(auto_now_add=True)
    history = HistoricalRecords()

    objects = EnrollmentQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["course", "student"], name="uq_enrollment_course_student"),
        ]

    def __str__(self) -> str:
        return f"{self.student} -> {self.course}"
