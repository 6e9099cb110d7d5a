"""Learning domain models: Assignment, Submission, AttendanceRecord, CourseFile."""

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from ClassroomApp.courses.models import Course
from ClassroomApp.core.choices import AttendanceStatus, UserRole
from ClassroomApp.core.validators import validate_file_size, validate_course_file_mime
from ClassroomApp.courses.querysets import AssignmentQuerySet, SubmissionQuerySet, AttendanceQuerySet

from simple_history.models import HistoricalRecords

User = settings.AUTH_USER_MODEL

class Assignment(models.Model):
    """A piece of work set in a course, with an optional due date."""
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="assignments")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    due_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()

    objects = AssignmentQuerySet.as_manager()

    def __str__(self) -> str:
        return f"{self.title} (#{self.pk})"


class Submission(models.Model):
    """A student's single response to an assignment (unique per assignment+student).

    A null grade means ungraded. Grade, feedback and graded_at are only
    written by the teacher owning the course.
    """
    assignment = models.ForeignKey(Assignment, on_delete=models.CASCADE, related_name="submissions")
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="submissions")
    content = models.TextField()
    grade = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    feedback = models.TextField(blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)
    graded_at = models.DateTimeField(null=True, blank=True)
    history = HistoricalRecords()

    objects = SubmissionQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["assignment", "student"], name="uq_assignment_student"),
            models.CheckConstraint(
                condition=models.Q(grade__isnull=True) | models.Q(grade__gte=0, grade__lte=100),
                name="ck_submission_grade_range",
            ),
        ]

    @property
    def is_graded(self) -> bool:
        return self.grade is not None


class AttendanceRecord(models.Model):
    """Status of one student in one course on one day."""
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="attendance_records")
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="attendance_records")
    date = models.DateField()
    status = models.CharField(max_length=16, choices=AttendanceStatus.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AttendanceQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["course", "student", "date"], name="uq_attendance_course_student_date"),
        ]

    def __str__(self) -> str:
        return f"{self.student} @ {self.course} {self.date}: {self.status}"


class CourseFile(models.Model):
    """Material shared in a course by its teacher or one of its students."""
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="files")
    uploader = models.ForeignKey(User, on_delete=models.CASCADE, related_name="uploaded_files")
    uploader_role = models.CharField(max_length=16, choices=UserRole.choices)
    file = models.FileField(
        upload_to="course-files/%Y/%m/",
        validators=[validate_file_size, validate_course_file_mime],
    )
    file_name = models.CharField(max_length=255)
    file_size = models.PositiveIntegerField(null=True, blank=True)
    file_type = models.CharField(max_length=127, blank=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
