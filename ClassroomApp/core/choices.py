from django.db import models

class UserRole(models.TextChoices):
    TEACHER = "teacher", "Teacher"
    STUDENT = "student", "Student"

class AttendanceStatus(models.TextChoices):
    PRESENT = "present", "Present"
    ABSENT = "absent", "Absent"
    LATE = "late", "Late"

class SubmissionStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    OVERDUE = "Overdue", "Overdue"
    SUBMITTED = "Submitted", "Submitted"
    GRADED = "Graded", "Graded"

class ChangeEvent(models.TextChoices):
    INSERT = "INSERT", "Insert"
    UPDATE = "UPDATE", "Update"
    DELETE = "DELETE", "Delete"
