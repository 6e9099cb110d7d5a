from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .models import Course, Enrollment

@admin.register(Course)
class CourseAdmin(SimpleHistoryAdmin):
    search_fields = ("title",)
    list_display = ("title", "teacher", "duration", "created_at")

@admin.register(Enrollment)
class EnrollmentAdmin(SimpleHistoryAdmin):
    list_display = ("course", "student", "enrolled_at")
