from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .models import Assignment, Submission, AttendanceRecord, CourseFile

@admin.register(Assignment)
class AssignmentAdmin(SimpleHistoryAdmin):
    search_fields = ("title",)
    list_display = ("title", "course", "due_date")

@admin.register(Submission)
class SubmissionAdmin(SimpleHistoryAdmin):
    list_display = ("assignment", "student", "grade", "submitted_at", "graded_at")

@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ("course", "student", "date", "status")
    list_filter = ("status",)

admin.site.register(CourseFile)
