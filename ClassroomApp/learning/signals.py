"""Signal handlers relaying model writes to record change notifications."""

from typing import Any

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from ClassroomApp.core.choices import ChangeEvent
from ClassroomApp.core.notifications import publish
from ClassroomApp.courses.models import Enrollment
from ClassroomApp.learning.models import Assignment, Submission, AttendanceRecord

TRACKED_TABLES: dict[type, str] = {
    Enrollment: "enrollments",
    Assignment: "assignments",
    Submission: "submissions",
    AttendanceRecord: "attendance",
}


@receiver(post_save, sender=Enrollment)
@receiver(post_save, sender=Assignment)
@receiver(post_save, sender=Submission)
@receiver(post_save, sender=AttendanceRecord)
def relay_saved(sender: type, instance: Any, created: bool, **kwargs: Any) -> None:
    """Publish INSERT/UPDATE for tracked rows."""
    if kwargs.get("raw"):
        return
    event = ChangeEvent.INSERT if created else ChangeEvent.UPDATE
    publish(TRACKED_TABLES[sender], event, instance)


@receiver(post_delete, sender=Enrollment)
@receiver(post_delete, sender=Assignment)
@receiver(post_delete, sender=Submission)
@receiver(post_delete, sender=AttendanceRecord)
def relay_deleted(sender: type, instance: Any, **kwargs: Any) -> None:
    publish(TRACKED_TABLES[sender], ChangeEvent.DELETE, instance)
