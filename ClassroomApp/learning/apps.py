"""Learning app configuration (registers signal handlers)."""

from django.apps import AppConfig

class LearningConfig(AppConfig):
    """AppConfig for assignments, submissions, attendance and course files."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "ClassroomApp.learning"
    label = "learning"

    def ready(self):
        """Import signal handlers to connect Django model signals."""
        from ClassroomApp.learning import signals  # noqa: F401
