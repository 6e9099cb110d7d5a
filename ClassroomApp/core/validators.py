"""Validation helpers for uploaded course files and attendance dates."""

import datetime

from django.conf import settings
from django.core.exceptions import ValidationError
from typing import Any

ALLOWED_COURSE_FILE_MIME: set[str] = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
    "text/csv",
    "application/zip",
    "image/png",
    "image/jpeg",
}

def validate_file_size(file_obj: Any, max_mb: int | None = None) -> None:
    """Ensure file size does not exceed max_mb megabytes."""
    if max_mb is None:
        max_mb = getattr(settings, "MAX_UPLOAD_MB", 10)
    if file_obj and file_obj.size > max_mb * 1024 * 1024:
        raise ValidationError(f"File exceeds {max_mb} MB limit.")

def _probe_mime(file_obj: Any) -> str | None:
    """Read initial bytes to detect MIME type using libmagic."""
    if not file_obj:
        return None
    import magic

    header = file_obj.read(4096)
    file_obj.seek(0)
    return magic.from_buffer(header, mime=True)

def validate_course_file_mime(file_obj: Any) -> str | None:
    """Validate that an uploaded course file has an allowed MIME type; return the type."""
    mime = _probe_mime(file_obj)
    if mime and mime not in ALLOWED_COURSE_FILE_MIME:
        raise ValidationError(f"Unsupported file mime: {mime}")
    return mime

def parse_iso_date(value: Any) -> datetime.date:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}. Expected YYYY-MM-DD.")
