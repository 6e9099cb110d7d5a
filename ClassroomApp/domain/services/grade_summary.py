"""Aggregate statistics over a set of submissions.

Items may be Submission instances or plain mappings with a "grade" key.
Ungraded items (grade None) are left out of the average entirely; both
functions return 0 for an empty input so callers can render the value as is.
"""

from collections.abc import Mapping
from typing import Any, Iterable


def _grade_of(item: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get("grade")
    return getattr(item, "grade", None)


def _graded(items: list[Any]) -> list[float]:
    return [float(g) for g in map(_grade_of, items) if g is not None]


def average_grade(submissions: Iterable[Any]) -> float:
    grades = _graded(list(submissions))
    if not grades:
        return 0
    return sum(grades) / len(grades)


def completion_rate(submissions: Iterable[Any]) -> float:
    """Percentage of submissions that carry a grade."""
    items = list(submissions)
    if not items:
        return 0
    return len(_graded(items)) / len(items) * 100


def summarize(submissions: Iterable[Any]) -> dict[str, float | int]:
    items = list(submissions)
    return {
        "average_grade": average_grade(items),
        "graded_count": len(_graded(items)),
        "total_count": len(items),
        "completion_rate": completion_rate(items),
    }
