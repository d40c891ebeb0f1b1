"""Builds a Classification from the parsed AI response.

Values of the wrong type or outside their range are treated as unknown
rather than rejected; the model is allowed to be unsure.
"""

from typing import Any

from bookgen.metadata.exceptions import MetadataValidationError
from bookgen.metadata.models import Classification

_MIN_GRADE = 1
_MAX_GRADE = 12
_VALID_SEMESTERS = frozenset({1, 2})
_MAX_SUBJECT_LENGTH = 100


def validate_and_build(data: dict[str, Any]) -> Classification:
    """Validate raw parsed JSON and build a Classification.

    Raises:
        MetadataValidationError: if the response is not a JSON object.
    """
    if not isinstance(data, dict):
        raise MetadataValidationError("Metadata response must be an object")
    return Classification(
        grade=_build_grade(data.get("grade")),
        subject=_build_subject(data.get("subject")),
        semester=_build_semester(data.get("semester")),
    )


def _as_int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def _build_grade(raw: Any) -> int | None:
    grade = _as_int(raw)
    if grade is None or not _MIN_GRADE <= grade <= _MAX_GRADE:
        return None
    return grade


def _build_semester(raw: Any) -> int | None:
    semester = _as_int(raw)
    if semester not in _VALID_SEMESTERS:
        return None
    return semester


def _build_subject(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    subject = raw.strip()
    if not subject:
        return None
    return subject[:_MAX_SUBJECT_LENGTH]
