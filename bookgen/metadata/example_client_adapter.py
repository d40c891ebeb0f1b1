"""Offline metadata client.

Makes no network calls. Books are classified from keywords in the sample
text, which is enough for local development, tests, and installations
without an AI provider key.
"""

import json
import re

from bookgen.metadata.client_base import BaseMetadataClient

BOOK_TEXT_MARKER = "Book text:"

_GRADE = re.compile(r"\bgrade\s+(\d{1,2})\b", re.IGNORECASE)
_SEMESTER = re.compile(r"\bsemester\s+([12])\b", re.IGNORECASE)
_SUBJECTS = (
    "Mathematics",
    "Science",
    "Biology",
    "Chemistry",
    "Physics",
    "History",
    "Geography",
    "English",
)


class ExampleClientAdapter(BaseMetadataClient):
    """Keyword-based stand-in for an AI provider.

    Fields not found in the text are returned as null.
    """

    def classify(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = system_prompt, json_schema
        text = _book_text(user_prompt)
        grade = _GRADE.search(text)
        semester = _SEMESTER.search(text)
        subject = next(
            (name for name in _SUBJECTS if re.search(rf"\b{name}\b", text, re.IGNORECASE)),
            None,
        )
        return json.dumps(
            {
                "grade": int(grade.group(1)) if grade else None,
                "subject": subject,
                "semester": int(semester.group(1)) if semester else None,
            }
        )


def _book_text(user_prompt: str) -> str:
    """Return the part of the prompt after the book text marker, or the whole prompt."""
    _, marker, text = user_prompt.rpartition(BOOK_TEXT_MARKER)
    return text if marker else user_prompt
