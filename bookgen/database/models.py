from dataclasses import dataclass, field
from datetime import datetime

from bookgen.processing.models import BookStatus


@dataclass(frozen=True)
class BookRecord:
    """Represents a row from the books table."""

    id: str
    name: str
    file_path: str
    status: BookStatus
    grade: int | None = None
    subject: str | None = None
    semester: int | None = None
    total_pages: int | None = None
    processed_pages: int = 0
    questions_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class QuestionRecord:
    """Represents a row from the questions table."""

    id: str
    book_id: str
    page_number: int
    question_text: str
    options: list[str] = field(default_factory=list)
    correct_answer: str | None = None
    created_at: datetime | None = None
