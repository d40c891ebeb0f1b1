import io
import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from bookgen.database.models import BookRecord
from bookgen.processing.exceptions import BookNotFoundError
from bookgen.processing.models import BookStatus


def _pdf_with_pages(texts: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in texts:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf_with_pages(["Grade 5 Mathematics, Semester 1"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a three-page PDF with known text on each page."""
    return _pdf_with_pages(["Page one content", "Page two content", "Page three content"])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf_with_pages([""])


class InMemoryBookRepository:
    """Dict-backed stand-in for BookRepository with the same conditional-update rules."""

    def __init__(self) -> None:
        self.books: dict[str, BookRecord] = {}
        self._clock = datetime(2024, 1, 1, tzinfo=UTC)

    def _now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def add(self, **fields: object) -> BookRecord:
        now = self._now()
        values: dict[str, object] = {
            "id": str(uuid.uuid4()),
            "name": "book.pdf",
            "file_path": f"{uuid.uuid4()}.pdf",
            "status": BookStatus.IDLE,
            "created_at": now,
            "updated_at": now,
        }
        values.update(fields)
        book = BookRecord(**values)  # type: ignore[arg-type]
        self.books[book.id] = book
        return book

    def list_books(self) -> list[BookRecord]:
        return sorted(self.books.values(), key=lambda b: b.created_at, reverse=True)  # type: ignore[arg-type, return-value]

    def list_by_status(self, status: BookStatus) -> list[BookRecord]:
        return [book for book in self.books.values() if book.status is status]

    def find_by_id(self, book_id: str) -> BookRecord:
        if book_id not in self.books:
            raise BookNotFoundError(f"Book {book_id} not found")
        return self.books[book_id]

    def list_file_paths(self) -> set[str]:
        return {book.file_path for book in self.books.values()}

    def insert(
        self,
        name: str,
        file_path: str,
        grade: int | None = None,
        subject: str | None = None,
        semester: int | None = None,
    ) -> BookRecord:
        return self.add(
            name=name, file_path=file_path, grade=grade, subject=subject, semester=semester
        )

    def insert_untracked(self, entries: Iterable[tuple[str, str]]) -> list[BookRecord]:
        inserted = []
        for name, file_path in entries:
            if file_path not in self.list_file_paths():
                inserted.append(self.add(name=name, file_path=file_path))
        return inserted

    def transition_status(
        self,
        book_id: str,
        allowed_from: Iterable[BookStatus],
        new_status: BookStatus,
    ) -> BookRecord | None:
        book = self.books.get(book_id)
        if book is None or book.status not in set(allowed_from):
            return None
        return self._save(replace(book, status=new_status))

    def update_metadata(
        self,
        book_id: str,
        *,
        total_pages: int,
        grade: int | None = None,
        subject: str | None = None,
        semester: int | None = None,
    ) -> BookRecord:
        book = self.find_by_id(book_id)
        return self._save(
            replace(
                book,
                total_pages=total_pages,
                grade=book.grade if book.grade is not None else grade,
                subject=book.subject if book.subject is not None else subject,
                semester=book.semester if book.semester is not None else semester,
            )
        )

    def update_progress(
        self,
        book_id: str,
        *,
        expected_processed_pages: int,
        processed_pages: int,
        questions_count: int,
        status: BookStatus,
    ) -> BookRecord | None:
        book = self.books.get(book_id)
        if (
            book is None
            or book.status is not BookStatus.PROCESSING
            or book.processed_pages != expected_processed_pages
        ):
            return None
        return self._save(
            replace(
                book,
                processed_pages=processed_pages,
                questions_count=questions_count,
                status=status,
            )
        )

    def _save(self, book: BookRecord) -> BookRecord:
        book = replace(book, updated_at=self._now())
        self.books[book.id] = book
        return book


@pytest.fixture()
def memory_repo() -> InMemoryBookRepository:
    return InMemoryBookRepository()
