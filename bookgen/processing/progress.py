"""Simulated processing progress.

Each check of a processing book advances it by a random number of pages and
questions. Nothing here looks at book content; the numbers only mimic what a
question generator would report.
"""

import math
import random
from collections.abc import Callable, Iterable

from bookgen.database.models import BookRecord
from bookgen.database.repositories.book_repository import BookRepository
from bookgen.logging.logger import Log
from bookgen.processing.models import BookStatus, ProgressEvent, ProgressReport

MIN_PAGE_STEP = 1
MAX_PAGE_STEP = 5
QUESTION_SPREAD_PER_PAGE = 3

ProgressListener = Callable[[ProgressEvent], None]


def progress_percentage(processed_pages: int, total_pages: int | None) -> int:
    """Percentage of processed pages, rounded half up; 0 when the total is unknown."""
    if not total_pages:
        return 0
    return min(100, math.floor(processed_pages / total_pages * 100 + 0.5))


def build_report(book: BookRecord) -> ProgressReport:
    return ProgressReport(
        processed_pages=book.processed_pages,
        total_pages=book.total_pages or 0,
        percentage=progress_percentage(book.processed_pages, book.total_pages),
    )


def draw_increments(remaining_pages: int, rng: random.Random) -> tuple[int, int]:
    """Return (page_increment, question_increment) for one step.

    Pages are drawn from [1, 5] and capped at ``remaining_pages``; questions
    from [pages, 4 * pages).
    """
    pages = min(rng.randint(MIN_PAGE_STEP, MAX_PAGE_STEP), remaining_pages)
    questions = rng.randrange(QUESTION_SPREAD_PER_PAGE * pages) + pages
    return pages, questions


class ProgressSimulator:
    """Advances page and question counters of processing books on each poll."""

    def __init__(
        self,
        book_repo: BookRepository,
        rng: random.Random | None = None,
        listeners: Iterable[ProgressListener] = (),
    ) -> None:
        self._book_repo = book_repo
        self._rng = rng if rng is not None else random.Random()
        self._listeners: list[ProgressListener] = list(listeners)

    def add_listener(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def check(self, book_id: str) -> tuple[BookRecord, ProgressReport]:
        """Advance a processing book one step and report its progress.

        Books in any other status are returned unchanged.

        Raises:
            BookNotFoundError: if the book does not exist.
        """
        book = self._book_repo.find_by_id(book_id)
        if book.status is not BookStatus.PROCESSING or book.total_pages is None:
            return book, build_report(book)

        remaining = book.total_pages - book.processed_pages
        if remaining > 0:
            page_step, question_step = draw_increments(remaining, self._rng)
        else:
            page_step, question_step = 0, 0
        processed_pages = book.processed_pages + page_step
        questions_count = book.questions_count + question_step
        status = (
            BookStatus.COMPLETED
            if processed_pages >= book.total_pages
            else BookStatus.PROCESSING
        )

        updated = self._book_repo.update_progress(
            book_id,
            expected_processed_pages=book.processed_pages,
            processed_pages=processed_pages,
            questions_count=questions_count,
            status=status,
        )
        if updated is None:
            Log.warning(f"Book {book_id} changed during progress check, not advancing")
            fresh = self._book_repo.find_by_id(book_id)
            return fresh, build_report(fresh)

        Log.info(
            f"Book {book_id}: {updated.processed_pages}/{updated.total_pages} pages, "
            f"{updated.questions_count} questions"
        )
        if updated.status is BookStatus.COMPLETED:
            Log.info(f"Book {book_id} processing completed")
        self._notify(updated)
        return updated, build_report(updated)

    def _notify(self, book: BookRecord) -> None:
        event = ProgressEvent(
            book_id=book.id,
            processed_pages=book.processed_pages,
            questions_count=book.questions_count,
            status=book.status,
        )
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as exc:
                Log.warning(f"Progress listener failed for book {book.id}: {exc}")
