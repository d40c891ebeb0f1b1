import uuid
from collections.abc import Iterable
from typing import Any

from psycopg.rows import dict_row

from bookgen.database.connection import get_connection
from bookgen.database.models import BookRecord
from bookgen.processing.exceptions import BookNotFoundError
from bookgen.processing.models import BookStatus

_COLUMNS = """
    id, name, file_path, grade, subject, semester, total_pages,
    processed_pages, questions_count, status, created_at, updated_at
"""


def _row_to_book(row: dict[str, Any]) -> BookRecord:
    return BookRecord(
        id=str(row["id"]),
        name=row["name"],
        file_path=row["file_path"],
        status=BookStatus(row["status"]),
        grade=row["grade"],
        subject=row["subject"],
        semester=row["semester"],
        total_pages=row["total_pages"],
        processed_pages=row["processed_pages"],
        questions_count=row["questions_count"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _parse_id(book_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(book_id))
    except ValueError as exc:
        raise BookNotFoundError(f"Book {book_id} not found") from exc


class BookRepository:
    """Database operations for the books table.

    ``id`` and ``file_path`` are written only on insert; no update below
    touches them.
    """

    def list_books(self) -> list[BookRecord]:
        """Return all books, newest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM books ORDER BY created_at DESC")
                rows = cur.fetchall()
        return [_row_to_book(row) for row in rows]

    def list_by_status(self, status: BookStatus) -> list[BookRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM books WHERE status = %s ORDER BY created_at",
                    (status.value,),
                )
                rows = cur.fetchall()
        return [_row_to_book(row) for row in rows]

    def find_by_id(self, book_id: str) -> BookRecord:
        """Find a book by ID.

        Raises:
            BookNotFoundError: if no book with this ID exists.
        """
        parsed_id = _parse_id(book_id)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM books WHERE id = %s", (parsed_id,))
                row = cur.fetchone()

        if row is None:
            raise BookNotFoundError(f"Book {book_id} not found")
        return _row_to_book(row)

    def list_file_paths(self) -> set[str]:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT file_path FROM books")
                rows = cur.fetchall()
        return {row[0] for row in rows}

    def insert(
        self,
        name: str,
        file_path: str,
        grade: int | None = None,
        subject: str | None = None,
        semester: int | None = None,
    ) -> BookRecord:
        """Insert an idle book with zeroed counters and unknown page count."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO books
                    (name, file_path, grade, subject, semester,
                     processed_pages, questions_count, status)
                    VALUES (%s, %s, %s, %s, %s, 0, 0, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (name, file_path, grade, subject, semester, BookStatus.IDLE.value),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError(f"Insert of book {file_path} returned no row")
        return _row_to_book(row)

    def insert_untracked(self, entries: Iterable[tuple[str, str]]) -> list[BookRecord]:
        """Insert idle books for (name, file_path) pairs in one transaction.

        Pairs whose file_path is already tracked are skipped.
        """
        inserted: list[BookRecord] = []
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                for name, file_path in entries:
                    cur.execute(
                        f"""
                        INSERT INTO books (name, file_path, status)
                        VALUES (%s, %s, %s)
                        ON CONFLICT (file_path) DO NOTHING
                        RETURNING {_COLUMNS}
                        """,
                        (name, file_path, BookStatus.IDLE.value),
                    )
                    row = cur.fetchone()
                    if row is not None:
                        inserted.append(_row_to_book(row))
            conn.commit()
        return inserted

    def transition_status(
        self,
        book_id: str,
        allowed_from: Iterable[BookStatus],
        new_status: BookStatus,
    ) -> BookRecord | None:
        """Set a new status only if the current one is in ``allowed_from``.

        Returns the updated book, or None when no row matched (book missing
        or in a different status).
        """
        parsed_id = _parse_id(book_id)
        allowed = [status.value for status in allowed_from]
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE books
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s AND status = ANY(%s)
                    RETURNING {_COLUMNS}
                    """,
                    (new_status.value, parsed_id, allowed),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            return None
        return _row_to_book(row)

    def update_metadata(
        self,
        book_id: str,
        *,
        total_pages: int,
        grade: int | None = None,
        subject: str | None = None,
        semester: int | None = None,
    ) -> BookRecord:
        """Persist the page count and fill classification fields left empty.

        Raises:
            BookNotFoundError: if no book with this ID exists.
        """
        parsed_id = _parse_id(book_id)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE books
                    SET total_pages = %s,
                        grade = COALESCE(grade, %s),
                        subject = COALESCE(subject, %s),
                        semester = COALESCE(semester, %s),
                        updated_at = NOW()
                    WHERE id = %s
                    RETURNING {_COLUMNS}
                    """,
                    (total_pages, grade, subject, semester, parsed_id),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise BookNotFoundError(f"Book {book_id} not found")
        return _row_to_book(row)

    def update_progress(
        self,
        book_id: str,
        *,
        expected_processed_pages: int,
        processed_pages: int,
        questions_count: int,
        status: BookStatus,
    ) -> BookRecord | None:
        """Write new counters if the book is still processing at the read position.

        Returns None when another caller changed the status or the counters
        since they were read.
        """
        parsed_id = _parse_id(book_id)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE books
                    SET processed_pages = %s,
                        questions_count = %s,
                        status = %s,
                        updated_at = NOW()
                    WHERE id = %s
                      AND status = %s
                      AND processed_pages = %s
                    RETURNING {_COLUMNS}
                    """,
                    (
                        processed_pages,
                        questions_count,
                        status.value,
                        parsed_id,
                        BookStatus.PROCESSING.value,
                        expected_processed_pages,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            return None
        return _row_to_book(row)
