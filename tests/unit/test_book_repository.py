from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest

from bookgen.database.models import BookRecord
from bookgen.database.repositories.book_repository import BookRepository
from bookgen.processing.exceptions import BookNotFoundError
from bookgen.processing.models import BookStatus

BOOK_ID = "550e8400-e29b-41d4-a716-446655440000"


def _make_row(**overrides: object) -> dict:
    row = {
        "id": BOOK_ID,
        "name": "algebra.pdf",
        "file_path": "0d9c6a2e.pdf",
        "grade": 5,
        "subject": "Mathematics",
        "semester": 1,
        "total_pages": 30,
        "processed_pages": 0,
        "questions_count": 0,
        "status": "idle",
        "created_at": datetime(2024, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2024, 1, 1, tzinfo=UTC),
    }
    row.update(overrides)
    return row


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestFindById:
    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_returns_book_when_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row()

        result = BookRepository().find_by_id(BOOK_ID)

        assert isinstance(result, BookRecord)
        assert result.id == BOOK_ID
        assert result.status is BookStatus.IDLE
        assert result.subject == "Mathematics"
        assert result.total_pages == 30

    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_raises_not_found_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(BookNotFoundError, match=f"Book {BOOK_ID} not found"):
            BookRepository().find_by_id(BOOK_ID)

    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_malformed_id_is_not_found_without_query(self, mock_get_conn: MagicMock) -> None:
        with pytest.raises(BookNotFoundError, match="not-a-uuid"):
            BookRepository().find_by_id("not-a-uuid")
        mock_get_conn.assert_not_called()


class TestListBooks:
    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_orders_newest_first(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_make_row(), _make_row(status="processing")]

        books = BookRepository().list_books()

        assert [book.status for book in books] == [BookStatus.IDLE, BookStatus.PROCESSING]
        assert "ORDER BY created_at DESC" in mock_cursor.execute.call_args[0][0]


class TestInsert:
    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_inserts_idle_book_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(total_pages=None)

        book = BookRepository().insert(
            "algebra.pdf", "0d9c6a2e.pdf", grade=5, subject="Mathematics"
        )

        params = mock_cursor.execute.call_args[0][1]
        assert params == ("algebra.pdf", "0d9c6a2e.pdf", 5, "Mathematics", None, "idle")
        mock_conn.commit.assert_called_once()
        assert book.total_pages is None

    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_untracked_skips_conflicting_paths(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.side_effect = [_make_row(file_path="a.pdf"), None]

        inserted = BookRepository().insert_untracked([("a.pdf", "a.pdf"), ("b.pdf", "b.pdf")])

        assert [book.file_path for book in inserted] == ["a.pdf"]
        assert mock_cursor.execute.call_count == 2
        assert "ON CONFLICT (file_path) DO NOTHING" in mock_cursor.execute.call_args[0][0]
        mock_conn.commit.assert_called_once()


class TestTransitionStatus:
    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_returns_updated_book(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(status="processing")

        result = BookRepository().transition_status(
            BOOK_ID, [BookStatus.IDLE, BookStatus.PAUSED], BookStatus.PROCESSING
        )

        assert result is not None
        assert result.status is BookStatus.PROCESSING
        sql, params = mock_cursor.execute.call_args[0]
        assert "status = ANY(%s)" in sql
        assert params[0] == "processing"
        assert params[2] == ["idle", "paused"]
        mock_conn.commit.assert_called_once()

    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_returns_none_when_status_changed(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        result = BookRepository().transition_status(
            BOOK_ID, [BookStatus.PROCESSING], BookStatus.PAUSED
        )

        assert result is None


class TestUpdateMetadata:
    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_keeps_existing_classification(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row()

        BookRepository().update_metadata(BOOK_ID, total_pages=30, grade=7)

        sql = mock_cursor.execute.call_args[0][0]
        assert "grade = COALESCE(grade, %s)" in sql
        assert "subject = COALESCE(subject, %s)" in sql

    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_raises_not_found_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(BookNotFoundError):
            BookRepository().update_metadata(BOOK_ID, total_pages=30)


class TestUpdateProgress:
    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_guards_on_status_and_counter(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(
            status="processing", processed_pages=7, questions_count=20
        )

        result = BookRepository().update_progress(
            BOOK_ID,
            expected_processed_pages=4,
            processed_pages=7,
            questions_count=20,
            status=BookStatus.PROCESSING,
        )

        assert result is not None
        assert result.processed_pages == 7
        params = mock_cursor.execute.call_args[0][1]
        assert params[4:] == ("processing", 4)
        mock_conn.commit.assert_called_once()

    @patch("bookgen.database.repositories.book_repository.get_connection")
    def test_returns_none_when_guard_fails(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        result = BookRepository().update_progress(
            BOOK_ID,
            expected_processed_pages=4,
            processed_pages=7,
            questions_count=20,
            status=BookStatus.PROCESSING,
        )

        assert result is None
