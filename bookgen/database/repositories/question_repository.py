import uuid
from typing import Any

from psycopg.rows import dict_row

from bookgen.database.connection import get_connection
from bookgen.database.models import QuestionRecord


def _row_to_question(row: dict[str, Any]) -> QuestionRecord:
    options = row["options"] or []
    return QuestionRecord(
        id=str(row["id"]),
        book_id=str(row["book_id"]),
        page_number=row["page_number"],
        question_text=row["question_text"],
        options=[str(option) for option in options],
        correct_answer=row["correct_answer"],
        created_at=row["created_at"],
    )


class QuestionRepository:
    """Read access to generated questions.

    Rows are written by the external question generator.
    """

    def list_by_book(self, book_id: str) -> list[QuestionRecord]:
        """Return the questions of a book ordered by page number."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, book_id, page_number, question_text,
                           options, correct_answer, created_at
                    FROM questions
                    WHERE book_id = %s
                    ORDER BY page_number, created_at
                    """,
                    (uuid.UUID(str(book_id)),),
                )
                rows = cur.fetchall()
        return [_row_to_question(row) for row in rows]
