import csv
import io
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from bookgen.database.models import BookRecord, QuestionRecord

_MIN_OPTION_COLUMNS = 4


@dataclass(frozen=True)
class ExportResult:
    """Questions of a book plus where their CSV rendering is delivered."""

    book: BookRecord
    filename: str
    url: str
    questions: list[QuestionRecord] = field(default_factory=list)


def export_filename(book_name: str) -> str:
    """Build the CSV name: {name up to the first dot}_questions.csv"""
    stem = PurePosixPath(book_name).name.split(".")[0] or "book"
    return f"{stem}_questions.csv"


def build_export(
    book: BookRecord, questions: list[QuestionRecord], base_url: str
) -> ExportResult:
    return ExportResult(
        book=book,
        filename=export_filename(book.name),
        url=f"{base_url.rstrip('/')}/{book.id}",
        questions=questions,
    )


def render_csv(questions: list[QuestionRecord]) -> str:
    """Render questions as CSV, one row per question, options in separate columns."""
    option_columns = max(
        [_MIN_OPTION_COLUMNS, *(len(question.options) for question in questions)]
    )
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(
        [
            "page_number",
            "question",
            *(f"option_{index}" for index in range(1, option_columns + 1)),
            "correct_answer",
        ]
    )
    for question in questions:
        options = question.options + [""] * (option_columns - len(question.options))
        writer.writerow(
            [
                question.page_number,
                question.question_text,
                *options,
                question.correct_answer or "",
            ]
        )
    return buffer.getvalue()


def write_csv(export: ExportResult, directory: Path) -> Path:
    """Write the rendered CSV of an export into a directory and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export.filename
    path.write_text(render_csv(export.questions), encoding="utf-8")
    return path
