from dataclasses import dataclass


@dataclass(frozen=True)
class Classification:
    """Grade/subject/semester guessed from the book text."""

    grade: int | None = None
    subject: str | None = None
    semester: int | None = None


@dataclass(frozen=True)
class BookMetadata:
    """Output of metadata extraction. ``total_pages`` is always positive."""

    total_pages: int
    grade: int | None = None
    subject: str | None = None
    semester: int | None = None
