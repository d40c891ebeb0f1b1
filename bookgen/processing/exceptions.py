from typing import ClassVar


class BookError(Exception):
    """Base exception for all book-processing errors."""

    kind: ClassVar[str] = "error"


class BookNotFoundError(BookError):
    """Raised when a book cannot be found in the database."""

    kind = "not_found"


class InvalidTransitionError(BookError):
    """Raised when a command is issued from a status that does not allow it."""

    kind = "invalid_transition"

    def __init__(self, message: str, current_status: str) -> None:
        super().__init__(message)
        self.current_status = current_status


class DependencyError(BookError):
    """Raised when metadata extraction or another external call fails."""

    kind = "dependency_failure"


class StoreError(BookError):
    """Raised when the record store read/write itself fails."""

    kind = "store_failure"


class InvalidInputError(BookError):
    """Raised when an upload or command carries unusable input."""

    kind = "invalid_input"
