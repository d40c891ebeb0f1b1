from bookgen.database.models import BookRecord
from bookgen.database.repositories.book_repository import BookRepository
from bookgen.logging.logger import Log
from bookgen.metadata.base import BaseMetadataExtractor
from bookgen.metadata.exceptions import MetadataExtractionError
from bookgen.processing.exceptions import DependencyError, InvalidTransitionError
from bookgen.processing.models import TRANSITIONS, BookCommand, BookStatus


class StatusTransitionHandler:
    """Applies start/pause/cancel commands to a book.

    The status write is conditional on the status still being one the
    command allows, so two concurrent commands cannot both succeed.
    """

    def __init__(
        self,
        book_repo: BookRepository,
        metadata_extractor: BaseMetadataExtractor,
    ) -> None:
        self._book_repo = book_repo
        self._metadata_extractor = metadata_extractor

    def apply(self, book_id: str, command: BookCommand) -> BookRecord:
        """Validate the current status, run the transition and return the updated book.

        Raises:
            BookNotFoundError: if the book does not exist.
            InvalidTransitionError: if the current status does not allow the command.
            DependencyError: if metadata extraction fails during start.
        """
        transition = TRANSITIONS[command]
        book = self._book_repo.find_by_id(book_id)
        if book.status not in transition.allowed_from:
            raise self._invalid(book_id, command, book.status)

        if command is BookCommand.START and book.total_pages is None:
            self._extract_metadata(book)

        updated = self._book_repo.transition_status(
            book_id, transition.allowed_from, transition.target
        )
        if updated is None:
            current = self._book_repo.find_by_id(book_id)
            raise self._invalid(book_id, command, current.status)

        Log.info(f"Book {book_id}: {command.value} -> {updated.status.value}")
        return updated

    def start(self, book_id: str) -> BookRecord:
        return self.apply(book_id, BookCommand.START)

    def pause(self, book_id: str) -> BookRecord:
        return self.apply(book_id, BookCommand.PAUSE)

    def cancel(self, book_id: str) -> BookRecord:
        return self.apply(book_id, BookCommand.CANCEL)

    def _extract_metadata(self, book: BookRecord) -> BookRecord:
        Log.info(f"Book {book.id} has no page count, extracting metadata")
        try:
            metadata = self._metadata_extractor.extract(book.file_path)
        except MetadataExtractionError as exc:
            Log.error(f"Metadata extraction failed for book {book.id}: {exc}")
            raise DependencyError(f"Metadata extraction failed: {exc}") from exc

        return self._book_repo.update_metadata(
            book.id,
            total_pages=metadata.total_pages,
            grade=metadata.grade,
            subject=metadata.subject,
            semester=metadata.semester,
        )

    @staticmethod
    def _invalid(
        book_id: str, command: BookCommand, current: BookStatus
    ) -> InvalidTransitionError:
        Log.warning(f"Book {book_id}: cannot {command.value} while {current.value}")
        return InvalidTransitionError(
            f"Cannot {command.value} book {book_id} while it is {current.value}",
            current_status=current.value,
        )
