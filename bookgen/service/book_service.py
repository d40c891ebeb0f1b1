import random
from collections.abc import Callable
from pathlib import Path

from bookgen.config.settings import Settings
from bookgen.database.repositories.book_repository import BookRepository
from bookgen.database.repositories.question_repository import QuestionRepository
from bookgen.export.csv_exporter import build_export, write_csv
from bookgen.logging.logger import Log
from bookgen.metadata.factory import MetadataExtractorFactory
from bookgen.pdf.factory import PdfReaderFactory
from bookgen.processing.exceptions import BookError, InvalidInputError
from bookgen.processing.models import BookCommand
from bookgen.processing.progress import ProgressSimulator
from bookgen.processing.transitions import StatusTransitionHandler
from bookgen.service.models import OperationResult
from bookgen.storage.book_storage import BookStorage, sanitize_file_name
from bookgen.storage.exceptions import StorageError

_COMMAND_MESSAGES = {
    BookCommand.START: "Book processing started",
    BookCommand.PAUSE: "Book processing paused",
    BookCommand.CANCEL: "Book processing canceled",
}


class BookService:
    """Boundary operations of the dashboard backend.

    Every public method returns an OperationResult; no exception escapes.
    Nothing is retried automatically.
    """

    def __init__(
        self,
        *,
        book_repo: BookRepository,
        question_repo: QuestionRepository,
        storage: BookStorage,
        transitions: StatusTransitionHandler,
        simulator: ProgressSimulator,
        export_base_url: str,
        exports_root: Path,
    ) -> None:
        self._book_repo = book_repo
        self._question_repo = question_repo
        self._storage = storage
        self._transitions = transitions
        self._simulator = simulator
        self._export_base_url = export_base_url
        self._exports_root = exports_root

    @property
    def simulator(self) -> ProgressSimulator:
        return self._simulator

    def scan(self) -> OperationResult:
        """Create idle records for PDFs in storage that are not tracked yet."""

        def operation() -> OperationResult:
            tracked = self._book_repo.list_file_paths()
            new_files = [
                name for name in self._storage.list_pdf_files() if name not in tracked
            ]
            Log.info(f"Found {len(new_files)} new PDF files to add")
            added = self._book_repo.insert_untracked((name, name) for name in new_files)
            return OperationResult(
                success=True,
                message=(
                    f"Scan complete. Found and added {len(added)} new PDF files. "
                    "Start a book to begin processing."
                ),
                books=added,
            )

        return self._run("scan books", operation)

    def list_books(self) -> OperationResult:
        def operation() -> OperationResult:
            books = self._book_repo.list_books()
            return OperationResult(
                success=True, message=f"{len(books)} books", books=books
            )

        return self._run("list books", operation)

    def get_book(self, book_id: str) -> OperationResult:
        def operation() -> OperationResult:
            book = self._book_repo.find_by_id(book_id)
            return OperationResult(success=True, message="Book found", book=book)

        return self._run(f"get book {book_id}", operation)

    def upload_book(
        self,
        file_name: str,
        data: bytes,
        grade: int | None = None,
        subject: str | None = None,
        semester: int | None = None,
    ) -> OperationResult:
        """Store the file and create an idle record for it.

        The stored file is removed again if the record cannot be created.
        """

        def operation() -> OperationResult:
            name = sanitize_file_name(file_name)
            if not data:
                raise InvalidInputError("No file uploaded")
            if not name.lower().endswith(".pdf"):
                raise InvalidInputError(f"Only PDF files are accepted, got '{file_name}'")

            file_path = self._storage.save(name, data)
            Log.info(f"Uploaded file {name} to {file_path}")
            try:
                book = self._book_repo.insert(
                    name, file_path, grade=grade, subject=subject, semester=semester
                )
            except Exception:
                self._storage.remove(file_path)
                raise
            return OperationResult(
                success=True, message="Book uploaded successfully", book=book
            )

        return self._run(f"upload {file_name}", operation)

    def start_processing(self, book_id: str) -> OperationResult:
        return self._command(book_id, BookCommand.START)

    def pause_processing(self, book_id: str) -> OperationResult:
        return self._command(book_id, BookCommand.PAUSE)

    def cancel_processing(self, book_id: str) -> OperationResult:
        return self._command(book_id, BookCommand.CANCEL)

    def check_progress(self, book_id: str) -> OperationResult:
        def operation() -> OperationResult:
            book, report = self._simulator.check(book_id)
            return OperationResult(
                success=True,
                message="Book progress checked",
                book=book,
                progress=report,
            )

        return self._run(f"check progress of book {book_id}", operation)

    def export_questions(self, book_id: str, write: bool = False) -> OperationResult:
        """Collect a book's questions and the CSV file name/URL they are delivered under.

        With ``write`` the CSV is also rendered into the exports directory.
        """

        def operation() -> OperationResult:
            book = self._book_repo.find_by_id(book_id)
            questions = self._question_repo.list_by_book(book.id)
            export = build_export(book, questions, self._export_base_url)
            message = f"Exported {len(questions)} questions"
            if write:
                path = write_csv(export, self._exports_root)
                message = f"{message} to {path}"
            Log.info(f"Book {book_id}: {message}")
            return OperationResult(success=True, message=message, book=book, export=export)

        return self._run(f"export questions of book {book_id}", operation)

    def _command(self, book_id: str, command: BookCommand) -> OperationResult:
        def operation() -> OperationResult:
            book = self._transitions.apply(book_id, command)
            return OperationResult(
                success=True, message=_COMMAND_MESSAGES[command], book=book
            )

        return self._run(f"{command.value} book {book_id}", operation)

    @staticmethod
    def _run(action: str, operation: Callable[[], OperationResult]) -> OperationResult:
        try:
            return operation()
        except BookError as exc:
            Log.error(f"Failed to {action}: {exc}")
            return OperationResult(
                success=False,
                message=f"Failed to {action}: {exc}",
                error_kind=exc.kind,
                current_status=getattr(exc, "current_status", None),
            )
        except StorageError as exc:
            Log.error(f"Failed to {action}: {exc}")
            return OperationResult(
                success=False,
                message=f"Failed to {action}: {exc}",
                error_kind="dependency_failure",
            )
        except Exception as exc:
            Log.error(f"Unexpected error during {action}: {exc}")
            return OperationResult(
                success=False,
                message=f"An unexpected error occurred: {exc}",
                error_kind="unexpected",
            )


def build_book_service(
    settings: Settings,
    books_root: Path | None = None,
    rng: random.Random | None = None,
) -> BookService:
    """Build a BookService with all required adapters."""
    storage = BookStorage(books_root if books_root is not None else Path(settings.books_root))
    book_repo = BookRepository()
    pdf_reader = PdfReaderFactory.create(settings)
    metadata_extractor = MetadataExtractorFactory.create(settings, storage, pdf_reader)
    if rng is None:
        rng = random.Random(settings.progress_seed)
    return BookService(
        book_repo=book_repo,
        question_repo=QuestionRepository(),
        storage=storage,
        transitions=StatusTransitionHandler(book_repo, metadata_extractor),
        simulator=ProgressSimulator(book_repo, rng=rng),
        export_base_url=settings.export_base_url,
        exports_root=Path(settings.exports_root),
    )
