import time

from bookgen.config.settings import Settings
from bookgen.database.repositories.book_repository import BookRepository
from bookgen.logging.logger import Log
from bookgen.processing.models import BookStatus
from bookgen.service.book_service import BookService


class ProgressPoller:
    """Dashboard-style poll loop: sleep -> list processing books -> check each.

    Progress only moves when this loop (or another client) checks it; there
    is no background processing.
    """

    def __init__(
        self,
        service: BookService,
        book_repo: BookRepository,
        settings: Settings,
    ) -> None:
        self._service = service
        self._book_repo = book_repo
        self._settings = settings

    def run(self, max_polls: int | None = None) -> int:
        """Poll until interrupted, or until ``max_polls`` rounds have run.

        Returns the number of completed poll rounds.
        """
        Log.info("Progress poller started")
        polls = 0
        try:
            while max_polls is None or polls < max_polls:
                self.poll_once()
                polls += 1
                if max_polls is not None and polls >= max_polls:
                    break
                time.sleep(self._settings.progress_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Progress poller shutting down gracefully")
        return polls

    def poll_once(self) -> int:
        """Check every processing book once. Returns how many were checked."""
        book_ids = self._processing_book_ids()
        if not book_ids:
            Log.debug("No books processing")
            return 0
        for book_id in book_ids:
            result = self._service.check_progress(book_id)
            if not result.success:
                Log.warning(result.message)
        return len(book_ids)

    def _processing_book_ids(self) -> list[str]:
        """List processing books. Gracefully handle DB errors."""
        try:
            return [book.id for book in self._book_repo.list_by_status(BookStatus.PROCESSING)]
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return []
