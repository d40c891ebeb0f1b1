from dataclasses import dataclass
from enum import StrEnum


class BookStatus(StrEnum):
    IDLE = "idle"
    PAUSED = "paused"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"
    CANCELED = "canceled"


class BookCommand(StrEnum):
    START = "start"
    PAUSE = "pause"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Transition:
    """Allowed source statuses for a command and the status it writes."""

    allowed_from: frozenset[BookStatus]
    target: BookStatus


TRANSITIONS: dict[BookCommand, Transition] = {
    BookCommand.START: Transition(
        allowed_from=frozenset({BookStatus.IDLE, BookStatus.PAUSED}),
        target=BookStatus.PROCESSING,
    ),
    BookCommand.PAUSE: Transition(
        allowed_from=frozenset({BookStatus.PROCESSING}),
        target=BookStatus.PAUSED,
    ),
    BookCommand.CANCEL: Transition(
        allowed_from=frozenset({BookStatus.PROCESSING}),
        target=BookStatus.CANCELED,
    ),
}


@dataclass(frozen=True)
class ProgressReport:
    """Progress of a book as shown to pollers.

    The counters come from a random simulation, not from real content
    analysis; ``simulated`` is always True for this engine.
    """

    processed_pages: int
    total_pages: int
    percentage: int
    simulated: bool = True


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted to progress listeners after each persisted advance."""

    book_id: str
    processed_pages: int
    questions_count: int
    status: BookStatus
