from dataclasses import dataclass, field

from bookgen.database.models import BookRecord
from bookgen.export.csv_exporter import ExportResult
from bookgen.processing.models import ProgressReport


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a boundary operation. Failures carry a message, never a traceback."""

    success: bool
    message: str
    book: BookRecord | None = None
    books: list[BookRecord] = field(default_factory=list)
    progress: ProgressReport | None = None
    export: ExportResult | None = None
    error_kind: str | None = None
    current_status: str | None = None
