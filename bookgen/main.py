import argparse
from collections.abc import Sequence
from pathlib import Path

from bookgen.config.settings import Settings
from bookgen.database.connection import apply_schema, close_pool, init_pool
from bookgen.database.models import BookRecord
from bookgen.database.repositories.book_repository import BookRepository
from bookgen.logging.logger import Log
from bookgen.processing.models import ProgressEvent
from bookgen.service.book_service import BookService, build_book_service
from bookgen.service.models import OperationResult
from bookgen.worker.poller import ProgressPoller

SIMULATION_NOTICE = (
    "Processing is simulated: page and question counts advance by random "
    "amounts on each progress check and do not reflect book content."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookgen",
        description="Upload books and track simulated question generation.",
        epilog=SIMULATION_NOTICE,
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="create the books and questions tables")
    commands.add_parser("scan", help="track PDFs found in book storage")
    commands.add_parser("list", help="list books, newest first")

    show = commands.add_parser("show", help="show one book")
    show.add_argument("book_id")

    upload = commands.add_parser("upload", help="upload a PDF book")
    upload.add_argument("path", type=Path)
    upload.add_argument("--grade", type=int)
    upload.add_argument("--subject")
    upload.add_argument("--semester", type=int, choices=[1, 2])

    for name, help_text in (
        ("start", "start or resume processing"),
        ("pause", "pause processing"),
        ("cancel", "cancel processing"),
        ("progress", "check (and advance) progress"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("book_id")

    export = commands.add_parser("export", help="export generated questions")
    export.add_argument("book_id")
    export.add_argument("--write", action="store_true", help="write the CSV file")

    watch = commands.add_parser("watch", help="poll progress of processing books")
    watch.add_argument("--max-polls", type=int)
    return parser


def format_book(book: BookRecord) -> str:
    pages = f"{book.processed_pages}/{book.total_pages if book.total_pages else '?'}"
    classification = " ".join(
        part
        for part in (
            f"grade {book.grade}" if book.grade is not None else "",
            book.subject or "",
            f"semester {book.semester}" if book.semester is not None else "",
        )
        if part
    )
    return (
        f"{book.id}  {book.status.value:<10}  {pages:>9} pages  "
        f"{book.questions_count:>5} questions  {book.name}"
        + (f"  ({classification})" if classification else "")
    )


def print_result(result: OperationResult) -> int:
    print(result.message)
    if result.book is not None:
        print(format_book(result.book))
    for book in result.books:
        print(format_book(book))
    if result.progress is not None:
        print(
            f"Progress: {result.progress.percentage}% "
            f"({result.progress.processed_pages}/{result.progress.total_pages} pages, simulated)"
        )
    if result.export is not None:
        print(f"CSV: {result.export.filename}  {result.export.url}")
    return 0 if result.success else 1


def print_event(event: ProgressEvent) -> None:
    print(
        f"{event.book_id}  {event.status.value:<10}  "
        f"{event.processed_pages} pages  {event.questions_count} questions"
    )


def dispatch(args: argparse.Namespace, service: BookService, settings: Settings) -> int:
    if args.command == "init-db":
        apply_schema()
        print("Schema applied")
        return 0
    if args.command == "scan":
        return print_result(service.scan())
    if args.command == "list":
        return print_result(service.list_books())
    if args.command == "show":
        return print_result(service.get_book(args.book_id))
    if args.command == "upload":
        path: Path = args.path
        try:
            data = path.read_bytes()
        except OSError as exc:
            print(f"Cannot read {path}: {exc}")
            return 1
        return print_result(
            service.upload_book(
                path.name,
                data,
                grade=args.grade,
                subject=args.subject,
                semester=args.semester,
            )
        )
    if args.command == "start":
        return print_result(service.start_processing(args.book_id))
    if args.command == "pause":
        return print_result(service.pause_processing(args.book_id))
    if args.command == "cancel":
        return print_result(service.cancel_processing(args.book_id))
    if args.command == "progress":
        return print_result(service.check_progress(args.book_id))
    if args.command == "export":
        return print_result(service.export_questions(args.book_id, write=args.write))
    if args.command == "watch":
        print(SIMULATION_NOTICE)
        service.simulator.add_listener(print_event)
        ProgressPoller(service, BookRepository(), settings).run(max_polls=args.max_polls)
        return 0
    raise ValueError(f"Unknown command '{args.command}'")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse args -> initialize pool -> build service -> run command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        service = build_book_service(settings)
        return dispatch(args, service, settings)
    finally:
        close_pool()


if __name__ == "__main__":
    raise SystemExit(main())
