import re
import uuid
from pathlib import Path

from bookgen.storage.exceptions import FileReadError, FileWriteError

_NON_ASCII = re.compile(r"[^\x00-\x7F]")


def sanitize_file_name(file_name: str) -> str:
    """Drop non-ASCII characters and any directory part from an upload name."""
    return _NON_ASCII.sub("", Path(file_name).name)


def stored_file_name(file_name: str) -> str:
    """Build a collision-free storage name: {uuid4}.{ext}"""
    extension = Path(file_name).suffix.lstrip(".").lower() or "pdf"
    return f"{uuid.uuid4()}.{extension}"


class BookStorage:
    """Flat directory of uploaded book files, addressed by file name."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def list_pdf_files(self) -> list[str]:
        """Return the names of all PDF files in storage, sorted."""
        if not self._root.exists():
            return []
        try:
            return sorted(
                path.name
                for path in self._root.iterdir()
                if path.is_file() and path.suffix.lower() == ".pdf"
            )
        except OSError as exc:
            raise FileReadError(f"Failed to list {self._root}: {exc}") from exc

    def save(self, file_name: str, data: bytes) -> str:
        """Write data under a fresh storage name and return that name.

        Raises:
            FileWriteError: if the file cannot be written.
        """
        file_path = stored_file_name(file_name)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            (self._root / file_path).write_bytes(data)
        except OSError as exc:
            raise FileWriteError(f"Failed to store {file_name}: {exc}") from exc
        return file_path

    def load(self, file_path: str) -> bytes:
        """Read a stored file.

        Raises:
            FileReadError: if the file does not exist or cannot be read.
        """
        path = self._resolve(file_path)
        if not path.is_file():
            raise FileReadError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Failed to read {path}: {exc}") from exc

    def remove(self, file_path: str) -> None:
        self._resolve(file_path).unlink(missing_ok=True)

    def _resolve(self, file_path: str) -> Path:
        path = (self._root / file_path).resolve()
        if path.parent != self._root.resolve():
            raise FileReadError(f"Path escapes storage root: {file_path}")
        return path
