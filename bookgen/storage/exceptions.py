class StorageError(Exception):
    """Base exception for book file storage errors."""


class FileReadError(StorageError):
    """Raised when a stored book file cannot be read."""


class FileWriteError(StorageError):
    """Raised when a book file cannot be written to storage."""
