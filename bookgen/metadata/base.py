from abc import ABC, abstractmethod

from bookgen.metadata.models import BookMetadata


class BaseMetadataExtractor(ABC):
    """Contract for all metadata extraction adapters."""

    @abstractmethod
    def extract(self, file_path: str) -> BookMetadata:
        """Determine page count and classification of a stored book.

        Args:
            file_path: Storage reference of the book file.

        Returns:
            BookMetadata with a positive total_pages.

        Raises:
            MetadataExtractionError: on any failure.
        """
