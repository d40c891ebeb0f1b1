from abc import ABC, abstractmethod


class BasePdfReader(ABC):
    """Contract for all PDF reading adapters."""

    @abstractmethod
    def count_pages(self, pdf_bytes: bytes) -> int:
        """Return the number of pages in the PDF.

        Raises:
            PdfExtractionError: if the PDF cannot be opened.
        """

    @abstractmethod
    def extract_text(self, pdf_bytes: bytes, max_pages: int | None = None) -> str:
        """Extract plain text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.
            max_pages: Read only the first N pages when set.

        Returns:
            Extracted text as a single normalized string.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
