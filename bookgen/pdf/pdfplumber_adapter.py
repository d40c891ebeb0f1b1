import io

import pdfplumber

from bookgen.pdf.base import BasePdfReader
from bookgen.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfReader):
    """Reads PDFs using pdfplumber."""

    def count_pages(self, pdf_bytes: bytes) -> int:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber page count failed: {exc}") from exc

    def extract_text(self, pdf_bytes: bytes, max_pages: int | None = None) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                selected = pdf.pages if max_pages is None else pdf.pages[:max_pages]
                pages = [page.extract_text() or "" for page in selected]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
