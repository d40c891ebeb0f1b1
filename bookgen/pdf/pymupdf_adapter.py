import pymupdf

from bookgen.pdf.base import BasePdfReader
from bookgen.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfReader):
    """Reads PDFs using PyMuPDF."""

    def count_pages(self, pdf_bytes: bytes) -> int:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return int(doc.page_count)
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf page count failed: {exc}") from exc

    def extract_text(self, pdf_bytes: bytes, max_pages: int | None = None) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [
                    page.get_text()
                    for index, page in enumerate(doc)
                    if max_pages is None or index < max_pages
                ]
            return "\n".join(pages).strip()
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
