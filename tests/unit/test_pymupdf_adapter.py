import pytest

from bookgen.pdf.exceptions import PdfExtractionError
from bookgen.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPyMuPdfAdapter:
    def test_counts_pages(self, multi_page_pdf_bytes: bytes) -> None:
        assert PyMuPdfAdapter().count_pages(multi_page_pdf_bytes) == 3

    def test_extracts_first_pages_only(self, multi_page_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract_text(multi_page_pdf_bytes, max_pages=1)
        assert "Page one content" in result
        assert "Page two content" not in result

    def test_result_is_stripped(self, sample_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract_text(sample_pdf_bytes)
        assert result == result.strip()

    def test_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfExtractionError):
            PyMuPdfAdapter().count_pages(b"not a pdf")
