from bookgen.config.settings import Settings
from bookgen.pdf.base import BasePdfReader
from bookgen.pdf.pdfplumber_adapter import PdfPlumberAdapter
from bookgen.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfReaderFactory:
    """Creates the correct PDF reader based on settings."""

    ADAPTERS: dict[str, type[BasePdfReader]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfReader:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
