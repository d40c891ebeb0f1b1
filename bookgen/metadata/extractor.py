"""Page counting plus AI-assisted classification of uploaded books."""

import json
from pathlib import Path

from bookgen.logging.logger import Log
from bookgen.metadata.base import BaseMetadataExtractor
from bookgen.metadata.client_base import BaseMetadataClient
from bookgen.metadata.exceptions import MetadataExtractionError
from bookgen.metadata.models import BookMetadata, Classification
from bookgen.metadata.prompt_loader import load_metadata_prompt
from bookgen.metadata.validator import validate_and_build
from bookgen.pdf.base import BasePdfReader
from bookgen.pdf.exceptions import PdfExtractionError
from bookgen.storage.book_storage import BookStorage
from bookgen.storage.exceptions import StorageError


class MetadataExtractor(BaseMetadataExtractor):
    """Counts pages with a PDF reader and asks an AI provider for grade/subject/semester."""

    def __init__(
        self,
        *,
        storage: BookStorage,
        pdf_reader: BasePdfReader,
        client: BaseMetadataClient,
        sample_pages: int = 3,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = "You are an assistant that extracts educational book metadata.",
    ) -> None:
        self._storage = storage
        self._pdf_reader = pdf_reader
        self._client = client
        self._sample_pages = max(1, sample_pages)
        self._system_prompt = system_prompt
        self._prompt = load_metadata_prompt(prompt_template_path, json_schema_path)

    def extract(self, file_path: str) -> BookMetadata:
        try:
            pdf_bytes = self._storage.load(file_path)
            total_pages = self._pdf_reader.count_pages(pdf_bytes)
            sample_text = self._pdf_reader.extract_text(pdf_bytes, self._sample_pages)
        except (StorageError, PdfExtractionError) as exc:
            raise MetadataExtractionError(f"Cannot read {file_path}: {exc}") from exc

        if total_pages <= 0:
            raise MetadataExtractionError(f"{file_path} has no pages")
        Log.info(f"Counted {total_pages} pages in {file_path}")

        classification = self._classify(sample_text)
        Log.info(
            f"Classified {file_path}: grade={classification.grade} "
            f"subject={classification.subject} semester={classification.semester}"
        )
        return BookMetadata(
            total_pages=total_pages,
            grade=classification.grade,
            subject=classification.subject,
            semester=classification.semester,
        )

    def _classify(self, text: str) -> Classification:
        if not text:
            Log.warning("No extractable text, skipping classification")
            return Classification()
        prompt = self._prompt.render(text)
        Log.debug(f"Metadata prompt:\n{prompt}")
        raw_response = self._client.classify(
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._prompt.schema,
        )
        Log.debug(f"AI raw response:\n{raw_response}")
        return validate_and_build(self._parse_json(raw_response))

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise MetadataExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise MetadataExtractionError("JSON response must be an object")
        return parsed
