"""Loading of the classification prompt and the response schema it refers to."""

import json
from dataclasses import dataclass
from pathlib import Path

from bookgen.metadata.exceptions import MetadataExtractionError

DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"
REQUIRED_PLACEHOLDERS = ("{book_text}", "{json_schema}")
MAX_BOOK_TEXT_CHARS = 4000


@dataclass(frozen=True)
class MetadataPrompt:
    """A prompt template together with the schema the AI response must follow."""

    template: str
    schema_text: str
    schema: dict[str, object]

    def render(self, book_text: str) -> str:
        """Fill the template with (at most MAX_BOOK_TEXT_CHARS of) the book text."""
        return self.template.format(
            book_text=book_text[:MAX_BOOK_TEXT_CHARS],
            json_schema=self.schema_text,
        )


def load_prompt_template(path: Path | None = None) -> str:
    """Load the classification prompt template.

    Raises:
        MetadataExtractionError: if the file cannot be read or lacks a placeholder.
    """
    path = path or DEFAULT_PROMPT_DIR / "metadata_prompt.txt"
    try:
        template = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataExtractionError(f"Failed to load prompt template: {exc}") from exc

    missing = [name for name in REQUIRED_PLACEHOLDERS if name not in template]
    if missing:
        raise MetadataExtractionError(
            f"Prompt template {path.name} is missing placeholders: {', '.join(missing)}"
        )
    return template


def load_json_schema(path: Path | None = None) -> str:
    """Load the JSON schema of the expected AI response as text.

    Raises:
        MetadataExtractionError: if the file cannot be read.
    """
    path = path or DEFAULT_PROMPT_DIR / "metadata_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataExtractionError(f"Failed to load JSON schema: {exc}") from exc


def load_metadata_prompt(
    template_path: Path | None = None,
    schema_path: Path | None = None,
) -> MetadataPrompt:
    """Load template and schema, bundled defaults unless paths are given.

    Raises:
        MetadataExtractionError: if either file is unusable.
    """
    schema_text = load_json_schema(schema_path)
    try:
        schema = json.loads(schema_text)
    except json.JSONDecodeError as exc:
        raise MetadataExtractionError(f"JSON schema is not valid JSON: {exc}") from exc
    if not isinstance(schema, dict):
        raise MetadataExtractionError("JSON schema must be an object")
    return MetadataPrompt(
        template=load_prompt_template(template_path),
        schema_text=schema_text,
        schema=schema,
    )
