from bookgen.config.settings import Settings
from bookgen.metadata.base import BaseMetadataExtractor
from bookgen.metadata.client_base import BaseMetadataClient
from bookgen.metadata.example_client_adapter import ExampleClientAdapter
from bookgen.metadata.extractor import MetadataExtractor
from bookgen.metadata.openai_client_adapter import OpenAIClientAdapter
from bookgen.pdf.base import BasePdfReader
from bookgen.storage.book_storage import BookStorage


class MetadataExtractorFactory:
    """Creates the configured metadata extractor."""

    PROVIDERS = ("example", "openai", "openai_compatible")

    @classmethod
    def create(
        cls,
        settings: Settings,
        storage: BookStorage,
        pdf_reader: BasePdfReader,
    ) -> BaseMetadataExtractor:
        """Create a configured extractor from application settings."""
        provider = settings.metadata_provider.lower()
        return MetadataExtractor(
            storage=storage,
            pdf_reader=pdf_reader,
            client=cls._build_client(provider, settings),
            sample_pages=settings.metadata_sample_pages,
        )

    @classmethod
    def _build_client(cls, provider: str, settings: Settings) -> BaseMetadataClient:
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "openai":
            return OpenAIClientAdapter(
                api_key=settings.metadata_openai_api_key,
                model=settings.metadata_openai_model_name,
                timeout_seconds=settings.metadata_openai_timeout_seconds,
                temperature=settings.metadata_openai_temperature,
            )
        if provider == "openai_compatible":
            url = settings.metadata_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "metadata_openai_compatible_base_url is required for "
                    "metadata_provider=openai_compatible"
                )
            return OpenAIClientAdapter(
                api_key=settings.metadata_openai_compatible_api_key,
                model=settings.metadata_openai_compatible_model_name,
                timeout_seconds=settings.metadata_openai_compatible_timeout_seconds,
                base_url=url,
            )
        raise ValueError(
            f"Unknown metadata provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
