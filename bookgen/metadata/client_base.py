from abc import ABC, abstractmethod


class BaseMetadataClient(ABC):
    """Contract for AI providers that classify a book from a text sample.

    Model choice and sampling settings belong to the client; callers only
    supply prompts and the response schema.
    """

    @abstractmethod
    def classify(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        """Return the raw JSON text produced by the provider.

        Raises:
            MetadataNetworkError: if the provider cannot be reached or rejects the call.
            MetadataExtractionError: if the provider returns no usable content.
        """
