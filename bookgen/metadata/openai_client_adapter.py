import httpx
import openai

from bookgen.metadata.client_base import BaseMetadataClient
from bookgen.metadata.exceptions import MetadataExtractionError, MetadataNetworkError

SCHEMA_NAME = "book_metadata"
MAX_TEMPERATURE = 0.2


class OpenAIClientAdapter(BaseMetadataClient):
    """Classifies books through an OpenAI-compatible chat completions endpoint.

    Works against api.openai.com and any server speaking the same protocol
    (``base_url``). Temperature is clamped to [0, 0.2].
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        temperature: float = 0.0,
        base_url: str | None = None,
    ) -> None:
        self._model = model
        self._temperature = max(0.0, min(MAX_TEMPERATURE, temperature))
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def temperature(self) -> float:
        return self._temperature

    def classify(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": SCHEMA_NAME,
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise MetadataNetworkError(f"AI provider network error: {exc}") from exc
        except openai.RateLimitError as exc:
            raise MetadataNetworkError(f"AI provider rate limit reached: {exc}") from exc
        except openai.APIError as exc:
            raise MetadataNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise MetadataExtractionError("AI returned no choices")
        choice = response.choices[0]
        refusal = getattr(choice.message, "refusal", None)
        if refusal:
            raise MetadataExtractionError(f"AI refused to classify the book: {refusal}")
        if choice.finish_reason == "length":
            raise MetadataExtractionError("AI response was truncated")
        if not choice.message.content:
            raise MetadataExtractionError("AI returned empty response")
        return choice.message.content
