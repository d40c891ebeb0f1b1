class MetadataExtractionError(Exception):
    """Raised when book metadata cannot be determined."""


class MetadataValidationError(MetadataExtractionError):
    """Raised when the AI response is not a usable metadata object."""


class MetadataNetworkError(MetadataExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
