from bookgen.metadata.base import BaseMetadataExtractor
from bookgen.metadata.extractor import MetadataExtractor
from bookgen.metadata.factory import MetadataExtractorFactory

__all__ = ["BaseMetadataExtractor", "MetadataExtractor", "MetadataExtractorFactory"]
