"""
Exception types for the item extractor.
"""


class ItemExtractorError(Exception):
    """Base class for all errors raised by the item extractor."""


class ConfigurationError(ItemExtractorError, ValueError):
    """Raised when extraction options are invalid."""


class DocumentReadError(ItemExtractorError):
    """The PDF text reader could not produce text for a document."""

    def __init__(self, document_name: str, reason: str):
        self.document_name = document_name
        self.reason = reason
        super().__init__(f"{document_name}: {reason}")


class CandidateParseError(ItemExtractorError, ValueError):
    """A pattern match carried a quantity or price that is not numeric."""


class EmptyBatchError(ItemExtractorError, ValueError):
    """Raised when a batch is started without any documents."""


class UnsupportedExportFormat(ItemExtractorError, ValueError):
    """Raised when an export format is requested that the exporter does not implement."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"Unsupported format: {fmt}")
