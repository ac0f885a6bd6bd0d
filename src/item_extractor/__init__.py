"""
Item Extractor

Extracts stock code, description, quantity and unit price rows from PDF text,
deduplicated across documents.
"""

__version__ = "1.0.0"

from .batch import BatchCoordinator, process_batch
from .config import ExtractionOptions, ValidationLimits
from .deduplicator import dedupe
from .exceptions import (
    DocumentReadError,
    EmptyBatchError,
    ItemExtractorError,
    UnsupportedExportFormat,
)
from .exporter import export_items, items_from_json, write_excel
from .extractor import ItemExtractor, parse_text_for_items
from .models import BatchResult, Document, DocumentStatus, ExtractedItem
from .normalizer import normalize_text
from .validator import validate

__all__ = [
    "BatchCoordinator",
    "process_batch",
    "ExtractionOptions",
    "ValidationLimits",
    "dedupe",
    "DocumentReadError",
    "EmptyBatchError",
    "ItemExtractorError",
    "UnsupportedExportFormat",
    "export_items",
    "items_from_json",
    "write_excel",
    "ItemExtractor",
    "parse_text_for_items",
    "BatchResult",
    "Document",
    "DocumentStatus",
    "ExtractedItem",
    "normalize_text",
    "validate",
]
