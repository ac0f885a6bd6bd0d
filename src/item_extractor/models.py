"""
Data models for the item extractor.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ExtractedItem:
    """A validated line item. Only the pipeline creates these, after validation."""
    stock_code: str
    description: str
    quantity: int
    unit_price: Decimal
    source_file: Optional[str] = None
    pattern_id: Optional[int] = None

    def to_dict(self, include_source: bool = True) -> Dict[str, Any]:
        """Export representation with camelCase keys."""
        data = {
            "stockCode": self.stock_code,
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": float(self.unit_price),
        }
        if include_source and self.source_file is not None:
            data["sourceFile"] = self.source_file
        return data


@dataclass
class ItemCandidate:
    """A line item built from a pattern match that has not been validated yet."""
    stock_code: str
    description: str
    quantity: int
    unit_price: Decimal
    pattern_id: Optional[int] = None
    raw_match: str = ""

    def to_item(self) -> ExtractedItem:
        return ExtractedItem(
            stock_code=self.stock_code,
            description=self.description,
            quantity=self.quantity,
            unit_price=self.unit_price,
            pattern_id=self.pattern_id,
        )


@dataclass
class ExtractionStats:
    """Counters collected while extracting items from one text."""
    candidates: int = 0
    parse_failures: int = 0
    rejected: int = 0
    accepted: int = 0
    matches_per_pattern: Dict[int, int] = field(default_factory=dict)


@dataclass
class ExtractionResult:
    """Items found in a single text together with the extraction counters."""
    items: List[ExtractedItem]
    stats: ExtractionStats


class DocumentStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Document:
    """
    A document submitted to a batch.

    ``name`` is used for progress, error reporting and ``source_file`` tagging.
    Text can be supplied inline (``text`` or ``pages`` as ``(page_index, page_text)``
    pairs); otherwise the reader loads it from ``path``.
    """
    name: str
    path: Optional[str] = None
    text: Optional[str] = None
    pages: Optional[List[Tuple[int, str]]] = None


@dataclass
class DocumentResult:
    """Outcome of processing one document in a batch."""
    name: str
    status: DocumentStatus = DocumentStatus.PENDING
    items: List[ExtractedItem] = field(default_factory=list)
    stats: Optional[ExtractionStats] = None
    error: Optional[str] = None
    warning: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == DocumentStatus.COMPLETED


@dataclass
class BatchResult:
    """Deduplicated items of a batch plus per-document outcomes, in submission order."""
    items: List[ExtractedItem]
    documents: List[DocumentResult]

    @property
    def total_files(self) -> int:
        return len(self.documents)

    @property
    def successful_files(self) -> int:
        return sum(1 for doc in self.documents if doc.succeeded)

    @property
    def failed_files(self) -> int:
        return sum(1 for doc in self.documents if doc.status == DocumentStatus.FAILED)

    @property
    def total_items_found(self) -> int:
        return sum(len(doc.items) for doc in self.documents)

    @property
    def unique_items_found(self) -> int:
        return len(self.items)

    @property
    def errors(self) -> List[Dict[str, str]]:
        return [
            {"file": doc.name, "error": doc.error or ""}
            for doc in self.documents
            if doc.status == DocumentStatus.FAILED
        ]

    @property
    def success(self) -> bool:
        return bool(self.items)

    @property
    def status_message(self) -> str:
        if self.items:
            return (
                f"Successfully processed {self.successful_files} PDF file(s) and "
                f"extracted {len(self.items)} unique item(s)."
            )
        return (
            f"Processed {self.successful_files} PDF file(s), but could not find "
            f"any items matching the required format."
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "successfulFiles": self.successful_files,
            "failedFiles": self.failed_files,
            "totalItemsFound": self.total_items_found,
            "uniqueItemsFound": self.unique_items_found,
            "errors": self.errors,
        }
