#!/usr/bin/env python3
"""
Batch extraction across multiple documents.

Documents are read and parsed on a thread pool of ``concurrency`` workers, each
under its own timeout. A document that fails is recorded and the batch moves on.
Results are concatenated in submission order and deduplicated once at the end.
"""

import asyncio
import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .config import ExtractionOptions
from .deduplicator import dedupe
from .exceptions import DocumentReadError, EmptyBatchError
from .extractor import ItemExtractor
from .models import (
    BatchResult,
    Document,
    DocumentResult,
    DocumentStatus,
    ExtractedItem,
    ExtractionStats,
)
from .normalizer import join_pages
from .pdf_extractor import PDFTextReader

logger = logging.getLogger(__name__)

Reader = Callable[[Document], Union[str, Sequence[Tuple[int, str]]]]
ProgressSink = Callable[[int, int, str], None]
DocumentInput = Union[Document, str, Path]


class BatchCoordinator:
    """Runs the extraction pipeline over a batch of documents."""

    def __init__(
        self,
        options: Optional[ExtractionOptions] = None,
        reader: Optional[Reader] = None,
        progress: Optional[ProgressSink] = None,
    ):
        """
        Args:
            options: Extraction options, defaults when omitted
            reader: Callable producing a document's text or (page_index, page_text) pairs
            progress: Called with (completed, total, message) after every document
        """
        self.options = options or ExtractionOptions()
        self.reader = reader or PDFTextReader(max_pages=self.options.max_pages)
        self.progress = progress
        self.extractor = ItemExtractor(self.options)

    def run(self, documents: Iterable[DocumentInput]) -> BatchResult:
        """Process a batch synchronously. Must not be called from a running event loop."""
        return asyncio.run(self.run_async(documents))

    async def run_async(self, documents: Iterable[DocumentInput]) -> BatchResult:
        """
        Process a batch of documents.

        Args:
            documents: Documents or PDF paths, in submission order

        Returns:
            BatchResult with deduplicated items and per-document outcomes

        Raises:
            EmptyBatchError: if no documents were given
        """
        docs = [as_document(doc) for doc in documents]
        if not docs:
            raise EmptyBatchError("No files provided for batch processing")

        total = len(docs)
        results = [DocumentResult(name=doc.name) for doc in docs]
        completed = 0

        logger.info(f"Starting batch of {total} document(s), concurrency {self.options.concurrency}")

        # The pool size caps concurrent reads. A timed-out read keeps its worker
        # until the reader returns, so abandoned reads still count toward the cap.
        executor = ThreadPoolExecutor(
            max_workers=self.options.concurrency,
            thread_name_prefix="item-extractor",
        )

        async def process_and_report(doc: Document, result: DocumentResult):
            nonlocal completed
            await self._process_document(doc, result, executor)
            completed += 1
            if result.status == DocumentStatus.FAILED:
                message = f"Failed to process {doc.name}: {result.error}"
            else:
                message = f"Processed {doc.name} ({len(result.items)} item(s))"
            self._report(completed, total, message)

        try:
            await asyncio.gather(*(process_and_report(doc, result) for doc, result in zip(docs, results)))
        finally:
            # Every document has an outcome here; do not wait on abandoned reads
            executor.shutdown(wait=False, cancel_futures=True)

        # submission order, not completion order
        all_items = [item for result in results for item in result.items]
        unique_items = dedupe(all_items, self.options.compare_fields, self.options.case_sensitive)

        batch = BatchResult(items=unique_items, documents=results)
        logger.info(
            f"Batch finished: {batch.successful_files}/{total} documents succeeded, "
            f"{batch.total_items_found} items found, {batch.unique_items_found} unique"
        )
        return batch

    async def _process_document(self, doc: Document, result: DocumentResult, executor: ThreadPoolExecutor):
        loop = asyncio.get_running_loop()
        started = asyncio.Event()

        def work():
            loop.call_soon_threadsafe(started.set)
            return self._read_and_extract(doc)

        future = loop.run_in_executor(executor, work)

        # the timeout runs from when a worker picks the document up, not while it is queued
        await started.wait()
        result.status = DocumentStatus.IN_PROGRESS
        try:
            items, stats, warning = await asyncio.wait_for(future, timeout=self.options.timeout_seconds)
        except asyncio.TimeoutError:
            self._fail(result, f"Timed out after {self.options.timeout_ms} ms")
            return
        except DocumentReadError as e:
            self._fail(result, e.reason)
            return
        except Exception as e:
            self._fail(result, f"PDF processing failed: {e}")
            return

        result.items = items
        result.stats = stats
        result.warning = warning
        result.status = DocumentStatus.COMPLETED

    def _read_and_extract(self, doc: Document) -> Tuple[List[ExtractedItem], ExtractionStats, Optional[str]]:
        text = join_pages(self.reader(doc), self.options.max_pages)
        if not text.strip():
            logger.warning(f"No text content found in {doc.name}")
            return [], ExtractionStats(), "No text content found in PDF"

        extraction = self.extractor.extract(text)
        items = [dataclasses.replace(item, source_file=doc.name) for item in extraction.items]
        logger.info(f"{doc.name}: {len(items)} items found")
        return items, extraction.stats, None

    def _fail(self, result: DocumentResult, reason: str):
        logger.error(f"Failed to process {result.name}: {reason}")
        result.status = DocumentStatus.FAILED
        result.error = reason

    def _report(self, completed: int, total: int, message: str):
        if self.progress is not None:
            self.progress(completed, total, message)


def as_document(doc: DocumentInput) -> Document:
    if isinstance(doc, Document):
        return doc
    path = Path(doc)
    return Document(name=path.name, path=str(path))


def process_batch(
    documents: Iterable[DocumentInput],
    options: Optional[ExtractionOptions] = None,
    reader: Optional[Reader] = None,
    progress: Optional[ProgressSink] = None,
) -> BatchResult:
    """
    Convenience function to extract and deduplicate items from several documents.

    Args:
        documents: Documents or PDF paths
        options: Extraction options
        reader: Text reader, pdfplumber-based by default
        progress: Progress sink called with (completed, total, message)

    Returns:
        BatchResult
    """
    return BatchCoordinator(options, reader, progress).run(documents)
