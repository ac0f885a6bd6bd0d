#!/usr/bin/env python3
"""
PDF text reading with pdfplumber and a pdftotext fallback.
"""

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import pdfplumber

from .exceptions import DocumentReadError
from .models import Document
from .normalizer import join_pages

logger = logging.getLogger(__name__)

_CID_ARTIFACT = re.compile(r'\(cid:\d+\)')

Pages = List[Tuple[int, str]]


class PDFTextReader:
    """
    Reads page text for batch documents.

    Documents carrying inline ``text`` or ``pages`` are returned as is; otherwise
    the file at ``path`` is read, pdfplumber first and pdftotext if pdfplumber
    yields nothing.
    """

    def __init__(self, max_pages: Optional[int] = None):
        self.max_pages = max_pages

    def __call__(self, document: Document) -> Union[str, Sequence[Tuple[int, str]]]:
        if document.text is not None:
            return document.text
        if document.pages is not None:
            return document.pages
        if not document.path:
            raise DocumentReadError(document.name, "No file provided")
        return self.read_pages(document.path, document.name)

    def read_pages(self, pdf_path: str, name: Optional[str] = None) -> Pages:
        """
        Extract text from each page of a PDF.

        Args:
            pdf_path: Path to the PDF file
            name: Display name used in errors, defaults to the file name

        Returns:
            List of (page_index, page_text) pairs
        """
        path = Path(pdf_path)
        name = name or path.name
        if not path.is_file():
            raise DocumentReadError(name, f"File not found: {pdf_path}")
        if path.suffix.lower() != '.pdf':
            raise DocumentReadError(name, "File must be a PDF")

        pages = self._extract_with_pdfplumber(path, name)
        if not any(text.strip() for _, text in pages):
            fallback = self._extract_with_pdftotext(path)
            if fallback:
                logger.info(f"pdftotext recovered {len(fallback)} characters from {name}")
                pages = [(0, fallback)]

        return pages

    def _extract_with_pdfplumber(self, path: Path, name: str) -> Pages:
        try:
            pdf = pdfplumber.open(str(path))
        except Exception as e:
            raise DocumentReadError(name, f"PDF processing failed: {e}") from e

        pages = []
        with pdf:
            selected = pdf.pages if self.max_pages is None else pdf.pages[:self.max_pages]
            logger.info(f"PDF loaded successfully. Processing {len(selected)} pages of {name}...")
            for i, page in enumerate(selected):
                try:
                    page_text = page.extract_text()
                    if not page_text:
                        page_text = page.extract_text(layout=True, x_tolerance=3, y_tolerance=3)
                except Exception as e:
                    logger.warning(f"Error processing page {i + 1} of {name}: {e}")
                    continue

                pages.append((i, clean_page_text(page_text or "")))
                logger.debug(f"Page {i + 1}/{len(selected)} processed")

        return pages

    def _extract_with_pdftotext(self, path: Path) -> str:
        """Extract text using the pdftotext command-line tool, if installed."""
        if shutil.which('pdftotext') is None:
            logger.debug("pdftotext not available")
            return ""

        command = ['pdftotext', '-layout']
        if self.max_pages is not None:
            command += ['-l', str(self.max_pages)]
        command += [str(path), '-']

        result = subprocess.run(command, capture_output=True, text=True)
        if result.returncode != 0:
            logger.warning(f"pdftotext failed: {result.stderr.strip()}")
            return ""
        return clean_page_text(result.stdout)


def clean_page_text(text: str) -> str:
    """Remove CID encoding artifacts left by fonts without a unicode map."""
    return _CID_ARTIFACT.sub('', text)


def extract_pdf_text(pdf_path: str, max_pages: Optional[int] = None) -> str:
    """
    Convenience function to extract text from a PDF.

    Args:
        pdf_path: Path to the PDF file
        max_pages: Read at most this many pages

    Returns:
        Page texts joined with newlines
    """
    reader = PDFTextReader(max_pages=max_pages)
    text = join_pages(reader.read_pages(pdf_path))
    logger.info(f"Extracted {len(text)} characters from PDF")
    return text
