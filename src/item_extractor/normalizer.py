"""
Text normalization applied before pattern matching.
"""

import re
from typing import Optional, Sequence, Tuple, Union

_WHITESPACE = re.compile(r'\s+')

PageInput = Union[str, Sequence[Tuple[int, str]], None]


def normalize_text(text: Optional[str]) -> str:
    """Collapse all whitespace runs, newlines included, to one space and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(' ', text).strip()


def join_pages(pages: PageInput, max_pages: Optional[int] = None) -> str:
    """
    Concatenate document text.

    Args:
        pages: Full text, or ``(page_index, page_text)`` pairs in any order
        max_pages: Keep only the first ``max_pages`` pages

    Returns:
        Page texts joined with newline separators
    """
    if pages is None:
        return ""
    if isinstance(pages, str):
        return pages

    ordered = sorted(pages, key=lambda page: page[0])
    if max_pages is not None:
        ordered = ordered[:max_pages]
    return "\n".join(page_text or "" for _, page_text in ordered)
