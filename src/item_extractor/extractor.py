#!/usr/bin/env python3
"""
Item extraction pipeline for a single document's text:
normalize, match, build, validate.
"""

import logging
from typing import List, Optional

from .builder import build_candidate
from .config import ExtractionOptions
from .deduplicator import dedupe
from .models import ExtractedItem, ExtractionResult, ExtractionStats
from .normalizer import normalize_text
from .patterns import PatternMatcher
from .validator import validate

logger = logging.getLogger(__name__)


class ItemExtractor:
    """Extracts validated line items from free-form document text."""

    def __init__(self, options: Optional[ExtractionOptions] = None):
        self.options = options or ExtractionOptions()
        self.matcher = PatternMatcher(
            custom_patterns=self.options.custom_patterns,
            max_matches=self.options.max_matches_per_pattern,
        )

    def extract(self, text: Optional[str]) -> ExtractionResult:
        """
        Run the pipeline over one document's text.

        Candidates that cannot be parsed or fail validation are dropped and
        counted; nothing here raises because of bad candidates.

        Args:
            text: Raw text, possibly spanning several pages

        Returns:
            ExtractionResult with items in match order (not deduplicated)
        """
        stats = ExtractionStats()
        clean_text = normalize_text(text)
        if not clean_text:
            logger.warning("No text content to parse")
            return ExtractionResult(items=[], stats=stats)

        logger.info(f"Processing text: {len(clean_text)} characters")

        items: List[ExtractedItem] = []
        for raw in self.matcher.find_candidates(clean_text):
            stats.candidates += 1
            stats.matches_per_pattern[raw.pattern_id] = stats.matches_per_pattern.get(raw.pattern_id, 0) + 1

            candidate = build_candidate(raw)
            if candidate is None:
                stats.parse_failures += 1
                continue

            if not validate(candidate, self.options.strict_mode, self.options.limits):
                stats.rejected += 1
                logger.debug(f"Rejected candidate {candidate.stock_code!r} from pattern {raw.pattern_id + 1}")
                continue

            item = candidate.to_item()
            items.append(item)
            stats.accepted += 1
            logger.debug(f"Found item: {item.stock_code} - {item.description[:30]}")

        logger.info(
            f"Extraction completed: {stats.accepted} items from {stats.candidates} candidates "
            f"({stats.parse_failures} unparseable, {stats.rejected} rejected)"
        )
        return ExtractionResult(items=items, stats=stats)

    def extract_items(self, text: Optional[str], unique: bool = True) -> List[ExtractedItem]:
        """Extract items from one text, deduplicated with the configured key by default."""
        items = self.extract(text).items
        if not unique:
            return items
        return dedupe(items, self.options.compare_fields, self.options.case_sensitive)


def parse_text_for_items(text: Optional[str], options: Optional[ExtractionOptions] = None) -> List[ExtractedItem]:
    """
    Convenience function to extract unique items from text.

    Args:
        text: Raw document text
        options: Extraction options, defaults when omitted

    Returns:
        Unique validated items
    """
    return ItemExtractor(options).extract_items(text)
