#!/usr/bin/env python3
"""
Pattern matching over normalized document text.

Every pattern yields four captures: stock code, description, quantity and unit
price. Patterns are applied one after another, each over the whole text, so
matches from different patterns may cover the same span. Reconciling those is
left to deduplication.
"""

import itertools
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_MATCHES = 1000


@dataclass(frozen=True)
class PatternDefinition:
    """A named regular expression producing (code, description, quantity, price)."""
    name: str
    regex: re.Pattern


@dataclass(frozen=True)
class RawCandidate:
    """Captures of a single match, tagged with the index of the pattern that produced it."""
    pattern_id: int
    groups: Tuple[Any, ...]
    raw: str


DEFAULT_PATTERNS: Tuple[PatternDefinition, ...] = (
    # 1 ABC-100 Widget Assembly 5 $12.50 yuan
    PatternDefinition(
        "serial_row",
        re.compile(r'\d+\s+([0-9A-Z\-]+)\s+([\s\S]+?)\s+(\d+)\s+\$?(\d+\.\d{2})\s*yuan', re.IGNORECASE),
    ),
    # AB-12 Hex bolt set qty: 4 price: $3.10
    PatternDefinition(
        "key_value",
        re.compile(r'(\w+[-_]\w+)\s+([\w\s,.-]+?)\s+qty:\s*(\d+)\s+price:\s*\$?(\d+\.?\d*)', re.IGNORECASE),
    ),
    # XY-9 "Power cable, 2m" 10 @ $4.25
    PatternDefinition(
        "quoted_description",
        re.compile(r'([A-Z0-9-]+)\s+"([^"]+)"\s+(\d+)\s+@\s*\$?(\d+\.\d{2})', re.IGNORECASE),
    ),
)


def make_definition(pattern: Any, index: int) -> PatternDefinition:
    """
    Turn a user supplied pattern into a PatternDefinition.

    Strings are compiled case-insensitively; compiled patterns are used as given.
    """
    if isinstance(pattern, PatternDefinition):
        return pattern
    if isinstance(pattern, str):
        try:
            return PatternDefinition(f"custom_{index + 1}", re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            raise ConfigurationError(f"Invalid custom pattern {pattern!r}: {e}") from e
    if isinstance(pattern, re.Pattern):
        return PatternDefinition(f"custom_{index + 1}", pattern)
    raise ConfigurationError(f"Unsupported pattern type: {type(pattern).__name__}")


class PatternMatcher:
    """Applies the built-in patterns followed by any custom ones."""

    def __init__(self, custom_patterns: Iterable[Any] = (), max_matches: int = DEFAULT_MAX_MATCHES):
        if max_matches < 1:
            raise ConfigurationError(f"max_matches must be at least 1, got {max_matches}")
        self.patterns: List[PatternDefinition] = list(DEFAULT_PATTERNS)
        self.patterns.extend(make_definition(p, i) for i, p in enumerate(custom_patterns))
        self.max_matches = max_matches

    def find_candidates(self, text: str) -> List[RawCandidate]:
        """
        Run every pattern over the text.

        Args:
            text: Normalized document text

        Returns:
            Candidates in pattern order, then left-to-right within a pattern
        """
        candidates = []
        if not text:
            return candidates

        for pattern_id, definition in enumerate(self.patterns):
            found = self.match_pattern(pattern_id, definition, text)
            logger.debug(f"Pattern {pattern_id + 1} ({definition.name}) found {len(found)} potential matches")
            candidates.extend(found)

        return candidates

    def match_pattern(self, pattern_id: int, definition: PatternDefinition, text: str) -> List[RawCandidate]:
        # one extra match tells us the cap was reached
        matches = list(itertools.islice(definition.regex.finditer(text), self.max_matches + 1))
        if len(matches) > self.max_matches:
            logger.warning(
                f"Pattern {pattern_id + 1} ({definition.name}) hit the limit of "
                f"{self.max_matches} matches; remaining text ignored for this pattern"
            )
            matches = matches[:self.max_matches]

        return [
            RawCandidate(pattern_id=pattern_id, groups=match.groups(), raw=match.group(0))
            for match in matches
        ]
