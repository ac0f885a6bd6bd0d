"""
Configuration for extraction, validation, deduplication and batch runs.
"""

from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .deduplicator import DEFAULT_COMPARE_FIELDS, resolve_field_name
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ValidationLimits:
    """Thresholds used by the validator. The strict bounds are configurable defaults."""
    min_stock_code_length: int = 2
    min_description_length: int = 3
    strict_min_description_length: int = 5
    strict_max_description_length: int = 200
    strict_max_quantity: int = 10000
    strict_max_unit_price: Decimal = Decimal("100000")


DEFAULT_LIMITS = ValidationLimits()


# camelCase names accepted in option files
_OPTION_ALIASES = {
    "strictMode": "strict_mode",
    "maxPages": "max_pages",
    "timeoutMs": "timeout_ms",
    "concurrency": "concurrency",
    "compareFields": "compare_fields",
    "caseSensitive": "case_sensitive",
    "customPatterns": "custom_patterns",
    "maxMatchesPerPattern": "max_matches_per_pattern",
}


@dataclass
class ExtractionOptions:
    """Options recognized by the extraction pipeline and the batch coordinator."""
    strict_mode: bool = False
    max_pages: Optional[int] = None
    timeout_ms: int = 30000
    concurrency: int = 3
    compare_fields: Tuple[str, ...] = DEFAULT_COMPARE_FIELDS
    case_sensitive: bool = False
    custom_patterns: Sequence[Any] = ()
    max_matches_per_pattern: int = 1000
    limits: ValidationLimits = DEFAULT_LIMITS

    def __post_init__(self):
        if self.max_pages is not None and self.max_pages < 1:
            raise ConfigurationError(f"max_pages must be at least 1, got {self.max_pages}")
        if self.timeout_ms <= 0:
            raise ConfigurationError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.concurrency < 1:
            raise ConfigurationError(f"concurrency must be at least 1, got {self.concurrency}")
        if self.max_matches_per_pattern < 1:
            raise ConfigurationError(
                f"max_matches_per_pattern must be at least 1, got {self.max_matches_per_pattern}"
            )
        if isinstance(self.compare_fields, str):
            raise ConfigurationError("compare_fields must be a collection of field names")
        if not self.compare_fields:
            raise ConfigurationError("compare_fields must name at least one field")
        try:
            self.compare_fields = tuple(resolve_field_name(name) for name in self.compare_fields)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        self.custom_patterns = tuple(self.custom_patterns)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExtractionOptions":
        """
        Build options from a dictionary, e.g. a parsed JSON options file.

        Keys may use either the Python names (``strict_mode``) or the camelCase
        names (``strictMode``). ``limits`` may be given as a nested dictionary.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown option: {key}")
            kwargs[name] = value

        limits = kwargs.get("limits")
        if isinstance(limits, Mapping):
            kwargs["limits"] = _limits_from_mapping(limits)
        return cls(**kwargs)


def _limits_from_mapping(data: Mapping[str, Any]) -> ValidationLimits:
    known = {f.name for f in fields(ValidationLimits)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown validation limits: {', '.join(sorted(unknown))}")
    values = dict(data)
    if "strict_max_unit_price" in values:
        values["strict_max_unit_price"] = Decimal(str(values["strict_max_unit_price"]))
    return ValidationLimits(**values)
