"""Extraction boundary: validation of collaborator output and batch runs."""

from __future__ import annotations

from bid_lens.extraction.batch import (
    BatchExtractionOutcome,
    BatchExtractionResult,
    BatchExtractionSummary,
    BatchExtractor,
    EmailExtractor,
)
from bid_lens.extraction.validation import (
    ValidationResult,
    coerce_extracted_data,
    format_confidence,
    get_confidence_level,
    get_extraction_summary,
    has_extraction_data,
    validate_extracted_data,
)

__all__ = [
    "BatchExtractionOutcome",
    "BatchExtractionResult",
    "BatchExtractionSummary",
    "BatchExtractor",
    "EmailExtractor",
    "ValidationResult",
    "coerce_extracted_data",
    "format_confidence",
    "get_confidence_level",
    "get_extraction_summary",
    "has_extraction_data",
    "validate_extracted_data",
]
