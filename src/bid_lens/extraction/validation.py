"""Validation and helpers for extraction collaborator output."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import ValidationError

from bid_lens.core.exceptions import ExtractionValidationError
from bid_lens.schemas.extraction import AIProviderName, ExtractedData

ConfidenceLevel = Literal["high", "medium", "low"]

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.5


@dataclass
class ValidationResult:
    """Outcome of validating raw extraction output.

    Exactly one of ``data`` (on success) or ``errors`` (on failure) is
    populated.
    """

    success: bool
    data: ExtractedData | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)

    def unwrap(self) -> ExtractedData:
        """Return the validated data or raise.

        Raises:
            ExtractionValidationError: If validation failed.
        """
        if self.data is None:
            raise ExtractionValidationError(
                f"Extraction failed validation with {len(self.errors)} error(s)",
                errors=self.errors,
            )
        return self.data


def validate_extracted_data(data: Any) -> ValidationResult:
    """Validate raw extraction output without raising.

    Args:
        data: Parsed JSON from the extraction collaborator, camelCase or
            snake_case keys.

    Returns:
        ValidationResult.
    """
    try:
        return ValidationResult(success=True, data=ExtractedData.model_validate(data))
    except ValidationError as e:
        return ValidationResult(success=False, errors=[dict(err) for err in e.errors()])


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def coerce_extracted_data(
    data: Any,
    email_id: str,
    provider: AIProviderName,
) -> ExtractedData:
    """Fill defaults for a partial extraction and validate it.

    Missing confidence becomes 0, missing lists become empty and missing
    entities become None. The email ID, provider and extraction time are
    always taken from the arguments.

    Args:
        data: Partial extraction output.
        email_id: Email the extraction belongs to.
        provider: Provider that produced the output.

    Returns:
        Validated ExtractedData.

    Raises:
        ExtractionValidationError: If the filled-in data is still invalid.
    """
    partial: dict[str, Any] = data if isinstance(data, dict) else {}

    confidence = partial.get("confidence")
    due_dates = _pick(partial, "bidDueDates", "bid_due_dates")
    notes = _pick(partial, "extractionNotes", "extraction_notes")

    candidate = {
        "email_id": email_id,
        "extracted_at": datetime.now(UTC),
        "provider": provider,
        "confidence": confidence if isinstance(confidence, int | float) else 0.0,
        "purchaser": partial.get("purchaser"),
        "project_signals": _pick(partial, "projectSignals", "project_signals"),
        "bid_due_dates": due_dates if isinstance(due_dates, list) else [],
        "extraction_notes": notes if isinstance(notes, list) else [],
        "inferred_seller": _pick(partial, "inferredSeller", "inferred_seller"),
    }

    try:
        return ExtractedData.model_validate(candidate)
    except ValidationError as e:
        raise ExtractionValidationError(
            f"Could not coerce extraction for email {email_id}",
            email_id=email_id,
            errors=[dict(err) for err in e.errors()],
        ) from e


def has_extraction_data(data: ExtractedData) -> bool:
    """Check whether extraction found anything meaningful."""
    return (
        data.purchaser is not None
        or data.project_signals is not None
        or len(data.bid_due_dates) > 0
    )


def get_extraction_summary(data: ExtractedData) -> str:
    """One-line summary of what was extracted."""
    parts: list[str] = []

    if data.purchaser:
        parts.append(f"Purchaser: {data.purchaser.company_name}")
    if data.project_signals and data.project_signals.project_name:
        parts.append(f"Project: {data.project_signals.project_name}")
    if data.bid_due_dates:
        parts.append(f"{len(data.bid_due_dates)} bid date(s)")

    if not parts:
        return "No entities extracted"
    return " • ".join(parts)


def format_confidence(confidence: float) -> str:
    """Format a 0-1 confidence as a whole percentage."""
    # Half-up rounding, not banker's rounding
    return f"{int(confidence * 100 + 0.5)}%"


def get_confidence_level(confidence: float) -> ConfidenceLevel:
    """Bucket a confidence score into high, medium or low."""
    if confidence >= HIGH_CONFIDENCE:
        return "high"
    if confidence >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"
