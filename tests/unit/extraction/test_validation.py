"""Tests for extraction validation helpers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from bid_lens.core.exceptions import ExtractionValidationError
from bid_lens.extraction.validation import (
    coerce_extracted_data,
    format_confidence,
    get_confidence_level,
    get_extraction_summary,
    has_extraction_data,
    validate_extracted_data,
)
from bid_lens.schemas.extraction import ExtractedData

ExtractionFactory = Callable[..., ExtractedData]
DueFactory = Callable[..., dict[str, Any]]


class TestValidateExtractedData:
    """Tests for validate_extracted_data function."""

    def test_valid(self, make_extraction: ExtractionFactory) -> None:
        """Test valid data passes."""
        raw = make_extraction().model_dump(mode="json", by_alias=True)

        result = validate_extracted_data(raw)

        assert result.success is True
        assert result.data is not None
        assert result.errors == []
        assert result.unwrap() is result.data

    def test_invalid(self) -> None:
        """Test invalid data returns errors instead of raising."""
        result = validate_extracted_data({"emailId": "m1", "confidence": 3})

        assert result.success is False
        assert result.data is None
        assert result.errors

    def test_unwrap_raises(self) -> None:
        """Test unwrap raises on failure."""
        result = validate_extracted_data({})

        with pytest.raises(ExtractionValidationError) as exc_info:
            result.unwrap()

        assert exc_info.value.errors == result.errors


class TestCoerceExtractedData:
    """Tests for coerce_extracted_data function."""

    def test_fills_defaults(self) -> None:
        """Test missing fields get defaults."""
        data = coerce_extracted_data({}, "m1", "google")

        assert data.email_id == "m1"
        assert data.provider == "google"
        assert data.confidence == 0.0
        assert data.purchaser is None
        assert data.bid_due_dates == []
        assert data.extraction_notes == []

    def test_keeps_partial_values(self, make_due: DueFactory) -> None:
        """Test supplied values survive coercion."""
        data = coerce_extracted_data(
            {
                "emailId": "ignored",
                "confidence": 0.7,
                "purchaser": {"companyName": "Bay Mechanical", "confidence": 0.9},
                "bidDueDates": [make_due("2025-01-20")],
                "extractionNotes": "not a list",
            },
            "m1",
            "openai",
        )

        assert data.email_id == "m1"
        assert data.confidence == 0.7
        assert data.purchaser is not None
        assert data.bid_due_dates[0].date == "2025-01-20"
        assert data.extraction_notes == []

    def test_non_dict_input(self) -> None:
        """Test non-object output is treated as empty."""
        assert coerce_extracted_data(None, "m1", "anthropic").email_id == "m1"

    def test_invalid_nested_raises(self) -> None:
        """Test unrecoverable nested data raises with the email ID."""
        with pytest.raises(ExtractionValidationError) as exc_info:
            coerce_extracted_data({"purchaser": {"companyName": ""}}, "m1", "google")

        assert exc_info.value.email_id == "m1"


class TestSummaryHelpers:
    """Tests for extraction summary helpers."""

    def test_has_extraction_data(self, make_extraction: ExtractionFactory) -> None:
        """Test detection of meaningful data."""
        assert has_extraction_data(make_extraction())
        assert not has_extraction_data(make_extraction(company=None, with_signals=False))

    def test_summary(self, make_extraction: ExtractionFactory, make_due: DueFactory) -> None:
        """Test summary lists purchaser, project and date count."""
        extraction = make_extraction(due_dates=[make_due("2025-01-20"), make_due("2025-01-21")])

        assert get_extraction_summary(extraction) == (
            "Purchaser: Bay Mechanical • Project: Byron WWTP • 2 bid date(s)"
        )

    def test_summary_empty(self, make_extraction: ExtractionFactory) -> None:
        """Test summary when nothing was found."""
        extraction = make_extraction(company=None, with_signals=False)

        assert get_extraction_summary(extraction) == "No entities extracted"

    @pytest.mark.parametrize(
        ("confidence", "expected"),
        [(0.0, "0%"), (0.856, "86%"), (0.125, "13%"), (1.0, "100%")],
    )
    def test_format_confidence(self, confidence: float, expected: str) -> None:
        """Test percentage formatting rounds half up."""
        assert format_confidence(confidence) == expected

    @pytest.mark.parametrize(
        ("confidence", "expected"),
        [(0.95, "high"), (0.8, "high"), (0.79, "medium"), (0.5, "medium"), (0.49, "low")],
    )
    def test_confidence_level(self, confidence: float, expected: str) -> None:
        """Test confidence buckets."""
        assert get_confidence_level(confidence) == expected
