"""Tests for the bounded batch extractor."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from bid_lens.extraction.batch import BatchExtractor
from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData

EmailFactory = Callable[..., ParsedEmail]
ExtractionFactory = Callable[..., ExtractedData]


class FakeExtractor:
    """Extractor that records concurrency and fails for chosen emails."""

    def __init__(
        self,
        make_extraction: ExtractionFactory,
        fail_ids: set[str] | None = None,
    ) -> None:
        self.make_extraction = make_extraction
        self.fail_ids = fail_ids or set()
        self.in_flight = 0
        self.max_in_flight = 0

    async def extract(self, email: ParsedEmail) -> ExtractedData:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            if email.id in self.fail_ids:
                raise RuntimeError(f"provider timeout for {email.id}")
            return self.make_extraction(email.id)
        finally:
            self.in_flight -= 1


class TestBatchExtractor:
    """Tests for BatchExtractor class."""

    @pytest.mark.asyncio
    async def test_results_in_input_order(
        self,
        make_email: EmailFactory,
        make_extraction: ExtractionFactory,
    ) -> None:
        """Test one result per email, in input order."""
        emails = [make_email(f"m{i}") for i in range(5)]
        batch = BatchExtractor(FakeExtractor(make_extraction))

        outcome = await batch.run(emails)

        assert [r.email_id for r in outcome.results] == [f"m{i}" for i in range(5)]
        assert outcome.summary.total == 5
        assert outcome.summary.succeeded == 5
        assert [e.email_id for e in outcome.extractions] == [f"m{i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_bounded_concurrency(
        self,
        make_email: EmailFactory,
        make_extraction: ExtractionFactory,
    ) -> None:
        """Test no more than max_concurrency calls run at once."""
        extractor = FakeExtractor(make_extraction)
        batch = BatchExtractor(extractor, max_concurrency=3)

        await batch.run([make_email(f"m{i}") for i in range(10)])

        assert extractor.max_in_flight == 3

    @pytest.mark.asyncio
    async def test_failures_isolated(
        self,
        make_email: EmailFactory,
        make_extraction: ExtractionFactory,
    ) -> None:
        """Test one failure does not abort the batch."""
        emails = [make_email(f"m{i}") for i in range(4)]
        batch = BatchExtractor(FakeExtractor(make_extraction, fail_ids={"m2"}))

        outcome = await batch.run(emails)

        assert outcome.summary.succeeded == 3
        assert outcome.summary.failed == 1
        assert outcome.failed_email_ids == ["m2"]
        failed = outcome.results[2]
        assert failed.success is False
        assert failed.data is None
        assert failed.error == "provider timeout for m2"
        assert "m2" not in [e.email_id for e in outcome.extractions]

    @pytest.mark.asyncio
    async def test_progress_callback(
        self,
        make_email: EmailFactory,
        make_extraction: ExtractionFactory,
    ) -> None:
        """Test progress is reported after every email."""
        calls: list[tuple[int, int]] = []
        batch = BatchExtractor(
            FakeExtractor(make_extraction, fail_ids={"m0"}),
            on_progress=lambda done, total: calls.append((done, total)),
        )

        await batch.run([make_email(f"m{i}") for i in range(3)])

        assert calls == [(1, 3), (2, 3), (3, 3)]

    @pytest.mark.asyncio
    async def test_attaches_inferred_seller(
        self,
        make_email: EmailFactory,
        make_extraction: ExtractionFactory,
    ) -> None:
        """Test the seller is inferred from recipients when missing."""
        batch = BatchExtractor(FakeExtractor(make_extraction))

        outcome = await batch.run([make_email("m1")])

        seller = outcome.extractions[0].inferred_seller
        assert seller is not None
        assert seller.seller is not None
        assert seller.seller.name == "John Doe"
        assert seller.confidence == 0.95

    @pytest.mark.asyncio
    async def test_seller_inference_disabled(
        self,
        make_email: EmailFactory,
        make_extraction: ExtractionFactory,
    ) -> None:
        """Test seller inference can be turned off."""
        batch = BatchExtractor(FakeExtractor(make_extraction), seller_domain=None)

        outcome = await batch.run([make_email("m1")])

        assert outcome.extractions[0].inferred_seller is None

    @pytest.mark.asyncio
    async def test_empty_batch(self, make_extraction: ExtractionFactory) -> None:
        """Test empty input."""
        outcome = await BatchExtractor(FakeExtractor(make_extraction)).run([])

        assert outcome.results == []
        assert outcome.summary.total == 0

    def test_invalid_concurrency(self, make_extraction: ExtractionFactory) -> None:
        """Test concurrency must be positive."""
        with pytest.raises(ValueError, match="max_concurrency"):
            BatchExtractor(FakeExtractor(make_extraction), max_concurrency=0)
