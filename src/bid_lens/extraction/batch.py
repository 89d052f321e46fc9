"""Bounded concurrent extraction over a batch of emails.

Runs the injected extractor for every email with at most
``max_concurrency`` calls in flight. A failure on one email is recorded on
its result and never aborts the rest of the batch. Clustering only starts
once every result is in.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData
from bid_lens.sellers.inference import SELLER_DOMAIN, infer_seller_from_email

logger = structlog.get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 15

ProgressCallback = Callable[[int, int], None]


class EmailExtractor(Protocol):
    """Entity extraction collaborator (one LLM call per email)."""

    async def extract(self, email: ParsedEmail) -> ExtractedData:
        """Extract purchaser, project signals and due dates from an email."""
        ...


@dataclass
class BatchExtractionResult:
    """Extraction outcome for a single email."""

    email_id: str
    success: bool
    data: ExtractedData | None = None
    error: str | None = None


@dataclass
class BatchExtractionSummary:
    """Counts for a batch run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0


@dataclass
class BatchExtractionOutcome:
    """All per-email results of a batch run, in input order."""

    results: list[BatchExtractionResult] = field(default_factory=list)
    summary: BatchExtractionSummary = field(default_factory=BatchExtractionSummary)

    @property
    def extractions(self) -> list[ExtractedData]:
        """Successful extractions, in input order."""
        return [r.data for r in self.results if r.success and r.data is not None]

    @property
    def failed_email_ids(self) -> list[str]:
        """IDs of emails whose extraction failed."""
        return [r.email_id for r in self.results if not r.success]


class BatchExtractor:
    """Run an extractor over many emails with bounded fan-out."""

    def __init__(
        self,
        extractor: EmailExtractor,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        on_progress: ProgressCallback | None = None,
        seller_domain: str | None = SELLER_DOMAIN,
    ) -> None:
        """Initialize the batch extractor.

        Args:
            extractor: Per-email extraction collaborator.
            max_concurrency: Maximum extractor calls in flight.
            on_progress: Called with (completed, total) after each email.
            seller_domain: Domain used to infer the seller when the extractor
                did not. None disables seller inference.

        Raises:
            ValueError: If max_concurrency is less than 1.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.extractor = extractor
        self.max_concurrency = max_concurrency
        self.on_progress = on_progress
        self.seller_domain = seller_domain

    def _attach_seller(self, email: ParsedEmail, data: ExtractedData) -> ExtractedData:
        if self.seller_domain is None or data.inferred_seller is not None:
            return data
        inferred = infer_seller_from_email(email.to, email.cc, email.bcc, self.seller_domain)
        return data.model_copy(update={"inferred_seller": inferred})

    async def _extract_one(
        self,
        email: ParsedEmail,
        semaphore: asyncio.Semaphore,
    ) -> BatchExtractionResult:
        async with semaphore:
            try:
                data = await self.extractor.extract(email)
            except Exception as e:
                logger.warning("extraction_failed", email_id=email.id, error=str(e))
                return BatchExtractionResult(email_id=email.id, success=False, error=str(e))

        return BatchExtractionResult(
            email_id=email.id,
            success=True,
            data=self._attach_seller(email, data),
        )

    async def run(self, emails: list[ParsedEmail]) -> BatchExtractionOutcome:
        """Extract entities from every email.

        Args:
            emails: Emails to process.

        Returns:
            BatchExtractionOutcome with one result per email, in input order.
        """
        if not emails:
            return BatchExtractionOutcome()

        semaphore = asyncio.Semaphore(self.max_concurrency)
        total = len(emails)
        completed = 0

        async def track(email: ParsedEmail) -> BatchExtractionResult:
            nonlocal completed
            result = await self._extract_one(email, semaphore)
            completed += 1
            if self.on_progress is not None:
                self.on_progress(completed, total)
            return result

        results = list(await asyncio.gather(*(track(email) for email in emails)))

        succeeded = sum(1 for r in results if r.success)
        summary = BatchExtractionSummary(
            total=total,
            succeeded=succeeded,
            failed=total - succeeded,
        )

        logger.info(
            "batch_extraction_complete",
            total=summary.total,
            succeeded=summary.succeeded,
            failed=summary.failed,
        )

        return BatchExtractionOutcome(results=results, summary=summary)
