"""End-to-end bid list pipeline over an already-fetched batch of emails.

Stages:
1. Extraction (optional, bounded concurrency) for every email
2. Clustering of emails into projects
3. Bid construction, cluster merge and date grouping
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import structlog

from bid_lens.bids.grouping import create_grouped_bid_list
from bid_lens.clustering.ai import LLMCompleter, cluster_emails
from bid_lens.clustering.models import EmailSignal, build_email_signal
from bid_lens.clustering.rule_based import cluster_emails_rule_based
from bid_lens.extraction.batch import (
    DEFAULT_MAX_CONCURRENCY,
    BatchExtractionOutcome,
    BatchExtractor,
    EmailExtractor,
    ProgressCallback,
)
from bid_lens.schemas.bids import GroupedBidList
from bid_lens.schemas.clustering import ClusteringConfig, ClusteringResult
from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData

logger = structlog.get_logger(__name__)


@dataclass
class PipelineResult:
    """Everything produced by one pipeline run."""

    clustering: ClusteringResult
    bid_list: GroupedBidList
    extraction: BatchExtractionOutcome | None = None
    warnings: list[str] = field(default_factory=list)


def build_signals(
    emails: list[ParsedEmail],
    extractions: list[ExtractedData],
) -> list[EmailSignal]:
    """Pair each extraction with its email and build clustering signals."""
    email_map = {email.id: email for email in emails}
    return [
        build_email_signal(email_map.get(extraction.email_id), extraction)
        for extraction in extractions
    ]


def cluster_batch(
    emails: list[ParsedEmail],
    extractions: list[ExtractedData],
    config: ClusteringConfig | None = None,
) -> ClusteringResult:
    """Cluster a batch with the rule-based strategy."""
    signals = build_signals(emails, extractions)
    return cluster_emails_rule_based(signals, config or ClusteringConfig())


def build_bid_list(
    emails: list[ParsedEmail],
    extractions: list[ExtractedData],
    config: ClusteringConfig | None = None,
    now: datetime | None = None,
    merge: bool = True,
) -> PipelineResult:
    """Cluster a fully extracted batch and build its grouped bid list.

    Args:
        emails: Fetched emails.
        extractions: One extraction per email.
        config: Clustering configuration (default: built-in defaults).
        now: Reference instant for date groups.
        merge: When False, clusters are computed but bids are not merged.

    Returns:
        PipelineResult with clustering and bid list.
    """
    clustering = cluster_batch(emails, extractions, config)
    bid_list = create_grouped_bid_list(
        extractions,
        emails,
        clustering.clusters if merge else None,
        now,
    )
    return PipelineResult(clustering=clustering, bid_list=bid_list)


async def run_pipeline(
    emails: list[ParsedEmail],
    extractor: EmailExtractor,
    config: ClusteringConfig | None = None,
    completer: LLMCompleter | None = None,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    on_progress: ProgressCallback | None = None,
    now: datetime | None = None,
) -> PipelineResult:
    """Extract, cluster and group a batch of emails.

    Every extraction finishes before clustering starts. Emails whose
    extraction failed are left out of clustering and the bid list and are
    reported in ``warnings``.

    Args:
        emails: Fetched emails.
        extractor: Per-email extraction collaborator.
        config: Clustering configuration.
        completer: LLM collaborator for AI clustering, used only when
            ``config.use_ai`` is set.
        max_concurrency: Maximum extraction calls in flight.
        on_progress: Extraction progress callback (completed, total).
        now: Reference instant for date groups.

    Returns:
        PipelineResult including the extraction outcome.
    """
    config = config or ClusteringConfig()

    batch = BatchExtractor(extractor, max_concurrency=max_concurrency, on_progress=on_progress)
    outcome = await batch.run(emails)
    extractions = outcome.extractions

    warnings = [
        f"Extraction failed for {result.email_id}: {result.error}"
        for result in outcome.results
        if not result.success
    ]

    clustering = await cluster_emails(build_signals(emails, extractions), config, completer)
    bid_list = create_grouped_bid_list(extractions, emails, clustering.clusters, now)

    logger.info(
        "pipeline_complete",
        emails=len(emails),
        extractions=len(extractions),
        clusters=clustering.summary.total_clusters,
        bids=bid_list.summary.total_bids,
    )

    return PipelineResult(
        clustering=clustering,
        bid_list=bid_list,
        extraction=outcome,
        warnings=warnings,
    )
