"""Grouped bid list construction.

Top-level entry point of the bid pipeline: builds per-email bids, merges
them by cluster, and buckets the result by date group.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog

from bid_lens.bids.builder import create_bid_from_extraction, merge_bids_by_cluster
from bid_lens.schemas.bids import (
    BidGroup,
    BidItem,
    BidListSummary,
    DateGroup,
    GroupedBidList,
)
from bid_lens.schemas.clustering import ProjectCluster
from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData

logger = structlog.get_logger(__name__)


def _due_sort_key(bid: BidItem) -> tuple[bool, datetime]:
    # Bids without a due date sort after every dated bid
    return (bid.earliest_due_date is None, bid.earliest_due_date or datetime.min)


def group_bids_by_date(bids: list[BidItem]) -> list[BidGroup]:
    """Bucket bids by their date group.

    Only non-empty groups are returned, in date-group priority order. Bids
    within a group are sorted by earliest due date, undated bids last.

    Args:
        bids: Final (merged) bids.

    Returns:
        Date groups in display order.
    """
    buckets: dict[DateGroup, list[BidItem]] = {}
    for bid in bids:
        buckets.setdefault(bid.date_group, []).append(bid)

    groups: list[BidGroup] = []
    for group in sorted(buckets, key=lambda g: g.priority):
        sorted_bids = sorted(buckets[group], key=_due_sort_key)
        groups.append(
            BidGroup(group=group, label=group.label, bids=sorted_bids, count=len(sorted_bids))
        )
    return groups


def build_summary(
    bids: list[BidItem],
    groups: list[BidGroup],
    total_emails: int,
) -> BidListSummary:
    """Compute the counters shown above the bid list.

    Args:
        bids: Final (merged) bids.
        groups: Date groups built from ``bids``.
        total_emails: Number of distinct input emails.

    Returns:
        BidListSummary.
    """
    counts = {group.group: group.count for group in groups}

    return BidListSummary(
        total_bids=len(bids),
        total_emails=total_emails,
        overdue_count=counts.get(DateGroup.OVERDUE, 0),
        today_count=counts.get(DateGroup.TODAY, 0),
        upcoming_count=sum(
            1 for bid in bids if bid.date_group not in (DateGroup.OVERDUE, DateGroup.NO_DATE)
        ),
    )


def create_grouped_bid_list(
    extractions: list[ExtractedData],
    emails: list[ParsedEmail],
    clusters: list[ProjectCluster] | None = None,
    now: datetime | None = None,
) -> GroupedBidList:
    """Build the date-grouped bid list for a batch.

    When ``clusters`` is None every bid stays unclustered and the merge step
    is skipped. Extractions whose email is missing from ``emails`` are
    dropped.

    Args:
        extractions: One extraction per email.
        emails: The emails the extractions were produced from.
        clusters: Project clusters covering the emails, if any.
        now: Reference instant for date groups (default: current time).

    Returns:
        GroupedBidList.
    """
    email_map = {email.id: email for email in emails}

    cluster_by_email: dict[str, ProjectCluster] = {}
    for cluster in clusters or []:
        for email_id in cluster.email_ids:
            cluster_by_email[email_id] = cluster

    bids: list[BidItem] = []
    skipped = 0
    for extraction in extractions:
        email = email_map.get(extraction.email_id)
        if email is None:
            skipped += 1
            continue
        bids.append(
            create_bid_from_extraction(
                extraction, email, cluster_by_email.get(extraction.email_id), now
            )
        )

    if skipped:
        logger.debug("extractions_without_email_skipped", count=skipped)

    if clusters is not None:
        bids = merge_bids_by_cluster(bids, now)

    groups = group_bids_by_date(bids)
    summary = build_summary(bids, groups, total_emails=len(email_map))

    logger.debug(
        "grouped_bid_list_built",
        total_bids=summary.total_bids,
        total_groups=len(groups),
    )

    return GroupedBidList(
        groups=groups,
        summary=summary,
        generated_at=datetime.now(UTC),
    )
