"""Bid construction and cluster merging.

Turns one extraction per email into BidItems, then collapses BidItems that
share a project cluster into a single project-centric record with every
purchaser that asked for a quote.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

import structlog

from bid_lens.bids.date_groups import get_date_group, parse_due_date
from bid_lens.schemas.bids import BidItem, BidStatus, Purchaser
from bid_lens.schemas.clustering import ProjectCluster
from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _first_non_null(items: list[BidItem], getter: Callable[[BidItem], T | None]) -> T | None:
    for item in items:
        value = getter(item)
        if value is not None:
            return value
    return None


def create_purchaser_from_extraction(
    extraction: ExtractedData,
    now: datetime | None = None,
) -> Purchaser | None:
    """Build the purchaser for one email, if one was identified.

    The due date is the first extracted bid due date. Later entries are
    ignored even when they are earlier or more confident.

    Args:
        extraction: Extraction output for the email.
        now: Reference instant for the date group.

    Returns:
        Purchaser, or None when no purchaser identity was extracted.
    """
    identity = extraction.purchaser
    if identity is None or not identity.company_name:
        return None

    first_due = extraction.bid_due_dates[0] if extraction.bid_due_dates else None
    due_date = parse_due_date(first_due.date) if first_due else None
    due_time = first_due.time if first_due else None

    return Purchaser(
        company_name=identity.company_name,
        contact_name=identity.contact_name,
        contact_email=identity.contact_email,
        contact_phone=identity.contact_phone,
        due_date=due_date,
        due_time=due_time,
        email_id=extraction.email_id,
        source=identity.source or "inferred",
        date_group=get_date_group(due_date, now),
    )


def find_earliest_due(purchasers: list[Purchaser]) -> tuple[datetime | None, str | None]:
    """Return the earliest due date and the due time of the purchaser holding it.

    When several purchasers share the earliest date, the first one wins.
    """
    earliest: Purchaser | None = None
    for purchaser in purchasers:
        if purchaser.due_date is None:
            continue
        if earliest is None or purchaser.due_date < earliest.due_date:  # type: ignore[operator]
            earliest = purchaser

    if earliest is None:
        return None, None
    return earliest.due_date, earliest.due_time


def dedupe_purchasers(purchasers: list[Purchaser]) -> list[Purchaser]:
    """Drop purchasers whose company already appeared.

    Companies are compared case and whitespace insensitively. The first
    occurrence is kept whole; later duplicates are discarded even when they
    carry extra contact detail.
    """
    seen: set[str] = set()
    unique: list[Purchaser] = []
    for purchaser in purchasers:
        key = purchaser.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(purchaser)
    return unique


def create_bid_from_extraction(
    extraction: ExtractedData,
    email: ParsedEmail,
    cluster: ProjectCluster | None = None,
    now: datetime | None = None,
) -> BidItem:
    """Create a single-email BidItem.

    Project fields prefer the cluster's canonical values and fall back to
    the email's own extraction per field. Empty strings count as missing.

    Args:
        extraction: Extraction output for the email.
        email: The email itself.
        cluster: Cluster the email belongs to, if any.
        now: Reference instant for date groups.

    Returns:
        BidItem keyed on the email ID.
    """
    signals = extraction.project_signals
    project = cluster.project if cluster else None

    def pick(cluster_value: str | None, email_value: str | None) -> str | None:
        return cluster_value or email_value or None

    purchaser = create_purchaser_from_extraction(extraction, now)
    purchasers = [purchaser] if purchaser else []
    earliest_date, earliest_time = find_earliest_due(purchasers)

    seller = extraction.inferred_seller.seller if extraction.inferred_seller else None

    return BidItem(
        id=extraction.email_id,
        project_name=pick(
            project.name if project else None,
            signals.project_name if signals else None,
        ),
        project_address=pick(
            project.address if project else None,
            signals.project_address if signals else None,
        ),
        general_contractor=pick(
            project.general_contractor if project else None,
            signals.general_contractor if signals else None,
        ),
        engineer=pick(
            project.engineer if project else None,
            signals.engineer if signals else None,
        ),
        architect=pick(
            project.architect if project else None,
            signals.architect if signals else None,
        ),
        purchasers=purchasers,
        seller_name=seller.name if seller else None,
        seller_email=seller.email if seller else None,
        earliest_due_date=earliest_date,
        earliest_due_time=earliest_time,
        email_ids=[extraction.email_id],
        emails=[email],
        extractions=[extraction],
        cluster=cluster,
        date_group=get_date_group(earliest_date, now),
        status=BidStatus.PENDING,
    )


def merge_bid_group(
    cluster: ProjectCluster,
    bids: list[BidItem],
    now: datetime | None = None,
) -> BidItem:
    """Merge the BidItems of one cluster into a single record.

    ``email_ids`` is de-duplicated while ``emails`` and ``extractions`` are
    concatenated as-is, so an email reached through two constituents shows
    up twice in ``emails``.

    Args:
        cluster: The shared cluster.
        bids: Constituent bids, in input order.
        now: Reference instant for the date group.

    Returns:
        Merged BidItem whose ID is the cluster ID.
    """
    purchasers = dedupe_purchasers([p for bid in bids for p in bid.purchasers])
    earliest_date, earliest_time = find_earliest_due(purchasers)
    project = cluster.project

    return BidItem(
        id=cluster.id,
        project_name=project.name or _first_non_null(bids, lambda b: b.project_name),
        project_address=project.address or _first_non_null(bids, lambda b: b.project_address),
        general_contractor=project.general_contractor
        or _first_non_null(bids, lambda b: b.general_contractor),
        engineer=project.engineer or _first_non_null(bids, lambda b: b.engineer),
        architect=project.architect or _first_non_null(bids, lambda b: b.architect),
        purchasers=purchasers,
        seller_name=_first_non_null(bids, lambda b: b.seller_name),
        seller_email=_first_non_null(bids, lambda b: b.seller_email),
        earliest_due_date=earliest_date,
        earliest_due_time=earliest_time,
        email_ids=list(dict.fromkeys(email_id for bid in bids for email_id in bid.email_ids)),
        emails=[email for bid in bids for email in bid.emails],
        extractions=[extraction for bid in bids for extraction in bid.extractions],
        cluster=cluster,
        date_group=get_date_group(earliest_date, now),
        status=BidStatus.PENDING,
    )


def merge_bids_by_cluster(bids: list[BidItem], now: datetime | None = None) -> list[BidItem]:
    """Collapse bids sharing a cluster into one bid per cluster.

    Clusters with a single bid pass it through unchanged. Bids without a
    cluster are appended after all cluster-derived bids.

    Args:
        bids: Per-email bids.
        now: Reference instant for date groups of merged bids.

    Returns:
        Merged bids followed by unclustered bids.
    """
    by_cluster: dict[str, tuple[ProjectCluster, list[BidItem]]] = {}
    unclustered: list[BidItem] = []

    for bid in bids:
        if bid.cluster is not None and bid.cluster.id:
            by_cluster.setdefault(bid.cluster.id, (bid.cluster, []))[1].append(bid)
        else:
            unclustered.append(bid)

    merged: list[BidItem] = []
    for cluster, cluster_bids in by_cluster.values():
        if len(cluster_bids) == 1:
            merged.append(cluster_bids[0])
            continue

        merged.append(merge_bid_group(cluster, cluster_bids, now))

    logger.debug(
        "bids_merged",
        input_bids=len(bids),
        clusters=len(by_cluster),
        unclustered=len(unclustered),
        output_bids=len(merged) + len(unclustered),
    )

    return [*merged, *unclustered]
