"""Rule-based project clustering.

Groups emails in two passes over a union-find structure:
1. Emails in the same thread are linked unconditionally
2. Email pairs scoring at or above the similarity threshold are linked

Each resulting group becomes a ProjectCluster with canonical project info
chosen by majority vote across its members.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from datetime import UTC, datetime
from itertools import combinations
from uuid import uuid4

import structlog

from bid_lens.clustering.models import EmailSignal
from bid_lens.clustering.similarity import (
    DEFAULT_CLUSTERING_CONFIG,
    REPLY_PREFIX_PATTERN,
    are_same_project,
    calculate_similarity_matrix,
    group_by_thread,
)
from bid_lens.clustering.union_find import UnionFind
from bid_lens.schemas.clustering import (
    ClusteringConfig,
    ClusteringResult,
    ClusteringRunMethod,
    ClusteringSummary,
    ProjectCluster,
    ProjectInfo,
)

logger = structlog.get_logger(__name__)

MAX_SUBJECT_NAME_LENGTH = 50


def generate_cluster_id() -> str:
    """Generate a unique cluster ID."""
    return f"cluster_{uuid4().hex[:12]}"


def rule_based_groups(
    emails: list[EmailSignal],
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> dict[str, list[str]]:
    """Partition email IDs into groups.

    Args:
        emails: Emails to group.
        config: Clustering configuration.

    Returns:
        Mapping of group root ID -> member email IDs.
    """
    uf = UnionFind()

    for email in emails:
        uf.add(email.email_id)

    # First pass: thread membership
    for thread_emails in group_by_thread(emails).values():
        if len(thread_emails) > 1:
            first = thread_emails[0].email_id
            for email in thread_emails[1:]:
                uf.union(first, email.email_id)

    # Second pass: similarity
    for similarity in calculate_similarity_matrix(emails, config):
        uf.union(similarity.email_id1, similarity.email_id2)

    return uf.get_groups()


def _most_common(
    emails: list[EmailSignal],
    getter: Callable[[EmailSignal], str | None],
) -> str | None:
    values = [value for value in (getter(email) for email in emails) if value is not None]
    if not values:
        return None

    # Counter keeps first-seen order among equal counts
    return Counter(values).most_common(1)[0][0]


def extract_cluster_info(emails: list[EmailSignal]) -> ProjectInfo:
    """Pick canonical project attributes for a group of emails.

    Each field takes the most frequent non-null value across the members,
    ties going to the value seen first.
    """
    return ProjectInfo(
        name=_most_common(emails, lambda e: e.project_name),
        address=_most_common(emails, lambda e: e.project_address),
        general_contractor=_most_common(emails, lambda e: e.general_contractor),
        engineer=_most_common(emails, lambda e: e.engineer),
        architect=_most_common(emails, lambda e: e.architect),
    )


def generate_cluster_name(project: ProjectInfo, subjects: list[str]) -> str:
    """Derive a display name for a cluster.

    Args:
        project: Canonical project info.
        subjects: Member email subjects, in member order.

    Returns:
        Project name, address, GC, first subject, or "Unknown Project".
    """
    if project.name:
        return project.name

    if project.address:
        return f"Project at {project.address}"

    if project.general_contractor:
        return f"{project.general_contractor} Project"

    if subjects:
        subject = REPLY_PREFIX_PATTERN.sub("", subjects[0], count=1).strip()
        if len(subject) > MAX_SUBJECT_NAME_LENGTH:
            return subject[:MAX_SUBJECT_NAME_LENGTH] + "..."
        return subject

    return "Unknown Project"


def calculate_cluster_confidence(
    emails: list[EmailSignal],
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> float:
    """Fraction of member pairs that look like the same project.

    Single-member clusters have confidence 1.
    """
    pairs = list(combinations(emails, 2))
    if not pairs:
        return 1.0

    matching = sum(1 for first, second in pairs if are_same_project(first, second, config))
    return round(matching / len(pairs), 2)


def summarize_clusters(total_emails: int, clusters: list[ProjectCluster]) -> ClusteringSummary:
    """Compute aggregate statistics for a set of clusters."""
    if not clusters:
        return ClusteringSummary(total_emails=total_emails)

    return ClusteringSummary(
        total_emails=total_emails,
        total_clusters=len(clusters),
        average_cluster_size=total_emails / len(clusters),
        average_confidence=sum(c.confidence for c in clusters) / len(clusters),
    )


def empty_clustering_result(method: ClusteringRunMethod) -> ClusteringResult:
    """Result for an empty input batch."""
    return ClusteringResult(
        clusters=[],
        unclustered=[],
        summary=ClusteringSummary(),
        processed_at=datetime.now(UTC),
        method=method,
    )


def cluster_emails_rule_based(
    emails: list[EmailSignal],
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> ClusteringResult:
    """Cluster emails using thread identity and similarity only.

    Every email lands in exactly one cluster, so ``unclustered`` is empty.

    Args:
        emails: Full batch of emails to cluster.
        config: Clustering configuration.

    Returns:
        ClusteringResult with clusters sorted largest first.
    """
    if not emails:
        return empty_clustering_result("rule_based")

    email_map = {email.email_id: email for email in emails}
    groups = rule_based_groups(emails, config)

    clusters: list[ProjectCluster] = []
    for email_ids in groups.values():
        members = [email_map[email_id] for email_id in email_ids if email_id in email_map]

        project = extract_cluster_info(members)
        clusters.append(
            ProjectCluster(
                id=generate_cluster_id(),
                name=generate_cluster_name(project, [e.subject for e in members]),
                project=project,
                email_ids=email_ids,
                confidence=calculate_cluster_confidence(members, config),
                clustering_method="rule_based",
                created_at=datetime.now(UTC),
            )
        )

    clusters.sort(key=lambda c: len(c.email_ids), reverse=True)

    logger.debug(
        "rule_based_clustering_complete",
        total_emails=len(emails),
        total_clusters=len(clusters),
    )

    return ClusteringResult(
        clusters=clusters,
        unclustered=[],
        summary=summarize_clusters(len(emails), clusters),
        processed_at=datetime.now(UTC),
        method="rule_based",
    )
