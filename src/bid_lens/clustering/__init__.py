"""Project clustering for bid request emails.

Groups related emails into projects using:
1. Thread-based grouping (emails in the same thread share a project)
2. Rule-based similarity scoring over extracted project fields
3. Optional AI-assisted clustering behind the same interface
"""

from __future__ import annotations

from bid_lens.clustering.ai import LLMCompleter, cluster_emails, cluster_emails_with_ai
from bid_lens.clustering.models import (
    EmailSignal,
    EmailSimilarity,
    SimilaritySignal,
    build_email_signal,
)
from bid_lens.clustering.rule_based import (
    calculate_cluster_confidence,
    cluster_emails_rule_based,
    extract_cluster_info,
    generate_cluster_name,
    rule_based_groups,
)
from bid_lens.clustering.similarity import (
    DEFAULT_CLUSTERING_CONFIG,
    are_same_project,
    calculate_email_similarity,
    calculate_similarity_matrix,
    find_similar_emails,
    get_best_match,
    group_by_thread,
    normalize_string,
)
from bid_lens.clustering.union_find import UnionFind

__all__ = [
    "DEFAULT_CLUSTERING_CONFIG",
    "EmailSignal",
    "EmailSimilarity",
    "LLMCompleter",
    "SimilaritySignal",
    "UnionFind",
    "are_same_project",
    "build_email_signal",
    "calculate_cluster_confidence",
    "calculate_email_similarity",
    "calculate_similarity_matrix",
    "cluster_emails",
    "cluster_emails_rule_based",
    "cluster_emails_with_ai",
    "extract_cluster_info",
    "find_similar_emails",
    "generate_cluster_name",
    "get_best_match",
    "group_by_thread",
    "normalize_string",
    "rule_based_groups",
]
