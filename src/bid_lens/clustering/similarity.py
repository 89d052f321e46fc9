"""Rule-based similarity scoring for email clustering.

Compares the subject and the extracted project fields of two emails and
combines the per-field scores into a weighted overall score.
"""

from __future__ import annotations

import re
from collections import Counter

from bid_lens.clustering.models import EmailSignal, EmailSimilarity, SignalName, SimilaritySignal
from bid_lens.schemas.clustering import ClusteringConfig

DEFAULT_CLUSTERING_CONFIG = ClusteringConfig()

REPLY_PREFIX_PATTERN = re.compile(r"^(re:|fwd:|fw:)\s*", re.IGNORECASE)
WHITESPACE_PATTERN = re.compile(r"\s+")
SPECIAL_CHARS_PATTERN = re.compile(r"[^\w\s-]")

# Signal name -> EmailSignal attribute, in evaluation order
SIGNAL_FIELDS: dict[SignalName, str] = {
    "subject": "subject",
    "projectName": "project_name",
    "address": "project_address",
    "gc": "general_contractor",
    "engineer": "engineer",
    "architect": "architect",
}


def normalize_string(value: str | None) -> str:
    """Normalize a string for comparison.

    Lowercases, trims, strips a leading reply/forward prefix, collapses
    whitespace and drops punctuation other than hyphens.

    Args:
        value: Raw value, possibly None.

    Returns:
        Normalized string, empty for missing values.
    """
    if not value:
        return ""

    normalized = value.lower().strip()
    normalized = REPLY_PREFIX_PATTERN.sub("", normalized, count=1)
    normalized = WHITESPACE_PATTERN.sub(" ", normalized)
    return SPECIAL_CHARS_PATTERN.sub("", normalized)


def dice_coefficient(first: str, second: str) -> float:
    """Bigram Dice coefficient between two strings, ignoring whitespace.

    Args:
        first: First string.
        second: Second string.

    Returns:
        Similarity in [0, 1].
    """
    first = WHITESPACE_PATTERN.sub("", first)
    second = WHITESPACE_PATTERN.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = Counter(first[i : i + 2] for i in range(len(first) - 1))

    intersection = 0
    for i in range(len(second) - 1):
        bigram = second[i : i + 2]
        if first_bigrams[bigram] > 0:
            first_bigrams[bigram] -= 1
            intersection += 1

    return (2.0 * intersection) / (len(first) + len(second) - 2)


def calculate_string_similarity(value1: str | None, value2: str | None) -> float:
    """Score two raw field values.

    A value is never similar to an absent one, so an empty side scores 0.
    """
    normalized1 = normalize_string(value1)
    normalized2 = normalize_string(value2)

    if not normalized1 or not normalized2:
        return 0.0

    if normalized1 == normalized2:
        return 1.0

    return dice_coefficient(normalized1, normalized2)


def _is_comparable(signal: SimilaritySignal) -> bool:
    return bool(normalize_string(signal.value1) or normalize_string(signal.value2))


def calculate_signal_similarity(
    signal: SignalName,
    email1: EmailSignal,
    email2: EmailSignal,
    weight: float,
) -> SimilaritySignal:
    """Compare one named field of two emails."""
    attribute = SIGNAL_FIELDS[signal]
    value1: str | None = getattr(email1, attribute)
    value2: str | None = getattr(email2, attribute)

    return SimilaritySignal(
        signal=signal,
        weight=weight,
        value1=value1,
        value2=value2,
        score=calculate_string_similarity(value1, value2),
    )


def calculate_email_similarity(
    email1: EmailSignal,
    email2: EmailSignal,
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> EmailSimilarity:
    """Calculate the weighted similarity between two emails.

    Only signals where at least one side has a value contribute to the
    weighted mean; with no comparable signal the overall score is 0.

    Args:
        email1: First email.
        email2: Second email.
        config: Clustering configuration holding the signal weights.

    Returns:
        EmailSimilarity with per-signal detail and the overall score.
    """
    weights = config.signal_weights
    signal_weights: dict[SignalName, float] = {
        "subject": weights.subject,
        "projectName": weights.project_name,
        "address": weights.address,
        "gc": weights.gc,
        "engineer": weights.engineer,
        "architect": weights.architect,
    }

    signals = [
        calculate_signal_similarity(name, email1, email2, weight)
        for name, weight in signal_weights.items()
    ]

    total_weight = 0.0
    weighted_sum = 0.0
    for signal in signals:
        if _is_comparable(signal):
            total_weight += signal.weight
            weighted_sum += signal.score * signal.weight

    overall_score = weighted_sum / total_weight if total_weight > 0 else 0.0

    return EmailSimilarity(
        email_id1=email1.email_id,
        email_id2=email2.email_id,
        signals=signals,
        overall_score=overall_score,
    )


def calculate_similarity_matrix(
    emails: list[EmailSignal],
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> list[EmailSimilarity]:
    """Calculate all pairwise similarities at or above the threshold.

    Args:
        emails: Emails to compare.
        config: Clustering configuration.

    Returns:
        Similarities sorted by score, highest first. Ties keep input order.
    """
    similarities: list[EmailSimilarity] = []

    for i, first in enumerate(emails):
        for second in emails[i + 1 :]:
            similarity = calculate_email_similarity(first, second, config)
            if similarity.overall_score >= config.similarity_threshold:
                similarities.append(similarity)

    return sorted(similarities, key=lambda s: s.overall_score, reverse=True)


def group_by_thread(emails: list[EmailSignal]) -> dict[str, list[EmailSignal]]:
    """Group emails by thread ID, preserving first-seen order."""
    threads: dict[str, list[EmailSignal]] = {}
    for email in emails:
        threads.setdefault(email.thread_id, []).append(email)
    return threads


def find_similar_emails(
    target: EmailSignal,
    candidates: list[EmailSignal],
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> list[EmailSimilarity]:
    """Find every candidate similar to the target email.

    Args:
        target: Email to match.
        candidates: Emails to compare against. The target itself is skipped.
        config: Clustering configuration.

    Returns:
        Similarities at or above the threshold, highest first.
    """
    similarities: list[EmailSimilarity] = []

    for candidate in candidates:
        if candidate.email_id == target.email_id:
            continue

        similarity = calculate_email_similarity(target, candidate, config)
        if similarity.overall_score >= config.similarity_threshold:
            similarities.append(similarity)

    return sorted(similarities, key=lambda s: s.overall_score, reverse=True)


def get_best_match(
    target: EmailSignal,
    candidates: list[EmailSignal],
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> tuple[EmailSignal, EmailSimilarity] | None:
    """Return the most similar candidate and its similarity, if any."""
    similarities = find_similar_emails(target, candidates, config)
    if not similarities:
        return None

    best = similarities[0]
    for candidate in candidates:
        if candidate.email_id == best.email_id2:
            return candidate, best

    return None


def are_same_project(
    email1: EmailSignal,
    email2: EmailSignal,
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> bool:
    """Check whether two emails are about the same project.

    Emails in the same thread always are; otherwise the similarity score
    must reach the configured threshold.
    """
    if email1.thread_id == email2.thread_id:
        return True

    similarity = calculate_email_similarity(email1, email2, config)
    return similarity.overall_score >= config.similarity_threshold
