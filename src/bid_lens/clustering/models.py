"""Data models consumed and produced by the similarity engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from bid_lens.schemas.email import ParsedEmail
    from bid_lens.schemas.extraction import ExtractedData

SignalName = Literal["subject", "projectName", "address", "gc", "engineer", "architect"]


@dataclass(frozen=True)
class EmailSignal:
    """Per-email record compared during clustering.

    Attributes:
        email_id: Source email ID.
        thread_id: Provider thread ID. Emails sharing it always cluster together.
        subject: Subject line.
        from_address: Sender email address.
        date: ISO timestamp of the email.
        project_name: Extracted project name.
        project_address: Extracted project address.
        general_contractor: Extracted general contractor.
        engineer: Extracted engineer.
        architect: Extracted architect.
        purchaser_company: Extracted purchaser company.
    """

    email_id: str
    thread_id: str
    subject: str
    from_address: str
    date: str
    project_name: str | None = None
    project_address: str | None = None
    general_contractor: str | None = None
    engineer: str | None = None
    architect: str | None = None
    purchaser_company: str | None = None


@dataclass(frozen=True)
class SimilaritySignal:
    """One weighted field comparison between two emails."""

    signal: SignalName
    weight: float
    value1: str | None
    value2: str | None
    score: float


@dataclass
class EmailSimilarity:
    """Similarity between two emails across all signals."""

    email_id1: str
    email_id2: str
    signals: list[SimilaritySignal] = field(default_factory=list)
    overall_score: float = 0.0
    ai_reasoning: str | None = None


def build_email_signal(
    email: ParsedEmail | None,
    extraction: ExtractedData,
) -> EmailSignal:
    """Build the clustering record for one email and its extraction.

    Empty strings become None so they never count as comparable values.
    Without an email the record falls back to its own ID as thread ID, so
    orphaned extractions never share a thread.

    Args:
        email: The fetched email, if available.
        extraction: Extraction output for the email.

    Returns:
        EmailSignal keyed on the extraction's email ID.
    """
    signals = extraction.project_signals
    purchaser = extraction.purchaser

    return EmailSignal(
        email_id=extraction.email_id,
        thread_id=email.thread_id if email else extraction.email_id,
        subject=email.subject if email else "",
        from_address=email.sender.email if email else "",
        date=email.date.isoformat() if email else "",
        project_name=(signals.project_name or None) if signals else None,
        project_address=(signals.project_address or None) if signals else None,
        general_contractor=(signals.general_contractor or None) if signals else None,
        engineer=(signals.engineer or None) if signals else None,
        architect=(signals.architect or None) if signals else None,
        purchaser_company=(purchaser.company_name or None) if purchaser else None,
    )
