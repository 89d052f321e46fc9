"""Shared test fixtures for bid-lens."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from bid_lens.clustering.models import EmailSignal
from bid_lens.schemas.clustering import ProjectCluster, ProjectInfo
from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData

# Wednesday
FIXED_NOW = datetime(2025, 1, 15, 10, 30)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time (Wednesday 2025-01-15 10:30 local)."""
    return FIXED_NOW


@pytest.fixture
def make_email() -> Callable[..., ParsedEmail]:
    """Factory for ParsedEmail records."""

    def _make(
        email_id: str = "msg-1",
        thread_id: str | None = None,
        subject: str = "RFQ: Byron WWTP",
        sender: str = "Jane Smith <jane@baymech.com>",
        to: list[str] | None = None,
        cc: list[str] | None = None,
    ) -> ParsedEmail:
        return ParsedEmail.model_validate(
            {
                "id": email_id,
                "threadId": thread_id or f"thread-{email_id}",
                "from": sender,
                "to": to if to is not None else ["John Doe <john.doe@buildvision.io>"],
                "cc": cc or [],
                "subject": subject,
                "body": {"text": "Please quote the attached equipment schedule."},
                "date": "2025-01-14T09:00:00+00:00",
            }
        )

    return _make


@pytest.fixture
def make_extraction() -> Callable[..., ExtractedData]:
    """Factory for ExtractedData records."""

    def _make(
        email_id: str = "msg-1",
        company: str | None = "Bay Mechanical",
        project_name: str | None = "Byron WWTP",
        project_address: str | None = None,
        general_contractor: str | None = None,
        due_dates: list[dict[str, Any]] | None = None,
        seller: dict[str, Any] | None = None,
        with_signals: bool = True,
    ) -> ExtractedData:
        data: dict[str, Any] = {
            "emailId": email_id,
            "extractedAt": "2025-01-14T10:00:00+00:00",
            "provider": "google",
            "confidence": 0.9,
            "purchaser": (
                {"companyName": company, "confidence": 0.9, "source": "signature"}
                if company
                else None
            ),
            "projectSignals": (
                {
                    "projectName": project_name,
                    "projectAddress": project_address,
                    "generalContractor": general_contractor,
                    "confidence": 0.8,
                }
                if with_signals
                else None
            ),
            "bidDueDates": due_dates or [],
            "extractionNotes": [],
        }
        if seller is not None:
            data["inferredSeller"] = {
                "seller": seller,
                "source": "email_recipient",
                "confidence": 0.95,
                "reasoning": "test",
            }
        return ExtractedData.model_validate(data)

    return _make


@pytest.fixture
def make_signal() -> Callable[..., EmailSignal]:
    """Factory for EmailSignal records."""

    def _make(email_id: str, thread_id: str | None = None, **fields: Any) -> EmailSignal:
        return EmailSignal(
            email_id=email_id,
            thread_id=thread_id or f"thread-{email_id}",
            subject=fields.pop("subject", ""),
            from_address=fields.pop("from_address", "sender@example.com"),
            date=fields.pop("date", "2025-01-14T09:00:00+00:00"),
            **fields,
        )

    return _make


@pytest.fixture
def make_cluster() -> Callable[..., ProjectCluster]:
    """Factory for ProjectCluster records."""

    def _make(
        cluster_id: str = "c1",
        email_ids: list[str] | None = None,
        name: str | None = "Byron WWTP",
        **project: Any,
    ) -> ProjectCluster:
        return ProjectCluster(
            id=cluster_id,
            name=name or "Unknown Project",
            project=ProjectInfo(name=name, **project),
            email_ids=email_ids or [],
            confidence=1.0,
            clustering_method="rule_based",
            created_at=datetime(2025, 1, 14, tzinfo=UTC),
        )

    return _make


def due(date: str, time: str | None = None) -> dict[str, Any]:
    """Build a raw bid due date entry."""
    return {
        "date": date,
        "time": time,
        "source": "explicit",
        "rawText": f"Bids due {date}",
        "confidence": 0.9,
    }


@pytest.fixture
def make_due() -> Callable[..., dict[str, Any]]:
    """Factory for raw bid due date entries."""
    return due
