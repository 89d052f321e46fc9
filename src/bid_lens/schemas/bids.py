"""Bid list schema definitions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator, model_validator

from bid_lens.schemas.base import BoundaryModel, to_local_naive
from bid_lens.schemas.clustering import ProjectCluster
from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData, PurchaserSource


class DateGroup(str, Enum):
    """Display bucket for a due date relative to now.

    Members are declared in display order; ``priority`` follows it.
    """

    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"
    NEXT_WEEK = "next_week"
    LATER = "later"
    NO_DATE = "no_date"

    @property
    def label(self) -> str:
        """Human readable label."""
        return DATE_GROUP_LABELS[self]

    @property
    def priority(self) -> int:
        """Sort position, 0 for overdue through 6 for no_date."""
        return DATE_GROUP_PRIORITY[self]


DATE_GROUP_LABELS: dict[DateGroup, str] = {
    DateGroup.OVERDUE: "Overdue",
    DateGroup.TODAY: "Today",
    DateGroup.TOMORROW: "Tomorrow",
    DateGroup.THIS_WEEK: "This Week",
    DateGroup.NEXT_WEEK: "Next Week",
    DateGroup.LATER: "Later",
    DateGroup.NO_DATE: "No Due Date",
}

DATE_GROUP_PRIORITY: dict[DateGroup, int] = {group: index for index, group in enumerate(DateGroup)}


class BidStatus(str, Enum):
    """Lifecycle status of a bid."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    WON = "won"
    LOST = "lost"
    NO_BID = "no_bid"


class Purchaser(BoundaryModel):
    """One contractor's request for a quote on a project."""

    company_name: str = Field(..., min_length=1, description="Purchasing company")
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    due_date: datetime | None = Field(None, description="Bid due date for this purchaser")
    due_time: str | None = Field(None, description="Bid due time as written")
    email_id: str = Field(..., description="Email the request came from")
    source: PurchaserSource = "inferred"
    date_group: DateGroup = DateGroup.NO_DATE

    @field_validator("due_date", mode="after")
    @classmethod
    def normalize_due_date(cls, value: datetime | None) -> datetime | None:
        """Store due dates as naive local time so they stay comparable."""
        return to_local_naive(value) if value is not None else None

    @property
    def dedupe_key(self) -> str:
        """Case and whitespace insensitive company key."""
        return self.company_name.strip().lower()


class BidItem(BoundaryModel):
    """Project-centric bid record shown in the list."""

    id: str = Field(..., description="Email ID, or cluster ID once merged")
    project_name: str | None = None
    project_address: str | None = None
    general_contractor: str | None = None
    engineer: str | None = None
    architect: str | None = None
    purchasers: list[Purchaser] = Field(default_factory=list)
    seller_name: str | None = None
    seller_email: str | None = None
    earliest_due_date: datetime | None = None
    earliest_due_time: str | None = None
    email_ids: list[str] = Field(default_factory=list)
    emails: list[ParsedEmail] = Field(default_factory=list)
    extractions: list[ExtractedData] = Field(default_factory=list)
    cluster: ProjectCluster | None = None
    date_group: DateGroup = DateGroup.NO_DATE
    status: BidStatus = BidStatus.PENDING

    @field_validator("earliest_due_date", mode="after")
    @classmethod
    def normalize_earliest_due_date(cls, value: datetime | None) -> datetime | None:
        """Store the earliest due date as naive local time."""
        return to_local_naive(value) if value is not None else None

    @property
    def has_purchasers(self) -> bool:
        """Whether any purchaser was identified."""
        return len(self.purchasers) > 0


class BidGroup(BoundaryModel):
    """Bids that share a date group."""

    group: DateGroup
    label: str
    bids: list[BidItem] = Field(default_factory=list)
    count: int = 0

    @model_validator(mode="after")
    def sync_count(self) -> BidGroup:
        """Keep ``count`` equal to the number of bids."""
        if self.count != len(self.bids):
            self.count = len(self.bids)
        return self


class BidListSummary(BoundaryModel):
    """Counters shown above the bid list."""

    total_bids: int = 0
    total_emails: int = 0
    overdue_count: int = 0
    today_count: int = 0
    upcoming_count: int = 0


class GroupedBidList(BoundaryModel):
    """Bids grouped by date, in display order."""

    groups: list[BidGroup] = Field(default_factory=list)
    summary: BidListSummary = Field(default_factory=BidListSummary)
    generated_at: datetime
