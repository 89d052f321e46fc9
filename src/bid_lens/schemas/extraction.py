"""Typed output of the LLM extraction and seller-inference collaborators."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field

from bid_lens.schemas.base import BoundaryModel

Confidence = Annotated[float, Field(ge=0.0, le=1.0)]

AIProviderName = Literal["openai", "google", "anthropic"]
PurchaserSource = Literal["signature", "forwarded", "header", "body", "inferred"]
DueDateSource = Literal["explicit", "inferred"]
SellerSource = Literal["email_recipient", "postgres_mapping", "inferred"]


class PurchaserIdentity(BoundaryModel):
    """The contractor asking for a quote, as identified in one email."""

    company_name: str = Field(..., min_length=1, description="Purchasing company")
    contact_name: str | None = Field(None, description="Contact person")
    contact_email: str | None = Field(None, description="Contact email")
    contact_phone: str | None = Field(None, description="Contact phone")
    confidence: Confidence = Field(..., description="Extraction confidence")
    source: PurchaserSource | None = Field(None, description="Where the identity was found")


class ProjectSignals(BoundaryModel):
    """Project attributes mentioned in one email."""

    project_name: str | None = None
    project_address: str | None = None
    general_contractor: str | None = None
    engineer: str | None = None
    architect: str | None = None
    confidence: Confidence = Field(..., description="Extraction confidence")


class BidDueDate(BoundaryModel):
    """A bid due date found in an email."""

    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    time: str | None = Field(None, description="Due time as written, e.g. '2:00 PM'")
    timezone: str | None = Field(None, description="Timezone as written")
    source: DueDateSource = Field(..., description="Explicitly stated or inferred")
    raw_text: str = Field(..., description="Text the date was read from")
    confidence: Confidence = Field(..., description="Extraction confidence")


class Seller(BoundaryModel):
    """Internal salesperson responsible for a bid."""

    id: str
    name: str
    email: str
    territory: str | None = None


class InferredSeller(BoundaryModel):
    """Seller inferred from recipient addresses."""

    seller: Seller | None = None
    source: SellerSource = "email_recipient"
    confidence: Confidence = 0.0
    reasoning: str = ""


class ExtractedData(BoundaryModel):
    """Everything extracted from a single email."""

    email_id: str = Field(..., description="Source email ID")
    extracted_at: datetime = Field(..., description="When extraction ran")
    provider: AIProviderName = Field(..., description="LLM provider used")
    confidence: Confidence = Field(..., description="Overall confidence")
    purchaser: PurchaserIdentity | None = None
    project_signals: ProjectSignals | None = None
    bid_due_dates: list[BidDueDate] = Field(default_factory=list)
    extraction_notes: list[str] = Field(default_factory=list)
    inferred_seller: InferredSeller | None = None
