"""Normalized email records handed over by the mail-fetch collaborator."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from bid_lens.schemas.base import BoundaryModel


def parse_email_address(address: str) -> tuple[str, str | None]:
    """Parse an email address into email and name components.

    Handles formats like:
    - "Name <email@example.com>"
    - "<email@example.com>"
    - "email@example.com"

    Args:
        address: Raw email address string.

    Returns:
        Tuple of (email, name) where name may be None.
    """
    if not address:
        return "", None

    match = re.match(r'^"?([^"<]+)"?\s*<([^>]+)>$', address.strip())
    if match:
        name = match.group(1).strip()
        email = match.group(2).strip().lower()
        return email, name if name else None

    match = re.match(r"^<([^>]+)>$", address.strip())
    if match:
        return match.group(1).strip().lower(), None

    if "@" in address:
        return address.strip().lower(), None

    return address.strip(), None


class EmailAddress(BoundaryModel):
    """A mailbox with an optional display name."""

    name: str | None = Field(None, description="Display name")
    email: str = Field(..., description="Email address")

    @classmethod
    def parse(cls, raw: str) -> EmailAddress:
        """Build an address from a raw header value such as ``Name <a@b.com>``."""
        email, name = parse_email_address(raw)
        return cls(name=name, email=email)


def _coerce_address(value: Any) -> Any:
    if isinstance(value, str):
        return EmailAddress.parse(value)
    return value


class EmailBody(BoundaryModel):
    """Message body in plain text and optional HTML."""

    text: str = Field("", description="Plain text body")
    html: str | None = Field(None, description="HTML body")


class ParsedEmail(BoundaryModel):
    """A fetched email, already parsed into structured fields."""

    id: str = Field(..., description="Provider message ID")
    thread_id: str = Field(..., description="Provider thread ID")
    sender: EmailAddress = Field(..., alias="from", description="Sender address")
    to: list[EmailAddress] = Field(default_factory=list, description="TO recipients")
    cc: list[EmailAddress] = Field(default_factory=list, description="CC recipients")
    bcc: list[EmailAddress] = Field(default_factory=list, description="BCC recipients")
    subject: str = Field("", description="Subject line")
    body: EmailBody = Field(default_factory=EmailBody, description="Message body")
    date: datetime = Field(..., description="When the message was sent")
    received_at: datetime | None = Field(None, description="When the message was received")
    labels: list[str] = Field(default_factory=list, description="Provider labels")
    snippet: str = Field("", description="Short preview text")

    @field_validator("sender", mode="before")
    @classmethod
    def parse_sender(cls, value: Any) -> Any:
        """Accept raw ``Name <email>`` strings for the sender."""
        return _coerce_address(value)

    @field_validator("to", "cc", "bcc", mode="before")
    @classmethod
    def parse_recipients(cls, value: Any) -> Any:
        """Accept raw address strings inside recipient lists."""
        if isinstance(value, list):
            return [_coerce_address(item) for item in value]
        return value
