"""Exceptions raised at the collaborator boundaries.

The clustering, merge and grouping core never raises for well-typed input;
these errors belong to validation and the optional AI clustering strategy.
"""

from __future__ import annotations

from typing import Any


class BidLensError(Exception):
    """Base exception for bid_lens errors."""


class ExtractionValidationError(BidLensError):
    """Raised when extraction output fails schema validation.

    Attributes:
        email_id: Email the extraction belongs to, if known.
        errors: Pydantic error dicts describing each failure.
    """

    def __init__(
        self,
        reason: str,
        email_id: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.email_id = email_id
        self.errors = errors or []


class ClusteringError(BidLensError):
    """Raised when an AI clustering response cannot be used.

    Attributes:
        raw_response: The model output that failed to parse.
    """

    def __init__(self, reason: str, raw_response: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.raw_response = raw_response
