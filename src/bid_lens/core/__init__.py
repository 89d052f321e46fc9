"""Core utilities for bid-lens."""

from __future__ import annotations

from bid_lens.core.config import BidLensSettings, get_settings
from bid_lens.core.exceptions import BidLensError, ClusteringError, ExtractionValidationError
from bid_lens.core.logging import configure_structlog, setup_logging

__all__ = [
    "BidLensError",
    "BidLensSettings",
    "ClusteringError",
    "ExtractionValidationError",
    "configure_structlog",
    "get_settings",
    "setup_logging",
]
