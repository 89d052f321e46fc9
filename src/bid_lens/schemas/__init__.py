"""Pydantic schemas for bid-lens."""

from bid_lens.schemas.bids import (
    DATE_GROUP_LABELS,
    DATE_GROUP_PRIORITY,
    BidGroup,
    BidItem,
    BidListSummary,
    BidStatus,
    DateGroup,
    GroupedBidList,
    Purchaser,
)
from bid_lens.schemas.clustering import (
    AIClusteringResponse,
    AIClusterSuggestion,
    ClusteringConfig,
    ClusteringResult,
    ClusteringSummary,
    ProjectCluster,
    ProjectInfo,
    SignalWeights,
)
from bid_lens.schemas.email import EmailAddress, EmailBody, ParsedEmail, parse_email_address
from bid_lens.schemas.extraction import (
    BidDueDate,
    ExtractedData,
    InferredSeller,
    ProjectSignals,
    PurchaserIdentity,
    Seller,
)

__all__ = [
    "AIClusterSuggestion",
    "AIClusteringResponse",
    "BidDueDate",
    "BidGroup",
    "BidItem",
    "BidListSummary",
    "BidStatus",
    "ClusteringConfig",
    "ClusteringResult",
    "ClusteringSummary",
    "DATE_GROUP_LABELS",
    "DATE_GROUP_PRIORITY",
    "DateGroup",
    "EmailAddress",
    "EmailBody",
    "ExtractedData",
    "GroupedBidList",
    "InferredSeller",
    "ParsedEmail",
    "ProjectCluster",
    "ProjectInfo",
    "ProjectSignals",
    "Purchaser",
    "PurchaserIdentity",
    "Seller",
    "SignalWeights",
    "parse_email_address",
]
