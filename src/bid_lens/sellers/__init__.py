"""Seller inference."""

from __future__ import annotations

from bid_lens.sellers.inference import (
    SELLER_DOMAIN,
    find_all_sellers,
    generate_seller_id,
    has_seller_recipient,
    infer_name_from_email,
    infer_seller_from_email,
    is_seller_email,
)

__all__ = [
    "SELLER_DOMAIN",
    "find_all_sellers",
    "generate_seller_id",
    "has_seller_recipient",
    "infer_name_from_email",
    "infer_seller_from_email",
    "is_seller_email",
]
