"""Bid list construction: date groups, merging and grouping."""

from __future__ import annotations

from bid_lens.bids.builder import (
    create_bid_from_extraction,
    create_purchaser_from_extraction,
    dedupe_purchasers,
    find_earliest_due,
    merge_bid_group,
    merge_bids_by_cluster,
)
from bid_lens.bids.date_groups import get_date_group, parse_due_date
from bid_lens.bids.formatting import format_bid, format_grouped_bid_list, format_purchasers
from bid_lens.bids.grouping import build_summary, create_grouped_bid_list, group_bids_by_date

__all__ = [
    "build_summary",
    "create_bid_from_extraction",
    "create_grouped_bid_list",
    "create_purchaser_from_extraction",
    "dedupe_purchasers",
    "find_earliest_due",
    "format_bid",
    "format_grouped_bid_list",
    "format_purchasers",
    "get_date_group",
    "group_bids_by_date",
    "merge_bid_group",
    "merge_bids_by_cluster",
    "parse_due_date",
]
