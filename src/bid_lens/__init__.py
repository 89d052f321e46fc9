"""bid-lens: project clustering and date-grouped bid lists for bid request emails."""

from __future__ import annotations

from bid_lens.bids import create_grouped_bid_list, get_date_group, merge_bids_by_cluster
from bid_lens.clustering import cluster_emails, cluster_emails_rule_based
from bid_lens.pipeline import PipelineResult, build_bid_list, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "PipelineResult",
    "__version__",
    "build_bid_list",
    "cluster_emails",
    "cluster_emails_rule_based",
    "create_grouped_bid_list",
    "get_date_group",
    "merge_bids_by_cluster",
    "run_pipeline",
]
