"""CLI entry point for bid-lens.

Usage:
    bid-lens group INPUT.json              # Print the date-grouped bid list
    bid-lens group INPUT.json --json       # Same, as JSON
    bid-lens group INPUT.json --no-merge   # One bid per email
    bid-lens cluster INPUT.json            # Print project clusters
    bid-lens --help                        # Show all options

INPUT.json holds an already-fetched and extracted batch:
    {"emails": [...], "extractions": [...]}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, ValidationError

from bid_lens.bids.formatting import format_grouped_bid_list
from bid_lens.core.config import BidLensSettings, get_settings
from bid_lens.core.logging import configure_structlog, setup_logging
from bid_lens.pipeline import build_bid_list, cluster_batch
from bid_lens.schemas.base import BoundaryModel
from bid_lens.schemas.clustering import ClusteringConfig, ClusteringResult
from bid_lens.schemas.email import ParsedEmail
from bid_lens.schemas.extraction import ExtractedData


class BatchInput(BoundaryModel):
    """A fetched and extracted batch of emails."""

    emails: list[ParsedEmail] = Field(default_factory=list)
    extractions: list[ExtractedData] = Field(default_factory=list)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="bid-lens",
        description="Cluster bid request emails into projects and list bids by due date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Common arguments
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Group subcommand
    group_parser = subparsers.add_parser("group", help="Build the date-grouped bid list")
    group_parser.add_argument("input", type=Path, help="Batch JSON file")
    group_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Similarity threshold (default: from settings, 0.6)",
    )
    group_parser.add_argument(
        "--no-merge",
        action="store_true",
        help="Keep one bid per email instead of merging by project",
    )
    group_parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        metavar="ISO_DATETIME",
        help="Reference time for date groups (default: current time)",
    )
    group_parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of text",
    )

    # Cluster subcommand
    cluster_parser = subparsers.add_parser("cluster", help="Cluster emails into projects")
    cluster_parser.add_argument("input", type=Path, help="Batch JSON file")
    cluster_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Similarity threshold (default: from settings, 0.6)",
    )
    cluster_parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of text",
    )

    return parser.parse_args(argv)


def load_batch(path: Path) -> BatchInput:
    """Load and validate a batch file.

    Raises:
        ValueError: If the file is missing, not JSON, or fails validation.
    """
    if not path.exists():
        raise ValueError(f"Input file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        return BatchInput.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid batch in {path}:\n{e}") from e


def build_config(settings: BidLensSettings, threshold: float | None) -> ClusteringConfig:
    """Clustering config from settings, with an optional threshold override."""
    config = ClusteringConfig.from_settings(settings)
    if threshold is not None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"Threshold must be between 0 and 1, got {threshold}")
        config = config.model_copy(update={"similarity_threshold": threshold})
    return config


def format_clustering(result: ClusteringResult) -> str:
    """Render a clustering result as text."""
    summary = result.summary
    lines = [
        "Project Clusters",
        "=" * 60,
        f"Emails: {summary.total_emails}  Clusters: {summary.total_clusters}",
        f"Average size: {summary.average_cluster_size:.1f}  "
        f"Average confidence: {summary.average_confidence:.2f}",
    ]
    for cluster in result.clusters:
        lines.append("")
        lines.append(f"{cluster.name} ({len(cluster.email_ids)} emails, {cluster.confidence:.2f})")
        lines.extend(f"  - {email_id}" for email_id in cluster.email_ids)
    lines.append("=" * 60)
    return "\n".join(lines)


def run_group(args: argparse.Namespace, settings: BidLensSettings) -> None:
    """Handle the group command."""
    batch = load_batch(args.input)
    config = build_config(settings, args.threshold)

    result = build_bid_list(
        batch.emails,
        batch.extractions,
        config=config,
        now=args.now,
        merge=not args.no_merge,
    )

    if args.json:
        print(result.bid_list.model_dump_json(by_alias=True, indent=2))
    else:
        print(format_grouped_bid_list(result.bid_list))


def run_cluster(args: argparse.Namespace, settings: BidLensSettings) -> None:
    """Handle the cluster command."""
    batch = load_batch(args.input)
    config = build_config(settings, args.threshold)

    result = cluster_batch(batch.emails, batch.extractions, config)

    if args.json:
        print(result.model_dump_json(by_alias=True, indent=2))
    else:
        print(format_clustering(result))


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for bid-lens."""
    args = parse_args(argv)

    if args.env_file is not None:
        if not args.env_file.exists():
            print(f"Env file not found: {args.env_file}", file=sys.stderr)
            sys.exit(1)
        load_dotenv(args.env_file)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level)
    setup_logging(level=level, log_dir=settings.log_dir, verbose=args.verbose)
    configure_structlog(
        json_format=settings.log_json,
        log_level=logging.getLevelName(level),
    )

    try:
        if args.command == "group":
            run_group(args, settings)
        elif args.command == "cluster":
            run_cluster(args, settings)
        else:
            print("Usage: bid-lens {group|cluster} INPUT.json", file=sys.stderr)
            sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
