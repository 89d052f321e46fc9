"""Plain-text rendering of grouped bid lists."""

from __future__ import annotations

from bid_lens.schemas.bids import BidItem, GroupedBidList, Purchaser

RULE_WIDTH = 60


def format_due(purchaser: Purchaser) -> str:
    """Render a purchaser's due date and time, or an empty string."""
    if purchaser.due_date is None:
        return ""
    due = purchaser.due_date.strftime("%Y-%m-%d")
    if purchaser.due_time:
        due = f"{due} {purchaser.due_time}"
    return due


def format_purchasers(purchasers: list[Purchaser]) -> list[str]:
    """Render one line per purchaser.

    Args:
        purchasers: Purchasers of a bid.

    Returns:
        Display lines; a single placeholder line when there are none.
    """
    if not purchasers:
        return ["no purchaser identified"]

    lines = []
    for purchaser in purchasers:
        line = purchaser.company_name
        if purchaser.contact_name:
            line += f" ({purchaser.contact_name})"
        due = format_due(purchaser)
        if due:
            line += f" - due {due}"
        lines.append(line)
    return lines


def format_bid(bid: BidItem) -> str:
    """Render a single bid as an indented block."""
    lines = [f"  {bid.project_name or 'Unknown Project'}"]

    if bid.project_address:
        lines.append(f"    Address: {bid.project_address}")
    if bid.general_contractor:
        lines.append(f"    GC: {bid.general_contractor}")
    if bid.seller_name:
        lines.append(f"    Seller: {bid.seller_name}")
    if bid.earliest_due_date is not None:
        due = bid.earliest_due_date.strftime("%Y-%m-%d")
        if bid.earliest_due_time:
            due = f"{due} {bid.earliest_due_time}"
        lines.append(f"    Due: {due}")

    lines.append(f"    Emails: {len(bid.email_ids)}")
    lines.append("    Purchasers:")
    lines.extend(f"      - {line}" for line in format_purchasers(bid.purchasers))
    return "\n".join(lines)


def format_grouped_bid_list(bid_list: GroupedBidList) -> str:
    """Render a grouped bid list with its summary header."""
    summary = bid_list.summary
    lines = [
        "Bid List",
        "=" * RULE_WIDTH,
        f"Bids: {summary.total_bids}  Emails: {summary.total_emails}",
        f"Overdue: {summary.overdue_count}  Today: {summary.today_count}  "
        f"Upcoming: {summary.upcoming_count}",
    ]

    for group in bid_list.groups:
        lines.append("")
        lines.append(f"{group.label} ({group.count})")
        lines.append("-" * RULE_WIDTH)
        lines.extend(format_bid(bid) for bid in group.bids)

    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines)
