"""Seller inference from email recipients.

The responsible salesperson is whoever on the seller's own domain received
the bid request. TO recipients are the strongest signal, then CC, then BCC.
"""

from __future__ import annotations

import re

from bid_lens.schemas.email import EmailAddress
from bid_lens.schemas.extraction import InferredSeller, Seller

SELLER_DOMAIN = "buildvision.io"

TO_CONFIDENCE = 0.95
CC_CONFIDENCE = 0.85
BCC_CONFIDENCE = 0.75

NAME_SEPARATOR_PATTERN = re.compile(r"[._-]")
SELLER_ID_PATTERN = re.compile(r"[^a-z0-9]")


def is_seller_email(email: str, domain: str = SELLER_DOMAIN) -> bool:
    """Check whether an address belongs to the seller domain."""
    _, _, address_domain = email.lower().partition("@")
    return address_domain == domain.lower()


def infer_name_from_email(email: str) -> str:
    """Derive a display name from the mailbox part of an address.

    Examples:
        "john.doe@buildvision.io" -> "John Doe"
        "jdoe@buildvision.io" -> "Jdoe"
    """
    username = email.split("@")[0]
    parts = [part for part in NAME_SEPARATOR_PATTERN.sub(" ", username).split(" ") if part]
    return " ".join(part[:1].upper() + part[1:].lower() for part in parts)


def generate_seller_id(email: str) -> str:
    """Generate a stable seller ID from an email address."""
    return "seller_" + SELLER_ID_PATTERN.sub("_", email.lower().strip())


def create_seller(address: EmailAddress) -> Seller:
    """Build a Seller from a recipient, preferring its display name."""
    return Seller(
        id=generate_seller_id(address.email),
        name=address.name or infer_name_from_email(address.email),
        email=address.email.lower(),
        territory=None,
    )


def find_seller(addresses: list[EmailAddress], domain: str = SELLER_DOMAIN) -> Seller | None:
    """Return the first seller-domain recipient as a Seller, if any."""
    for address in addresses:
        if is_seller_email(address.email, domain):
            return create_seller(address)
    return None


def find_all_sellers(addresses: list[EmailAddress], domain: str = SELLER_DOMAIN) -> list[Seller]:
    """Return every seller-domain recipient as a Seller."""
    return [create_seller(a) for a in addresses if is_seller_email(a.email, domain)]


def has_seller_recipient(
    to: list[EmailAddress],
    cc: list[EmailAddress],
    bcc: list[EmailAddress] | None = None,
    domain: str = SELLER_DOMAIN,
) -> bool:
    """Check whether any recipient is on the seller domain."""
    return any(is_seller_email(a.email, domain) for a in [*to, *cc, *(bcc or [])])


def infer_seller_from_email(
    to: list[EmailAddress],
    cc: list[EmailAddress],
    bcc: list[EmailAddress] | None = None,
    domain: str = SELLER_DOMAIN,
) -> InferredSeller:
    """Infer the seller responsible for an email.

    Args:
        to: TO recipients.
        cc: CC recipients.
        bcc: BCC recipients.
        domain: Seller email domain.

    Returns:
        InferredSeller; ``seller`` is None with confidence 0 when no
        recipient is on the seller domain.
    """
    for field, addresses, confidence in (
        ("TO", to, TO_CONFIDENCE),
        ("CC", cc, CC_CONFIDENCE),
        ("BCC", bcc or [], BCC_CONFIDENCE),
    ):
        seller = find_seller(addresses, domain)
        if seller is not None:
            return InferredSeller(
                seller=seller,
                source="email_recipient",
                confidence=confidence,
                reasoning=f"Found seller in {field} field: {seller.email}",
            )

    return InferredSeller(
        seller=None,
        source="email_recipient",
        confidence=0.0,
        reasoning=f"No @{domain} email address found in recipients",
    )
