"""
Domain name syntax checks

Applied once at ingestion time so that only plausible names ever reach
the lookup pipeline.
"""

import logging
import re
from typing import Iterable

logger = logging.getLogger(__name__)

# Single label of 3-63 chars (no leading/trailing hyphen), then an alphabetic TLD
DOMAIN_PATTERN = re.compile(r"[a-zA-Z0-9][a-zA-Z0-9-]{1,61}[a-zA-Z0-9]\.[a-zA-Z]{2,}")


def validate_domain(domain: str) -> bool:
    """
    Check whether a string is a syntactically plausible domain name.

    Args:
        domain: Candidate name (e.g., "example.com")

    Returns:
        True if the name is accepted
    """
    if not isinstance(domain, str):
        return False
    return DOMAIN_PATTERN.fullmatch(domain) is not None


def filter_valid_domains(raw: Iterable[str]) -> list[str]:
    """
    Normalize a raw domain list and drop anything that fails validation.

    Entries are stripped and lower-cased; duplicates keep their first
    position. Rejected entries are dropped silently.

    Args:
        raw: Domain strings as entered or imported

    Returns:
        Ordered list of unique, valid domains
    """
    accepted = []
    seen = set()

    for item in raw:
        domain = item.strip().lower() if isinstance(item, str) else item
        if not validate_domain(domain):
            logger.debug(f"Dropping invalid domain: {item!r}")
            continue
        if domain in seen:
            continue
        seen.add(domain)
        accepted.append(domain)

    return accepted
