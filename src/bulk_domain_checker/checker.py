"""
Domain Availability Checker

Decides whether a single domain is available by asking several independent
DNS-over-HTTPS resolvers at once.

HOW IT WORKS:
1. Query every resolver in parallel for a broad (ANY) record lookup
2. Collect the answer section from each one
3. The domain is AVAILABLE only if every resolver came back empty and no
   SOA record was seen anywhere. Anything else means REGISTERED.

A resolver that fails makes the whole lookup fail; the caller decides what
a failed lookup means (the batch executor treats it as registered).
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence

from .config import config
from .resolvers import DnsRecord, DnsResolver, DomainLookupError, default_resolvers

logger = logging.getLogger(__name__)


def judge_availability(answer_sets: Iterable[Sequence[DnsRecord]]) -> bool:
    """
    Combine answer sections from several resolvers into one verdict.

    Args:
        answer_sets: One answer section per resolver

    Returns:
        True only if all sections are empty and none holds an SOA record
    """
    answer_sets = list(answer_sets)
    has_records = any(len(records) > 0 for records in answer_sets)
    has_soa = any(record.is_soa for records in answer_sets for record in records)
    return not has_records and not has_soa


class AvailabilityChecker:
    """
    Lookup service for a single domain.

    Wraps a fixed set of resolvers; all of them are consulted for every
    domain.
    """

    def __init__(
        self,
        resolvers: Optional[List[DnsResolver]] = None,
        record_type: Optional[str] = None,
    ):
        """
        Initialize checker.

        Args:
            resolvers: Resolvers to consult (defaults to Google + Cloudflare)
            record_type: DNS record type to request (defaults to config)
        """
        self.resolvers = resolvers if resolvers is not None else default_resolvers()
        if not self.resolvers:
            raise ValueError("AvailabilityChecker needs at least one resolver")
        self.record_type = record_type or config.resolvers.record_type

    async def check_availability(self, domain: str) -> bool:
        """
        Check whether a domain looks unregistered.

        Args:
            domain: Validated domain name

        Returns:
            True if available, False if registered

        Raises:
            DomainLookupError: When any resolver call fails or returns bad data
        """
        try:
            answer_sets = await asyncio.gather(
                *[resolver.query(domain, self.record_type) for resolver in self.resolvers]
            )
        except DomainLookupError:
            raise
        except Exception as e:
            raise DomainLookupError(f"Failed to check domain {domain}: {e}") from e

        available = judge_availability(answer_sets)
        logger.debug(f"{domain}: {'available' if available else 'registered'}")
        return available

    async def close(self):
        """Close all resolvers."""
        for resolver in self.resolvers:
            await resolver.close()

    async def __aenter__(self) -> "AvailabilityChecker":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
