"""
Mock resolver for testing

Returns configurable answers without making network calls.
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .base import DnsResolver, DnsRecord, LookupNetworkError


def registered_answer(domain: str) -> List[DnsRecord]:
    """A typical answer for a registered domain: one A record."""
    return [DnsRecord(name=f"{domain}.", type=1, data="93.184.216.34", ttl=300)]


def soa_answer(domain: str) -> List[DnsRecord]:
    """An answer holding only the zone's SOA record."""
    return [DnsRecord(
        name=f"{domain}.",
        type=6,
        data=f"ns1.{domain}. hostmaster.{domain}. 1 7200 3600 1209600 300",
        ttl=300,
    )]


@dataclass
class MockResolver(DnsResolver):
    """
    Mock resolver for testing.

    By default every domain comes back empty (looks available). Use
    `registered` to mark specific domains, or `answer_generator` for
    full control.
    """

    _name: str = "mock"
    registered: set = field(default_factory=set)
    answer_generator: Optional[Callable[[str], List[DnsRecord]]] = None
    delay_seconds: float = 0.0
    fail_rate: float = 0.0  # Probability of raising an error
    error_factory: Callable[[str], Exception] = lambda domain: LookupNetworkError(
        f"Simulated mock resolver failure for {domain}"
    )
    queries: list = field(default_factory=list)

    @property
    def name(self) -> str:
        return self._name

    async def query(self, domain: str, record_type: str = "ANY") -> List[DnsRecord]:
        """Return a mock answer section."""
        self.queries.append(domain)

        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if self.fail_rate > 0 and random.random() < self.fail_rate:
            raise self.error_factory(domain)

        if self.answer_generator is not None:
            return self.answer_generator(domain)
        if domain in self.registered:
            return registered_answer(domain)
        return []
