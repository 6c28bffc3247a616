"""
Base protocol for DNS resolvers

Defines the interface every DNS-over-HTTPS backend implements, the record
type they return, and the lookup error hierarchy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

# DNS RR type code for a zone-authority record
SOA_RECORD_TYPE = 6


class DomainLookupError(Exception):
    """Base exception for lookup errors."""
    pass


class LookupTimeout(DomainLookupError):
    """Resolver did not answer in time."""
    pass


class LookupNetworkError(DomainLookupError):
    """Request could not be completed (connection, HTTP status)."""
    pass


class LookupMalformedResponse(DomainLookupError):
    """Resolver answered with data we cannot interpret."""
    pass


@dataclass(frozen=True)
class DnsRecord:
    """A single record from a resolver's answer section."""
    name: str
    type: int
    data: str = ""
    ttl: Optional[int] = None

    @property
    def is_soa(self) -> bool:
        return self.type == SOA_RECORD_TYPE

    @classmethod
    def from_dict(cls, data: Any) -> "DnsRecord":
        """
        Build a record from one entry of a DNS-JSON "Answer" array.

        Raises:
            LookupMalformedResponse: If the entry is not a record object
        """
        if not isinstance(data, dict):
            raise LookupMalformedResponse(f"Answer record is not an object: {data!r}")

        rr_type = data.get("type")
        # bool is an int subclass but never a valid RR type
        if not isinstance(rr_type, int) or isinstance(rr_type, bool):
            raise LookupMalformedResponse(f"Answer record has no numeric type: {data!r}")

        ttl = data.get("TTL")
        return cls(
            name=str(data.get("name", "")),
            type=rr_type,
            data=str(data.get("data", "")),
            ttl=ttl if isinstance(ttl, int) else None,
        )


def parse_answer_section(payload: Any) -> List[DnsRecord]:
    """
    Extract answer records from a DNS-JSON response body.

    A missing or null "Answer" key means the resolver returned no records.

    Args:
        payload: Decoded JSON body

    Returns:
        List of DnsRecord objects (possibly empty)

    Raises:
        LookupMalformedResponse: If the body does not have the expected shape
    """
    if not isinstance(payload, dict):
        raise LookupMalformedResponse(f"Expected a JSON object, got {type(payload).__name__}")

    answer = payload.get("Answer")
    if answer is None:
        return []
    if not isinstance(answer, list):
        raise LookupMalformedResponse(f"'Answer' is not a list: {answer!r}")

    return [DnsRecord.from_dict(record) for record in answer]


class DnsResolver(ABC):
    """
    Abstract base class for DNS resolvers.

    Resolvers must implement query() and may hold network resources that
    are released by close().
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Resolver name (e.g., 'google', 'cloudflare')."""
        pass

    @abstractmethod
    async def query(self, domain: str, record_type: str = "ANY") -> List[DnsRecord]:
        """
        Query the resolver for a domain.

        Args:
            domain: Domain name to look up
            record_type: DNS record type to request

        Returns:
            Records from the answer section (empty if none)

        Raises:
            LookupTimeout: When the resolver does not answer in time
            LookupNetworkError: On connection or HTTP errors
            LookupMalformedResponse: When the response cannot be parsed
        """
        pass

    async def close(self):
        """Release any network resources."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
