"""
DNS resolvers for bulk-domain-checker

Supports multiple DNS-over-HTTPS resolvers with a common interface.
Resolvers: Google Public DNS, Cloudflare
"""

from .base import (
    DnsResolver, DnsRecord, DomainLookupError, LookupTimeout,
    LookupNetworkError, LookupMalformedResponse, SOA_RECORD_TYPE,
    parse_answer_section
)
from .doh import DoHResolver, GoogleDoHResolver, CloudflareDoHResolver
from .mock import MockResolver

__all__ = [
    # Base classes and types
    "DnsResolver",
    "DnsRecord",
    "DomainLookupError",
    "LookupTimeout",
    "LookupNetworkError",
    "LookupMalformedResponse",
    "SOA_RECORD_TYPE",
    "parse_answer_section",
    # Resolvers
    "DoHResolver",
    "GoogleDoHResolver",
    "CloudflareDoHResolver",
    "MockResolver",
    # Factories
    "get_resolver",
    "default_resolvers",
]


def get_resolver(name: str, **kwargs) -> DnsResolver:
    """
    Factory function to get a resolver by name.

    Args:
        name: Resolver name ('google', 'cloudflare', 'mock')
        **kwargs: Resolver-specific options

    Returns:
        Configured DnsResolver instance

    Raises:
        ValueError: If resolver name is unknown
    """
    resolvers = {
        "google": GoogleDoHResolver,
        "cloudflare": CloudflareDoHResolver,
        "mock": MockResolver,
    }

    if name not in resolvers:
        raise ValueError(f"Unknown resolver: {name}. Valid options: {list(resolvers.keys())}")

    return resolvers[name](**kwargs)


def default_resolvers() -> list[DnsResolver]:
    """The two independent public resolvers every lookup consults."""
    return [GoogleDoHResolver(), CloudflareDoHResolver()]
