"""
DNS-over-HTTPS resolver implementation

Talks to public resolvers that speak the DNS-JSON format
(Google Public DNS, Cloudflare 1.1.1.1).
"""

import logging
from typing import List, Optional

import httpx

from .base import (
    DnsResolver, DnsRecord, LookupMalformedResponse, LookupNetworkError,
    LookupTimeout, parse_answer_section
)
from ..config import config

logger = logging.getLogger(__name__)


class DoHResolver(DnsResolver):
    """
    Generic DNS-JSON resolver over HTTPS.

    Sends GET <url>?name=<domain>&type=<type> and reads the "Answer" array.
    """

    def __init__(
        self,
        name: str,
        url: str,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize DoH resolver.

        Args:
            name: Resolver name used in logs and results
            url: DNS-JSON endpoint
            timeout: HTTP timeout in seconds (falls back to config)
            user_agent: User-Agent header (falls back to config)
            transport: Optional httpx transport (used by tests)
        """
        self._name = name
        self.url = url
        self.timeout = timeout if timeout is not None else config.resolvers.http_timeout_seconds
        self.user_agent = user_agent or config.resolvers.user_agent
        self._transport = transport
        self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "Accept": "application/dns-json",
                    "User-Agent": self.user_agent,
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def name(self) -> str:
        return self._name

    async def query(self, domain: str, record_type: str = "ANY") -> List[DnsRecord]:
        """Query the resolver and return the answer records."""
        client = self._get_client()

        try:
            response = await client.get(self.url, params={"name": domain, "type": record_type})
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise LookupTimeout(f"{self.name} timed out for {domain}: {e}")
        except httpx.HTTPStatusError as e:
            raise LookupNetworkError(
                f"{self.name} returned HTTP {e.response.status_code} for {domain}"
            )
        except httpx.HTTPError as e:
            raise LookupNetworkError(f"{self.name} request failed for {domain}: {e}")
        except ValueError as e:
            raise LookupMalformedResponse(f"{self.name} returned invalid JSON for {domain}: {e}")

        records = parse_answer_section(payload)
        logger.debug(f"{self.name}: {domain} -> {len(records)} answer record(s)")
        return records

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


class GoogleDoHResolver(DoHResolver):
    """Google Public DNS (dns.google)."""

    def __init__(self, url: Optional[str] = None, **kwargs):
        super().__init__("google", url or config.resolvers.google_url, **kwargs)


class CloudflareDoHResolver(DoHResolver):
    """Cloudflare 1.1.1.1 (cloudflare-dns.com)."""

    def __init__(self, url: Optional[str] = None, **kwargs):
        super().__init__("cloudflare", url or config.resolvers.cloudflare_url, **kwargs)
