"""
Tests for DNS resolvers.
"""

import httpx
import pytest

from bulk_domain_checker.resolvers import (
    CloudflareDoHResolver,
    DnsRecord,
    DoHResolver,
    GoogleDoHResolver,
    LookupMalformedResponse,
    LookupNetworkError,
    LookupTimeout,
    MockResolver,
    get_resolver,
    parse_answer_section,
)


def make_resolver(handler) -> DoHResolver:
    """DoH resolver wired to an in-memory transport."""
    return DoHResolver("test", "https://doh.test/resolve", transport=httpx.MockTransport(handler))


class TestParseAnswerSection:
    """Tests for DNS-JSON parsing."""

    def test_missing_answer_is_empty(self):
        """Test NXDOMAIN-style body has no records."""
        assert parse_answer_section({"Status": 3}) == []

    def test_null_answer_is_empty(self):
        """Test explicit null Answer has no records."""
        assert parse_answer_section({"Answer": None}) == []

    def test_records_parsed(self):
        """Test answer records are converted."""
        records = parse_answer_section({
            "Status": 0,
            "Answer": [
                {"name": "example.com.", "type": 1, "TTL": 300, "data": "93.184.216.34"},
                {"name": "example.com.", "type": 6, "TTL": 300, "data": "ns.example.com."},
            ],
        })

        assert len(records) == 2
        assert records[0].type == 1
        assert records[0].ttl == 300
        assert records[1].is_soa is True

    @pytest.mark.parametrize("payload", [
        [],
        "not a dict",
        {"Answer": "nope"},
        {"Answer": ["nope"]},
        {"Answer": [{"name": "x.com.", "type": "A"}]},
        {"Answer": [{"name": "x.com.", "type": True}]},
        {"Answer": [{"name": "x.com."}]},
    ])
    def test_malformed_payloads(self, payload):
        """Test bad shapes raise LookupMalformedResponse."""
        with pytest.raises(LookupMalformedResponse):
            parse_answer_section(payload)


class TestDoHResolver:
    """Tests for the httpx-based resolver."""

    @pytest.mark.asyncio
    async def test_sends_dns_json_query(self):
        """Test request URL, params and headers."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["accept"] = request.headers.get("accept")
            return httpx.Response(200, json={"Status": 3})

        resolver = make_resolver(handler)
        try:
            records = await resolver.query("example.com", "ANY")
        finally:
            await resolver.close()

        assert records == []
        assert seen["url"].params["name"] == "example.com"
        assert seen["url"].params["type"] == "ANY"
        assert seen["accept"] == "application/dns-json"

    @pytest.mark.asyncio
    async def test_returns_records(self):
        """Test answer records are returned."""
        def handler(request):
            return httpx.Response(200, json={
                "Answer": [{"name": "example.com.", "type": 1, "data": "1.2.3.4"}],
            })

        resolver = make_resolver(handler)
        records = await resolver.query("example.com")
        await resolver.close()

        assert records == [DnsRecord(name="example.com.", type=1, data="1.2.3.4")]

    @pytest.mark.asyncio
    async def test_http_error_maps_to_network_error(self):
        """Test non-2xx status raises LookupNetworkError."""
        resolver = make_resolver(lambda request: httpx.Response(503))

        with pytest.raises(LookupNetworkError, match="503"):
            await resolver.query("example.com")
        await resolver.close()

    @pytest.mark.asyncio
    async def test_connect_error_maps_to_network_error(self):
        """Test transport failure raises LookupNetworkError."""
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        resolver = make_resolver(handler)
        with pytest.raises(LookupNetworkError):
            await resolver.query("example.com")
        await resolver.close()

    @pytest.mark.asyncio
    async def test_timeout_maps_to_lookup_timeout(self):
        """Test httpx timeouts raise LookupTimeout."""
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        resolver = make_resolver(handler)
        with pytest.raises(LookupTimeout):
            await resolver.query("example.com")
        await resolver.close()

    @pytest.mark.asyncio
    async def test_invalid_json_is_malformed(self):
        """Test non-JSON body raises LookupMalformedResponse."""
        resolver = make_resolver(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(LookupMalformedResponse):
            await resolver.query("example.com")
        await resolver.close()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        """Test close can be called twice."""
        resolver = make_resolver(lambda request: httpx.Response(200, json={}))
        await resolver.query("example.com")

        await resolver.close()
        await resolver.close()

        assert resolver._client is None

    def test_presets(self):
        """Test Google and Cloudflare presets point at their endpoints."""
        google = GoogleDoHResolver()
        cloudflare = CloudflareDoHResolver()

        assert google.name == "google"
        assert "dns.google" in google.url
        assert cloudflare.name == "cloudflare"
        assert "cloudflare-dns.com" in cloudflare.url


class TestMockResolver:
    """Tests for MockResolver."""

    @pytest.mark.asyncio
    async def test_default_is_empty(self):
        """Test unknown domains come back with no records."""
        resolver = MockResolver()

        assert await resolver.query("free-name.com") == []
        assert resolver.queries == ["free-name.com"]

    @pytest.mark.asyncio
    async def test_registered_domains(self):
        """Test registered set returns an A record."""
        resolver = MockResolver(registered={"taken.com"})
        records = await resolver.query("taken.com")

        assert len(records) == 1
        assert records[0].type == 1

    @pytest.mark.asyncio
    async def test_simulated_failure(self):
        """Test forced failures raise LookupNetworkError."""
        resolver = MockResolver(fail_rate=1.0)

        with pytest.raises(LookupNetworkError):
            await resolver.query("example.com")


class TestGetResolver:
    """Tests for the resolver factory."""

    def test_known_names(self):
        """Test factory builds each resolver type."""
        assert isinstance(get_resolver("google"), GoogleDoHResolver)
        assert isinstance(get_resolver("cloudflare"), CloudflareDoHResolver)
        assert isinstance(get_resolver("mock"), MockResolver)

    def test_unknown_name(self):
        """Test unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown resolver"):
            get_resolver("quad9")
