"""
bulk-domain-checker configuration

Batch sizing, resolver endpoints, timeouts and export defaults live here.
Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field


@dataclass
class DispatchConfig:
    """How domains are fanned out"""
    batch_size: int = int(os.getenv("BATCH_SIZE", "100"))
    concurrent_batches: int = int(os.getenv("CONCURRENT_BATCHES", "3"))
    timeout_ms: int = int(os.getenv("LOOKUP_TIMEOUT_MS", "5000"))


@dataclass
class ResolverConfig:
    """DNS-over-HTTPS endpoints"""
    google_url: str = os.getenv("GOOGLE_DOH_URL", "https://dns.google/resolve")
    cloudflare_url: str = os.getenv("CLOUDFLARE_DOH_URL", "https://cloudflare-dns.com/dns-query")
    record_type: str = os.getenv("DNS_RECORD_TYPE", "ANY")
    http_timeout_seconds: float = float(os.getenv("DOH_HTTP_TIMEOUT", "10.0"))
    user_agent: str = os.getenv("USER_AGENT", "bulk-domain-checker/0.1")


@dataclass
class ExportConfig:
    """Result export"""
    filename: str = os.getenv("EXPORT_FILENAME", "domain-check-results.csv")


@dataclass
class Config:
    """Master config, import this"""
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    resolvers: ResolverConfig = field(default_factory=ResolverConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Quick presets
    @classmethod
    def fast_mode(cls) -> "Config":
        """For development/testing: small batches, short timeouts"""
        cfg = cls()
        cfg.dispatch.batch_size = 10
        cfg.dispatch.concurrent_batches = 2
        cfg.dispatch.timeout_ms = 1000
        cfg.resolvers.http_timeout_seconds = 1.0
        return cfg


# Singleton
config = Config()
