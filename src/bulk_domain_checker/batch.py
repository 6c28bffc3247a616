"""
Batch Executor - concurrent lookups for one batch of domains

Every domain in a batch is checked at the same time, each bounded by its
own timeout. Individual failures are recorded, never raised, so a batch
always produces one outcome per domain.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from .resolvers import LookupMalformedResponse, LookupNetworkError, LookupTimeout

logger = logging.getLogger(__name__)


class LookupService(Protocol):
    """Anything that can judge a single domain."""

    async def check_availability(self, domain: str) -> bool:
        ...


class ErrorKind(str, Enum):
    """Why a lookup produced no verdict."""
    TIMEOUT = "timeout"
    NETWORK = "network"
    MALFORMED = "malformed"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class LookupOutcome:
    """Tagged lookup result: either a verdict or an error kind."""
    available: Optional[bool] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @classmethod
    def ok(cls, available: bool) -> "LookupOutcome":
        return cls(available=available)

    @classmethod
    def err(cls, kind: ErrorKind, message: str = "") -> "LookupOutcome":
        return cls(error=kind, message=message)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def collapse(self) -> bool:
        """Failed lookups count as registered."""
        return bool(self.available) if self.is_ok else False


def classify_error(error: BaseException) -> ErrorKind:
    """Map a lookup exception onto the error taxonomy."""
    if isinstance(error, (LookupTimeout, asyncio.TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(error, LookupNetworkError):
        return ErrorKind.NETWORK
    if isinstance(error, LookupMalformedResponse):
        return ErrorKind.MALFORMED
    return ErrorKind.UNEXPECTED


def collapse_outcomes(outcomes: dict[str, LookupOutcome]) -> dict[str, bool]:
    """Turn tagged outcomes into plain availability flags."""
    return {domain: outcome.collapse() for domain, outcome in outcomes.items()}


class BatchExecutor:
    """
    Runs one batch of domains through a lookup service.

    Lookups within the batch are not bounded by a semaphore: the batch size
    itself is the concurrency limit.
    """

    def __init__(self, service: LookupService):
        """
        Initialize executor.

        Args:
            service: Lookup service used for every domain
        """
        self.service = service

    async def _lookup(self, domain: str, timeout_seconds: float) -> LookupOutcome:
        try:
            available = await asyncio.wait_for(
                self.service.check_availability(domain),
                timeout=timeout_seconds,
            )
        except Exception as e:
            kind = classify_error(e)
            logger.debug(f"Lookup failed for {domain} ({kind.value}): {e}")
            return LookupOutcome.err(kind, str(e))
        return LookupOutcome.ok(bool(available))

    async def run_outcomes(
        self,
        domains: Sequence[str],
        timeout_ms: int,
    ) -> dict[str, LookupOutcome]:
        """
        Check every domain in the batch concurrently.

        Args:
            domains: Domains in this batch
            timeout_ms: Per-lookup timeout in milliseconds

        Returns:
            Mapping of domain -> LookupOutcome, in batch order
        """
        if not domains:
            return {}

        timeout_seconds = timeout_ms / 1000.0
        outcomes = await asyncio.gather(
            *[self._lookup(domain, timeout_seconds) for domain in domains]
        )

        failed = sum(1 for outcome in outcomes if not outcome.is_ok)
        if failed:
            logger.warning(f"{failed}/{len(domains)} lookups in batch failed; counted as registered")

        return dict(zip(domains, outcomes))

    async def run_batch(self, domains: Sequence[str], timeout_ms: int) -> dict[str, bool]:
        """
        Check every domain in the batch and return plain verdicts.

        Args:
            domains: Domains in this batch
            timeout_ms: Per-lookup timeout in milliseconds

        Returns:
            Mapping of domain -> True (available) / False (registered or failed)
        """
        return collapse_outcomes(await self.run_outcomes(domains, timeout_ms))
