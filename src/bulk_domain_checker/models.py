"""
Shared data structures for a checking run.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .config import Config, config


class RunStatus(str, Enum):
    """Status of a checking run."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DomainStatus(str, Enum):
    """Verdict for one domain."""
    AVAILABLE = "available"
    REGISTERED = "registered"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainResult:
    """A single domain verdict, created once per domain per run."""
    domain: str
    status: DomainStatus
    timestamp: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_available(self) -> bool:
        return self.status == DomainStatus.AVAILABLE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "domain": self.domain,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ProcessingStats:
    """
    Running totals for a run.

    `errors` is a sub-tally of `registered`: failed lookups are counted as
    registered, so processed == available + registered always holds.
    """
    total: int = 0
    processed: int = 0
    available: int = 0
    registered: int = 0
    errors: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.processed)

    @property
    def progress(self) -> float:
        """Fraction of domains processed (0..1)."""
        if self.total == 0:
            return 0.0
        return self.processed / self.total

    def reset(self) -> "ProcessingStats":
        """Zero every counter except the total."""
        return ProcessingStats(total=self.total)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "processed": self.processed,
            "available": self.available,
            "registered": self.registered,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class Settings:
    """Batch sizing for one run. Constant while the run executes."""
    batch_size: int = 100
    concurrent_batches: int = 3
    timeout_ms: int = 5000

    def __post_init__(self):
        for name in ("batch_size", "concurrent_batches", "timeout_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @property
    def max_in_flight(self) -> int:
        """Upper bound on concurrent lookups."""
        return self.batch_size * self.concurrent_batches

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "Settings":
        cfg = cfg or config
        return cls(
            batch_size=cfg.dispatch.batch_size,
            concurrent_batches=cfg.dispatch.concurrent_batches,
            timeout_ms=cfg.dispatch.timeout_ms,
        )
