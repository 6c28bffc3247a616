"""
Batch Dispatcher

The main run loop that coordinates:
1. Partitioning the domain list into fixed-size batches
2. Running up to N batches at a time ("waves") through the batch executor
3. Folding each finished wave into results and running totals
4. Stopping early when the run is cancelled

Waves are strictly sequential; cancellation is checked before each one.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from .aggregator import fold_wave
from .batch import BatchExecutor, LookupOutcome, LookupService
from .checker import AvailabilityChecker
from .models import DomainResult, ProcessingStats, RunStatus, Settings, utcnow
from .resolvers import DnsResolver, MockResolver
from .validator import filter_valid_domains

logger = logging.getLogger(__name__)


def partition_batches(domains: Sequence[str], batch_size: int) -> list[list[str]]:
    """
    Split domains into consecutive batches of `batch_size`.

    The last batch may be smaller. Order is preserved and nothing is
    duplicated or dropped.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [list(domains[i:i + batch_size]) for i in range(0, len(domains), batch_size)]


class CancellationToken:
    """One-shot cancellation flag bound to a single run."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        self._cancelled = True

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


@dataclass
class Run:
    """
    One checking run over a validated domain list.

    Owned by the caller and handed to the dispatcher. Starting a run again
    after it finished resets its results and counters.
    """
    domains: list[str]
    settings: Settings = field(default_factory=Settings.from_config)
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: RunStatus = RunStatus.IDLE
    stats: ProcessingStats = field(init=False)
    results: list[DomainResult] = field(default_factory=list)
    batches: list[list[str]] = field(default_factory=list)
    waves_completed: int = 0
    token: Optional[CancellationToken] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def __post_init__(self):
        # Each domain may land in only one batch
        unique = list(dict.fromkeys(self.domains))
        if len(unique) < len(self.domains):
            logger.warning(
                f"Run {self.run_id}: dropped {len(self.domains) - len(unique)} duplicate domains"
            )
        self.domains = unique
        self.stats = ProcessingStats(total=len(self.domains))

    @classmethod
    def from_raw(cls, raw: Iterable[str], settings: Optional[Settings] = None) -> "Run":
        """Create a run from unvalidated input; invalid names are dropped."""
        domains = filter_valid_domains(raw)
        if settings is None:
            return cls(domains=domains)
        return cls(domains=domains, settings=settings)

    @property
    def is_running(self) -> bool:
        return self.status == RunStatus.RUNNING

    @property
    def total_waves(self) -> int:
        if not self.batches:
            return 0
        per_wave = self.settings.concurrent_batches
        return (len(self.batches) + per_wave - 1) // per_wave

    @property
    def available_domains(self) -> list[str]:
        return [r.domain for r in self.results if r.is_available]

    def cancel(self) -> bool:
        """
        Request cooperative cancellation.

        Returns:
            True if a running run was signalled
        """
        if self.token is None:
            return False
        self.token.cancel()
        return True

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "settings": {
                "batch_size": self.settings.batch_size,
                "concurrent_batches": self.settings.concurrent_batches,
                "timeout_ms": self.settings.timeout_ms,
            },
            "stats": self.stats.to_dict(),
            "batches": len(self.batches),
            "waves_completed": self.waves_completed,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "results": [r.to_dict() for r in self.results],
        }


WaveCallback = Callable[[Run, list[DomainResult]], None]


class BatchDispatcher:
    """
    Runs a domain list through the batch executor, one wave at a time.

    At most one run is active per dispatcher. Peak concurrency is
    batch_size * concurrent_batches lookups.
    """

    def __init__(
        self,
        service: Optional[LookupService] = None,
        executor: Optional[BatchExecutor] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            service: Lookup service (defaults to an AvailabilityChecker over
                the public resolvers)
            executor: Pre-built executor; overrides `service`
        """
        if executor is None:
            executor = BatchExecutor(service or AvailabilityChecker())
        self.executor = executor
        self._active: Optional[Run] = None

    @property
    def is_running(self) -> bool:
        return self._active is not None

    @property
    def active_run(self) -> Optional[Run]:
        return self._active

    def cancel(self) -> bool:
        """Cancel the active run, if any."""
        if self._active is None:
            return False
        return self._active.cancel()

    async def start(self, run: Run, on_wave: Optional[WaveCallback] = None) -> Run:
        """
        Execute a run to completion or cancellation.

        Args:
            run: Run to execute
            on_wave: Optional callback(run, new_results) after each wave

        Returns:
            The same run, in a terminal state (or untouched if it, or another
            run on this dispatcher, is already running)
        """
        if self._active is not None:
            logger.warning(
                f"Run {self._active.run_id} is still active; ignoring start of {run.run_id}"
            )
            return run
        if run.status == RunStatus.RUNNING:
            logger.warning(f"Run {run.run_id} is already running elsewhere; ignoring start")
            return run

        self._active = run
        try:
            await self._execute(run, on_wave)
        except asyncio.CancelledError:
            run.status = RunStatus.CANCELLED
            raise
        finally:
            run.token = None
            run.finished_at = utcnow()
            self._active = None

        return run

    async def _execute(self, run: Run, on_wave: Optional[WaveCallback]):
        settings = run.settings

        run.status = RunStatus.RUNNING
        run.stats = run.stats.reset()
        run.results = []
        run.waves_completed = 0
        run.token = CancellationToken()
        run.started_at = utcnow()
        run.finished_at = None
        run.batches = partition_batches(run.domains, settings.batch_size)

        waves = partition_batches(run.batches, settings.concurrent_batches)
        logger.info(
            f"Run {run.run_id}: {len(run.domains)} domains, {len(run.batches)} batches, "
            f"{len(waves)} waves"
        )

        for wave_num, wave in enumerate(waves, start=1):
            if run.token.cancelled:
                run.status = RunStatus.CANCELLED
                logger.info(f"Run {run.run_id} cancelled before wave {wave_num}/{len(waves)}")
                return

            try:
                outcomes = await self.run_wave(wave, settings.timeout_ms)
            except Exception:
                logger.exception(f"Wave {wave_num} of run {run.run_id} failed; no results recorded")
                outcomes = {}

            new_results, new_stats = fold_wave(outcomes, run.stats)
            # Results and stats change together, with no await in between
            run.results = run.results + new_results
            run.stats = new_stats
            run.waves_completed = wave_num

            if on_wave is not None:
                try:
                    on_wave(run, new_results)
                except Exception:
                    logger.exception(f"Wave callback raised after wave {wave_num}")

        run.status = RunStatus.COMPLETED
        logger.info(
            f"Run {run.run_id} completed: {run.stats.available} available, "
            f"{run.stats.registered} registered"
        )

    async def run_wave(
        self,
        wave: Sequence[Sequence[str]],
        timeout_ms: int,
    ) -> dict[str, LookupOutcome]:
        """
        Run a set of batches concurrently and merge their outcomes.

        Args:
            wave: Batches to run together
            timeout_ms: Per-lookup timeout

        Returns:
            domain -> LookupOutcome, in the order batches were supplied
        """
        batch_outcomes = await asyncio.gather(
            *[self.executor.run_outcomes(batch, timeout_ms) for batch in wave]
        )

        merged = {}
        for outcomes in batch_outcomes:
            merged.update(outcomes)
        return merged


# Convenience function for quick checks
async def quick_check(
    domains: Iterable[str],
    settings: Optional[Settings] = None,
    resolvers: Optional[list[DnsResolver]] = None,
    on_wave: Optional[WaveCallback] = None,
    use_mock: bool = False,
) -> Run:
    """
    Validate and check a domain list with minimal setup.

    Args:
        domains: Raw domain strings
        settings: Batch settings (defaults to config)
        resolvers: Resolvers to consult (defaults to Google + Cloudflare)
        on_wave: Optional progress callback
        use_mock: Use a mock resolver instead of the network

    Returns:
        Finished Run
    """
    if use_mock and resolvers is None:
        resolvers = [MockResolver()]

    run = Run.from_raw(domains, settings)

    async with AvailabilityChecker(resolvers) as checker:
        dispatcher = BatchDispatcher(checker)
        return await dispatcher.start(run, on_wave=on_wave)
