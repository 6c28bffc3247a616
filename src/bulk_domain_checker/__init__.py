"""
bulk-domain-checker: asynchronous bulk domain availability checker.

Fans a domain list out over public DNS-over-HTTPS resolvers in bounded
batches and reports which names look unregistered.
"""

__version__ = "0.1.0"

from .validator import validate_domain, filter_valid_domains
from .checker import AvailabilityChecker, judge_availability
from .batch import BatchExecutor, LookupOutcome, ErrorKind, collapse_outcomes
from .aggregator import fold_wave, summarize
from .models import DomainResult, DomainStatus, ProcessingStats, RunStatus, Settings
from .orchestrator import (
    BatchDispatcher,
    CancellationToken,
    Run,
    partition_batches,
    quick_check,
)
from .export import export_csv, parse_csv, write_csv, export_domains
from .config import config

__all__ = [
    # Validation
    "validate_domain",
    "filter_valid_domains",
    # Lookup
    "AvailabilityChecker",
    "judge_availability",
    # Batches
    "BatchExecutor",
    "LookupOutcome",
    "ErrorKind",
    "collapse_outcomes",
    # Aggregation
    "fold_wave",
    "summarize",
    # Models
    "DomainResult",
    "DomainStatus",
    "ProcessingStats",
    "RunStatus",
    "Settings",
    # Dispatcher
    "BatchDispatcher",
    "CancellationToken",
    "Run",
    "partition_batches",
    "quick_check",
    # Export
    "export_csv",
    "parse_csv",
    "write_csv",
    "export_domains",
    # Config
    "config",
]
