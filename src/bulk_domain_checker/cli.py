"""
Command-line interface for bulk-domain-checker

Checks a list of domains against public DNS-over-HTTPS resolvers and prints
which ones look available.
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .checker import AvailabilityChecker
from .config import config
from .export import export_domains, write_csv
from .models import DomainResult, RunStatus, Settings
from .orchestrator import BatchDispatcher, Run
from .resolvers import MockResolver, default_resolvers


def collect_domains(items: List[str]) -> List[str]:
    """Expand arguments: files are read one domain per line, anything else is a domain."""
    domains = []
    for item in items:
        file_path = Path(item)
        if file_path.is_file():
            with open(file_path, "r", encoding="utf-8") as f:
                domains.extend(
                    line.strip() for line in f
                    if line.strip() and not line.lstrip().startswith("#")
                )
        else:
            domains.append(item)
    return domains


def format_domain_result(result: DomainResult) -> str:
    """Format a single domain result for terminal output."""
    if result.is_available:
        return f"\033[92m{result.domain}: ✓ AVAILABLE\033[0m"
    return f"\033[91m{result.domain}: ✗ REGISTERED\033[0m"


def print_results_summary(run: Run):
    """Print a formatted summary of a finished run."""
    available = [r for r in run.results if r.is_available]
    registered = [r for r in run.results if not r.is_available]
    stats = run.stats

    print("\n" + "=" * 60)
    print("DOMAIN CHECK RESULTS")
    print("=" * 60)

    if available:
        print(f"\nAVAILABLE ({len(available)}):")
        for result in available:
            print(f"  {format_domain_result(result)}")

    if registered:
        print(f"\nREGISTERED ({len(registered)}):")
        for result in registered:
            print(f"  {format_domain_result(result)}")

    print(f"\nStatus: {run.status.value}")
    print(f"Processed: {stats.processed}/{stats.total}")
    print(f"Available: {stats.available}  Registered: {stats.registered}  (lookup errors: {stats.errors})")
    print()


def print_progress(run: Run, new_results: List[DomainResult]):
    """Per-wave progress line on stderr."""
    stats = run.stats
    print(
        f"Wave {run.waves_completed}/{run.total_waves}: "
        f"{stats.processed}/{stats.total} checked, {stats.available} available",
        file=sys.stderr,
    )


def make_interrupt_handler(loop, dispatcher: BatchDispatcher):
    """
    First Ctrl-C cancels the run cooperatively; the handler then uninstalls
    itself so a second Ctrl-C raises KeyboardInterrupt as usual.
    """
    def on_interrupt():
        print("Cancelling after the current wave (Ctrl-C again to abort)", file=sys.stderr)
        dispatcher.cancel()
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass

    return on_interrupt


async def run_checks(args: argparse.Namespace, domains: List[str]) -> Run:
    """Build the pipeline from CLI options and execute one run."""
    settings = Settings(
        batch_size=args.batch_size,
        concurrent_batches=args.concurrent_batches,
        timeout_ms=args.timeout,
    )
    run = Run.from_raw(domains, settings)

    if not args.quiet:
        dropped = len(domains) - len(run.domains)
        if dropped:
            print(f"Skipping {dropped} invalid or duplicate entries", file=sys.stderr)

    resolvers = [MockResolver()] if args.mock else default_resolvers()

    async with AvailabilityChecker(resolvers) as checker:
        dispatcher = BatchDispatcher(checker)

        # Ctrl-C stops scheduling new waves; the current wave finishes
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, make_interrupt_handler(loop, dispatcher))
        except (NotImplementedError, RuntimeError):
            pass

        try:
            await dispatcher.start(run, on_wave=None if args.quiet else print_progress)
        finally:
            try:
                loop.remove_signal_handler(signal.SIGINT)
            except (NotImplementedError, RuntimeError):
                pass

    return run


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="bulk-domain-checker",
        description="Bulk domain availability checker using DNS-over-HTTPS",
        epilog="Example: bulk-domain-checker check example.com test.io domains.txt"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Check domain availability")
    check_parser.add_argument(
        "domains",
        nargs="+",
        help="Domain names to check, or path to file with one domain per line"
    )
    check_parser.add_argument(
        "--batch-size",
        type=int,
        default=config.dispatch.batch_size,
        help=f"Domains per batch (default: {config.dispatch.batch_size})"
    )
    check_parser.add_argument(
        "--concurrent-batches",
        type=int,
        default=config.dispatch.concurrent_batches,
        help=f"Batches run at the same time (default: {config.dispatch.concurrent_batches})"
    )
    check_parser.add_argument(
        "--timeout",
        type=int,
        default=config.dispatch.timeout_ms,
        help=f"Per-domain timeout in milliseconds (default: {config.dispatch.timeout_ms})"
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )
    check_parser.add_argument(
        "--csv",
        metavar="PATH",
        nargs="?",
        const=config.export.filename,
        help=f"Also write results as CSV (default path: {config.export.filename})"
    )
    check_parser.add_argument(
        "--only",
        choices=["available", "registered"],
        help="Print only the domains with this status, one per line"
    )
    check_parser.add_argument(
        "--mock",
        action="store_true",
        help="Use a mock resolver (no network)"
    )
    check_parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress output"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "check":
        domains = collect_domains(args.domains)
        if not domains:
            print("No domains to check", file=sys.stderr)
            sys.exit(1)

        try:
            run = asyncio.run(run_checks(args, domains))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)

        if args.csv:
            path = write_csv(run.results, args.csv)
            if not args.quiet:
                print(f"Wrote {len(run.results)} results to {path}", file=sys.stderr)

        if args.only:
            output = export_domains(run.results, args.only)
            if output:
                print(output)
        elif args.json:
            print(json.dumps(run.to_dict(), indent=2))
        else:
            print_results_summary(run)

        if run.status == RunStatus.CANCELLED:
            sys.exit(130)


if __name__ == "__main__":
    main()
