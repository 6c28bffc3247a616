"""
Tests for the batch executor.
"""

import asyncio
import time

import pytest

from bulk_domain_checker.batch import (
    BatchExecutor,
    ErrorKind,
    LookupOutcome,
    classify_error,
    collapse_outcomes,
)
from bulk_domain_checker.resolvers import (
    DomainLookupError,
    LookupMalformedResponse,
    LookupNetworkError,
    LookupTimeout,
)


class StubService:
    """Lookup service with scripted per-domain behaviour."""

    def __init__(self, answers=None, delays=None, errors=None, default=True):
        self.answers = answers or {}
        self.delays = delays or {}
        self.errors = errors or {}
        self.default = default
        self.calls = []

    async def check_availability(self, domain: str) -> bool:
        self.calls.append(domain)
        delay = self.delays.get(domain, 0)
        if delay:
            await asyncio.sleep(delay)
        if domain in self.errors:
            raise self.errors[domain]
        return self.answers.get(domain, self.default)


class TestLookupOutcome:
    """Tests for the tagged outcome type."""

    def test_ok_collapses_to_value(self):
        """Test successful outcomes keep their verdict."""
        assert LookupOutcome.ok(True).collapse() is True
        assert LookupOutcome.ok(False).collapse() is False

    def test_err_collapses_to_registered(self):
        """Test failed outcomes count as registered."""
        outcome = LookupOutcome.err(ErrorKind.TIMEOUT, "slow")

        assert outcome.is_ok is False
        assert outcome.collapse() is False

    def test_collapse_outcomes(self):
        """Test mapping collapse keeps keys and order."""
        outcomes = {
            "a-site.com": LookupOutcome.ok(True),
            "b-site.com": LookupOutcome.err(ErrorKind.NETWORK),
            "c-site.com": LookupOutcome.ok(False),
        }

        assert collapse_outcomes(outcomes) == {
            "a-site.com": True,
            "b-site.com": False,
            "c-site.com": False,
        }
        assert list(collapse_outcomes(outcomes)) == ["a-site.com", "b-site.com", "c-site.com"]


class TestClassifyError:
    """Tests for the error taxonomy."""

    @pytest.mark.parametrize("error, kind", [
        (LookupTimeout("t"), ErrorKind.TIMEOUT),
        (asyncio.TimeoutError(), ErrorKind.TIMEOUT),
        (LookupNetworkError("n"), ErrorKind.NETWORK),
        (LookupMalformedResponse("m"), ErrorKind.MALFORMED),
        (DomainLookupError("x"), ErrorKind.UNEXPECTED),
        (RuntimeError("x"), ErrorKind.UNEXPECTED),
    ])
    def test_classification(self, error, kind):
        """Test each exception maps to its error kind."""
        assert classify_error(error) == kind


class TestBatchExecutor:
    """Tests for BatchExecutor."""

    @pytest.mark.asyncio
    async def test_all_available(self):
        """Test stub returning True gives True for every domain."""
        domains = ["a-site.com", "b-site.com", "c-site.com"]
        executor = BatchExecutor(StubService(default=True))

        result = await executor.run_batch(domains, timeout_ms=1000)

        assert result == {d: True for d in domains}

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        """Test empty batch returns empty mapping."""
        executor = BatchExecutor(StubService())

        assert await executor.run_batch([], timeout_ms=1000) == {}

    @pytest.mark.asyncio
    async def test_slow_lookups_time_out_as_registered(self):
        """Test lookups past the timeout become False within the time bound."""
        service = StubService(default=True, delays={"slow-one.com": 2.0, "slow-two.com": 2.0})
        executor = BatchExecutor(service)

        start = time.monotonic()
        result = await executor.run_batch(
            ["fast-one.com", "slow-one.com", "slow-two.com"],
            timeout_ms=100,
        )
        elapsed = time.monotonic() - start

        assert result == {"fast-one.com": True, "slow-one.com": False, "slow-two.com": False}
        assert elapsed < 1.0

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self):
        """Test the batch takes about one lookup's time, not the sum."""
        domains = [f"site{i}.com" for i in range(20)]
        service = StubService(delays={d: 0.1 for d in domains})
        executor = BatchExecutor(service)

        start = time.monotonic()
        await executor.run_batch(domains, timeout_ms=5000)

        assert time.monotonic() - start < 1.0
        assert sorted(service.calls) == sorted(domains)

    @pytest.mark.asyncio
    async def test_errors_do_not_abort_batch(self):
        """Test a failing domain does not affect the others."""
        service = StubService(
            answers={"good-one.com": True},
            errors={"bad-one.com": LookupNetworkError("down")},
        )
        executor = BatchExecutor(service)

        result = await executor.run_batch(["good-one.com", "bad-one.com"], timeout_ms=1000)

        assert result == {"good-one.com": True, "bad-one.com": False}

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self):
        """Test arbitrary exceptions are recorded, not raised."""
        service = StubService(errors={"weird-one.com": ZeroDivisionError()})
        executor = BatchExecutor(service)

        outcomes = await executor.run_outcomes(["weird-one.com"], timeout_ms=1000)

        assert outcomes["weird-one.com"].error == ErrorKind.UNEXPECTED

    @pytest.mark.asyncio
    async def test_outcomes_carry_error_kinds(self):
        """Test run_outcomes exposes the error taxonomy."""
        service = StubService(
            answers={"ok-site.com": False},
            delays={"slow-site.com": 1.0},
            errors={
                "net-site.com": LookupNetworkError("down"),
                "bad-site.com": LookupMalformedResponse("junk"),
            },
        )
        executor = BatchExecutor(service)

        outcomes = await executor.run_outcomes(
            ["ok-site.com", "slow-site.com", "net-site.com", "bad-site.com"],
            timeout_ms=50,
        )

        assert outcomes["ok-site.com"] == LookupOutcome.ok(False)
        assert outcomes["slow-site.com"].error == ErrorKind.TIMEOUT
        assert outcomes["net-site.com"].error == ErrorKind.NETWORK
        assert outcomes["bad-site.com"].error == ErrorKind.MALFORMED

    @pytest.mark.asyncio
    async def test_result_order_follows_input(self):
        """Test mapping order is the batch order, not completion order."""
        domains = ["late-site.com", "early-site.com"]
        service = StubService(delays={"late-site.com": 0.05})
        executor = BatchExecutor(service)

        result = await executor.run_batch(domains, timeout_ms=1000)

        assert list(result) == domains
