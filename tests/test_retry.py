"""Tests for timeout translation and bounded retry of store operations."""

import asyncio

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from canonkeeper.errors import ConflictRetryable, ContinuityViolation, NotFound
from canonkeeper.utils.retry import run_retryable, run_with_timeout


class Flaky:
    """Fails with ``error`` for the first ``failures`` calls, then returns ``value``."""

    def __init__(self, failures, error, value="ok"):
        self.failures = failures
        self.error = error
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.value


class TestRunWithTimeout:
    async def test_timeout_becomes_retryable(self):
        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(ConflictRetryable, match="timed out"):
            await run_with_timeout("slow_op", slow, timeout=0.01)

    @pytest.mark.parametrize("error", [
        IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")),
        OperationalError("SELECT", {}, Exception("database is locked")),
        DBAPIError("SELECT", {}, Exception("connection reset"), connection_invalidated=True),
    ])
    async def test_transient_store_errors_become_retryable(self, error):
        with pytest.raises(ConflictRetryable):
            await run_with_timeout("op", Flaky(1, error), timeout=1)

    async def test_other_dbapi_errors_propagate(self):
        error = DBAPIError("SELECT", {}, Exception("syntax error"))
        with pytest.raises(DBAPIError):
            await run_with_timeout("op", Flaky(1, error), timeout=1)


class TestRunRetryable:
    async def test_retries_until_success(self):
        attempt = Flaky(2, ConflictRetryable("busy"))
        assert await run_retryable("op", attempt) == "ok"
        assert attempt.calls == 3

    async def test_gives_up_after_max_attempts(self):
        attempt = Flaky(10, ConflictRetryable("busy"))
        with pytest.raises(ConflictRetryable):
            await run_retryable("op", attempt)
        assert attempt.calls == 3

    @pytest.mark.parametrize("error", [
        ContinuityViolation("rejected", []),
        NotFound("Character", "c-1"),
    ])
    async def test_rule_errors_are_not_retried(self, error):
        attempt = Flaky(1, error)
        with pytest.raises(type(error)):
            await run_retryable("op", attempt)
        assert attempt.calls == 1
