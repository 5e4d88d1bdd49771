"""Tests for retry policies, backoff and timeouts."""

from __future__ import annotations

import asyncio

import pytest

from aui import ConstantBackoff, ExponentialBackoff, HandlerError, InputValidationError, RetryPolicy, ToolTimeoutError
from aui.foundation.config import RetrySettings
from aui.runtime.resilience import execute_with_timeout
from aui.runtime.retry import execute_with_retry


def test_exponential_backoff_doubles() -> None:
    backoff = ExponentialBackoff(base=0.1)
    assert [backoff.delay(i) for i in range(4)] == pytest.approx([0.1, 0.2, 0.4, 0.8])


def test_exponential_backoff_capped() -> None:
    assert ExponentialBackoff(base=1.0, max_delay=3.0).delay(5) == 3.0


def test_jitter_stays_in_range() -> None:
    backoff = ExponentialBackoff(base=1.0, jitter=True)
    assert all(0.5 <= backoff.delay(0) <= 1.5 for _ in range(50))


def test_constant_backoff() -> None:
    assert ConstantBackoff(0.25).delay(7) == 0.25


def test_policy_from_settings_defaults() -> None:
    policy = RetryPolicy.from_settings(4)
    assert [policy.get_delay(i) for i in range(3)] == pytest.approx([1.0, 2.0, 4.0])


def test_policy_delay_override() -> None:
    policy = RetryPolicy.from_settings(3, delay_ms=50, settings=RetrySettings(max_delay_ms=80))
    assert [policy.get_delay(i) for i in range(3)] == pytest.approx([0.05, 0.08, 0.08])


def test_policy_constant_strategy() -> None:
    policy = RetryPolicy.from_settings(4, delay_ms=200, settings=RetrySettings(strategy="constant"))
    assert isinstance(policy.backoff, ConstantBackoff)
    assert [policy.get_delay(i) for i in range(3)] == pytest.approx([0.2, 0.2, 0.2])


def test_should_retry() -> None:
    policy = RetryPolicy(max_attempts=3)
    err = HandlerError("t", RuntimeError("x"))
    assert policy.should_retry(err, 0)
    assert policy.should_retry(err, 1)
    assert not policy.should_retry(err, 2)
    assert not policy.should_retry(InputValidationError("bad"), 0)
    assert policy.should_retry(ToolTimeoutError("t", 10), 0)


class TestExecuteWithRetry:
    @pytest.mark.asyncio
    async def test_retries_until_success(self) -> None:
        attempts = 0

        async def op() -> str:
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                raise HandlerError("t", ConnectionError("down"))
            return "ok"

        policy = RetryPolicy(max_attempts=3, backoff=ConstantBackoff(0))
        assert await execute_with_retry(op, policy, "t") == "ok"
        assert attempts == 3

    @pytest.mark.asyncio
    async def test_non_retryable_propagates(self) -> None:
        attempts = 0

        async def op() -> None:
            nonlocal attempts
            attempts += 1
            raise ValueError("not retryable")

        with pytest.raises(ValueError):
            await execute_with_retry(op, RetryPolicy(max_attempts=5, backoff=ConstantBackoff(0)), "t")
        assert attempts == 1

    @pytest.mark.asyncio
    async def test_logs_attempts(self, caplog: pytest.LogCaptureFixture) -> None:
        async def op() -> None:
            raise HandlerError("t", RuntimeError("boom"))

        with caplog.at_level("WARNING", logger="aui.retry"), pytest.raises(HandlerError):
            await execute_with_retry(op, RetryPolicy(max_attempts=2, backoff=ConstantBackoff(0)), "t")
        assert "Attempt 1/2 failed" in caplog.text


class TestTimeout:
    @pytest.mark.asyncio
    async def test_no_limit(self) -> None:
        async def op() -> int:
            return 1
        assert await execute_with_timeout(op, None, "t") == 1

    @pytest.mark.asyncio
    async def test_expiry_cancels_awaiting_handler(self) -> None:
        cancelled = asyncio.Event()

        async def op() -> None:
            try:
                await asyncio.sleep(1)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(ToolTimeoutError, match="10ms"):
            await execute_with_timeout(op, 10, "t")
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_inner_timeout_error_passes_through(self) -> None:
        async def op() -> None:
            raise ToolTimeoutError("inner", 5)

        with pytest.raises(ToolTimeoutError) as exc:
            await execute_with_timeout(op, 1000, "outer")
        assert exc.value.tool_name == "inner"
