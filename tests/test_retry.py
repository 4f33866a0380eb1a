"""Tests for the async retry decorator."""

from unittest.mock import AsyncMock, patch

import pytest

from rootly_tui.exceptions import (
    ApiAuthenticationError,
    ApiConnectionError,
    ApiRateLimitError,
    ApiResponseError,
)
from rootly_tui.utils.retry import compute_backoff, retry


@pytest.fixture
def no_sleep():
    with patch("rootly_tui.utils.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


class TestComputeBackoff:
    def test_exponential_with_jitter(self):
        assert 0.5 <= compute_backoff(1, 0.5, 5.0) <= 0.55
        assert 1.0 <= compute_backoff(2, 0.5, 5.0) <= 1.1

    def test_capped(self):
        assert compute_backoff(10, 0.5, 5.0) <= 5.5


class TestRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self, no_sleep):
        func = AsyncMock(return_value="ok")
        assert await retry()(func)() == "ok"
        assert func.await_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_transient_errors(self, no_sleep):
        func = AsyncMock(side_effect=[ApiConnectionError("down"), ApiResponseError("boom", status_code=502), "ok"])
        func.__name__ = "fetch"
        result = await retry(max_retries=2)(func)()

        assert result == "ok"
        assert func.await_count == 3
        assert no_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, no_sleep):
        func = AsyncMock(side_effect=ApiConnectionError("down"))
        func.__name__ = "fetch"

        with pytest.raises(ApiConnectionError):
            await retry(max_retries=2)(func)()

        assert func.await_count == 3

    @pytest.mark.asyncio
    async def test_permanent_errors_not_retried(self, no_sleep):
        func = AsyncMock(side_effect=ApiAuthenticationError("Invalid API key"))
        func.__name__ = "fetch"

        with pytest.raises(ApiAuthenticationError):
            await retry()(func)()

        assert func.await_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self, no_sleep):
        func = AsyncMock(side_effect=ApiResponseError("Not found", status_code=404))
        func.__name__ = "fetch"

        with pytest.raises(ApiResponseError):
            await retry()(func)()
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_honours_retry_after(self, no_sleep):
        func = AsyncMock(side_effect=[ApiRateLimitError(retry_after=3), "ok"])
        func.__name__ = "fetch"

        await retry(min_backoff=0.5, max_backoff=5.0)(func)()

        assert no_sleep.await_args.args[0] == 3
