"""Tests for best-of-N estimation."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from server_date import (
    BadResponseError,
    ConfigurationError,
    ProbeStats,
    SAMPLE_COUNT,
    TransportError,
    estimate,
    get_server_date,
)
from conftest import make_sample


class TestEstimate:
    @pytest.mark.asyncio
    async def test_lower_uncertainty_sample_wins(self):
        first = make_sample(start_ms=0, rtt_ms=600, server_second=0)
        second = make_sample(start_ms=1000, rtt_ms=100, server_second=1)
        sampler = AsyncMock(side_effect=[first, second])

        result = await estimate(sampler, sample_count=2)

        assert result == second.to_estimate()
        assert result.uncertainty == timedelta(milliseconds=550)

    @pytest.mark.asyncio
    async def test_tie_keeps_earliest(self):
        first = make_sample(start_ms=0, rtt_ms=100, server_second=0)
        second = make_sample(start_ms=2000, rtt_ms=100, server_second=2)
        sampler = AsyncMock(side_effect=[first, second])

        result = await estimate(sampler, sample_count=2)

        assert result == first.to_estimate()

    @pytest.mark.asyncio
    async def test_never_worse_than_any_successful_sample(self):
        rtts = [300, 80, 450, 120, 80, 900, 60, 200, 61, 700]
        samples = [
            make_sample(start_ms=i * 1000, rtt_ms=rtt, server_second=i)
            for i, rtt in enumerate(rtts)
        ]
        sampler = AsyncMock(side_effect=samples)

        result = await estimate(sampler)

        assert sampler.await_count == SAMPLE_COUNT
        assert all(result.uncertainty <= s.uncertainty for s in samples)
        assert result == samples[6].to_estimate()

    @pytest.mark.asyncio
    async def test_failures_are_skipped(self):
        good = make_sample(rtt_ms=200)
        sampler = AsyncMock(side_effect=[
            TransportError("unreachable"),
            BadResponseError("Bad date sample from server: 503 Service Unavailable", 503),
            good,
            RuntimeError("boom"),
        ])
        stats = ProbeStats()

        result = await estimate(sampler, sample_count=4, stats=stats)

        assert result == good.to_estimate()
        assert sampler.await_count == 4
        assert stats.ok_count == 1
        assert stats.fail_count == 3

    @pytest.mark.asyncio
    async def test_all_failures_give_none(self):
        sampler = AsyncMock(side_effect=TransportError("down"))

        result = await estimate(sampler)

        assert result is None
        assert sampler.await_count == SAMPLE_COUNT

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, caplog):
        sampler = AsyncMock(side_effect=[TransportError("down"), make_sample()])

        with caplog.at_level("WARNING"):
            await estimate(sampler, sample_count=2)

        assert "Sample 1/2 failed: down" in caplog.text

    @pytest.mark.asyncio
    async def test_zero_sample_count_rejected(self):
        with pytest.raises(ConfigurationError):
            await estimate(AsyncMock(), sample_count=0)

    @pytest.mark.asyncio
    async def test_non_callable_sampler_rejected(self):
        with pytest.raises(ConfigurationError):
            await estimate("https://example.com")


class TestGetServerDate:
    @pytest.mark.asyncio
    async def test_uses_fetch_sample_override(self):
        sampler = AsyncMock(return_value=make_sample(rtt_ms=40))

        result = await get_server_date(fetch_sample=sampler)

        assert sampler.await_count == SAMPLE_COUNT
        assert result.uncertainty == timedelta(milliseconds=520)

    @pytest.mark.asyncio
    async def test_deterministic_sampler_is_idempotent(self):
        samples = [make_sample(start_ms=i * 10, rtt_ms=100 - i) for i in range(SAMPLE_COUNT)]

        first = await get_server_date(fetch_sample=AsyncMock(side_effect=samples))
        second = await get_server_date(fetch_sample=AsyncMock(side_effect=samples))

        assert first == second

    @pytest.mark.asyncio
    async def test_requires_url_or_sampler(self):
        with pytest.raises(ConfigurationError):
            await get_server_date()
