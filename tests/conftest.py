"""Shared helpers for server_date tests."""

from datetime import datetime, timedelta, timezone

import pytest

from server_date import Sample

BASE = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_sample(start_ms=0, rtt_ms=0, server_second=0):
    """Sample starting `start_ms` after BASE with a server Date of BASE + server_second."""
    request_time = BASE + timedelta(milliseconds=start_ms)
    return Sample(
        request_time=request_time,
        response_time=request_time + timedelta(milliseconds=rtt_ms),
        server_time=BASE + timedelta(seconds=server_second),
    )


async def no_sleep(delay):
    return None


@pytest.fixture
def sleeps():
    """Recording stand-in for asyncio.sleep."""
    calls = []

    async def sleep(delay):
        calls.append(delay)

    sleep.calls = calls
    return sleep
