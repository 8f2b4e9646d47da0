"""
Server Date Estimator
=====================

Takes repeated samples and keeps the one with the lowest uncertainty.

Uncertainty of a sample:
    round_trip / 2 + 0.5s

The server stamped its Date somewhere between request and response, so half
the round trip bounds the latency error. The Date header has no sub-second
part, which adds a fixed half second. Taking the minimum over several probes
approximates the least noisy path observed.
"""

import logging
from typing import Optional

from .errors import ConfigurationError
from .sample import SAMPLE_COUNT, Estimate
from .sampler import HttpSampler, Sampler
from .stats import ProbeStats

logger = logging.getLogger(__name__)


async def estimate(
    sampler: Sampler,
    sample_count: int = SAMPLE_COUNT,
    stats: Optional[ProbeStats] = None,
) -> Optional[Estimate]:
    """Probe the server `sample_count` times and return the tightest estimate.

    A failed probe is logged and skipped; it never aborts the run.

    Args:
        sampler:      Async no-arg callable returning a Sample.
        sample_count: Number of probes.
        stats:        Optional ProbeStats to record into.

    Returns:
        The lowest-uncertainty Estimate (earliest wins ties), or None if every
        probe failed.

    Raises:
        ConfigurationError: Non-callable sampler or sample_count < 1.
    """
    if not callable(sampler):
        raise ConfigurationError(f"sampler must be callable, got {sampler!r}")
    if sample_count < 1:
        raise ConfigurationError(f"sample_count must be >= 1, got {sample_count}")
    stats = stats if stats is not None else ProbeStats(window=sample_count)

    best: Optional[Estimate] = None
    for attempt in range(1, sample_count + 1):
        try:
            sample = await sampler()
        except Exception as e:
            stats.record_failure()
            logger.warning(f"Sample {attempt}/{sample_count} failed: {e}")
            continue

        stats.record(sample.round_trip)
        candidate = sample.to_estimate()
        if candidate.better_than(best):
            best = candidate
            logger.debug(f"Sample {attempt}/{sample_count}: new best {best}")

    if best is None:
        logger.warning(f"No usable estimate: all {sample_count} samples failed")
    else:
        logger.info(f"Estimate: {best} ({stats})")
    return best


async def get_server_date(
    url: Optional[str] = None,
    fetch_sample: Optional[Sampler] = None,
) -> Optional[Estimate]:
    """Estimate the server's clock.

    Args:
        url:          Resource to probe with the built-in HttpSampler.
        fetch_sample: Sampler override; when given, `url` is not used.

    Returns:
        The best Estimate, or None if no probe succeeded.
    """
    if fetch_sample is not None:
        return await estimate(fetch_sample, SAMPLE_COUNT)
    if not url:
        raise ConfigurationError("Either url or fetch_sample is required")

    async with HttpSampler(url) as sampler:
        return await estimate(sampler, SAMPLE_COUNT)
