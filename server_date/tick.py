"""
Tick Alignment
==============

Samples repeatedly, with a delay between probes, until the server's
reported second changes between two consecutive samples. The instant the
server's clock ticked is then bracketed by those two exchanges:

    a.request_time ... [a stamped :01] ... tick ... [b stamped :02] ... b.response_time

which pins the fractional second the Date header cannot carry.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from .errors import ConfigurationError, TickNotObservedError
from .estimator import estimate
from .sample import SAMPLE_COUNT, Estimate, Sample
from .sampler import HttpSampler, Sampler

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_DELAY = 0.1
DEFAULT_MAX_ATTEMPTS = 50


async def sample_after_delay(
    sampler: Sampler, delay: float, sleep: Sleep = asyncio.sleep
) -> Sample:
    """Wait `delay` seconds, then take one sample."""
    await sleep(delay)
    return await sampler()


def has_captured_tick(previous: Sample, current: Sample) -> bool:
    """True if the server's reported second changed between two samples."""
    return previous.server_time != current.server_time


def _check_alignment_options(delay: float, max_attempts: int):
    if delay < 0:
        raise ConfigurationError(f"delay must be >= 0, got {delay}")
    if max_attempts < 1:
        raise ConfigurationError(f"max_attempts must be >= 1, got {max_attempts}")


async def align_to_tick(
    sampler: Sampler,
    delay: float = DEFAULT_DELAY,
    samples: Iterable[Sample] = (),
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Sleep = asyncio.sleep,
) -> List[Sample]:
    """Sample until two consecutive samples straddle a server tick.

    Args:
        sampler:      Async no-arg callable returning a Sample.
        delay:        Seconds to wait before each probe. Longer delays mean
                      fewer requests but a wider bracket around the tick.
        samples:      Earlier samples to continue from (copied, not mutated).
        max_attempts: Probes allowed before giving up.
        sleep:        Delay collaborator, asyncio.sleep by default.

    Returns:
        All samples, oldest first; the last two straddle the tick.

    Raises:
        TickNotObservedError: No tick after max_attempts probes.
        ConfigurationError:   Negative delay or max_attempts < 1.
    """
    _check_alignment_options(delay, max_attempts)

    collected = list(samples)
    for attempt in range(1, max_attempts + 1):
        try:
            sample = await sample_after_delay(sampler, delay, sleep)
        except Exception as e:
            logger.warning(f"Tick sample {attempt}/{max_attempts} failed: {e}")
            continue

        collected.append(sample)
        if len(collected) >= 2 and has_captured_tick(collected[-2], collected[-1]):
            logger.info(
                f"Tick captured after {attempt} attempts: "
                f"{collected[-2].server_time.isoformat()} -> "
                f"{collected[-1].server_time.isoformat()}"
            )
            return collected

    raise TickNotObservedError(max_attempts, collected)


def estimate_from_tick(samples: Sequence[Sample]) -> Optional[Estimate]:
    """Estimate from the most recent pair of samples straddling a tick.

    The server reached `after.server_time` locally somewhere in
    [before.request_time, after.response_time]; the midpoint is taken as
    the tick and half the bracket as the uncertainty.

    Returns:
        The Estimate, or None if no adjacent pair differs in server time.
    """
    for before, after in zip(reversed(samples[:-1]), reversed(samples[1:])):
        if not has_captured_tick(before, after):
            continue
        half_bracket = (after.response_time - before.request_time) / 2
        local_tick = before.request_time + half_bracket
        offset = after.server_time - local_tick
        return Estimate(
            date=after.response_time + offset,
            offset=offset,
            uncertainty=half_bracket,
        )
    return None


async def get_aligned_server_date(
    url: Optional[str] = None,
    fetch_sample: Optional[Sampler] = None,
    delay: float = DEFAULT_DELAY,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Sleep = asyncio.sleep,
) -> Optional[Estimate]:
    """Coarse estimate refined by tick alignment, whichever is tighter.

    If no tick is observed the coarse estimate is returned.
    """
    if fetch_sample is None and not url:
        raise ConfigurationError("Either url or fetch_sample is required")
    _check_alignment_options(delay, max_attempts)

    sampler = fetch_sample or HttpSampler(url)
    try:
        best = await estimate(sampler, SAMPLE_COUNT)
        try:
            samples = await align_to_tick(
                sampler, delay, max_attempts=max_attempts, sleep=sleep
            )
        except TickNotObservedError as e:
            logger.warning(f"Keeping coarse estimate: {e}")
            return best

        refined = estimate_from_tick(samples)
        if refined is not None and refined.better_than(best):
            logger.info(f"Refined estimate: {refined}")
            return refined
        return best
    finally:
        if fetch_sample is None:
            await sampler.close()
