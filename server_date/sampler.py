"""
HTTP Date Sampler
=================

Issues a bodiless, uncached HEAD request to the server and turns the
exchange into a Sample: local time just before the request, local time
just after the response headers, and the server's Date header.

Any async callable taking no arguments and returning a Sample can stand in
for HttpSampler wherever a sampler is expected.
"""

import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Awaitable, Callable, Optional

import aiohttp

from .errors import BadResponseError, TransportError
from .sample import Sample, utc_now, whole_seconds

logger = logging.getLogger(__name__)

Sampler = Callable[[], Awaitable[Sample]]

DEFAULT_TIMEOUT = 5.0

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
}


def parse_http_date(value: str) -> datetime:
    """Parse an HTTP Date header into an aware UTC datetime (whole seconds).

    Raises:
        ValueError: If the value is not a valid HTTP date.
    """
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, IndexError) as e:
        raise ValueError(f"Invalid HTTP date {value!r}") from e
    if parsed is None:
        raise ValueError(f"Invalid HTTP date {value!r}")
    if parsed.tzinfo is None:
        # RFC 7231 dates are always GMT
        parsed = parsed.replace(tzinfo=timezone.utc)
    return whole_seconds(parsed.astimezone(timezone.utc))


class HttpSampler:
    """Timing probe against an HTTP server's Date header.

    Args:
        url:     Resource to probe.
        session: Optional shared aiohttp session (not closed by this sampler).
        timeout: Total timeout per probe, seconds.
        clock:   Local clock, returns an aware UTC datetime.
    """

    def __init__(
        self,
        url: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.url = url
        self.timeout = timeout
        self._clock = clock
        self._session = session
        self._owns_session = session is None

    # ---- Session lifecycle ---------------------------------------------------

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the session if this sampler created it."""
        if self._owns_session and self._session is not None:
            if not self._session.closed:
                await self._session.close()
            self._session = None

    async def __aenter__(self) -> "HttpSampler":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    # ---- Probe ---------------------------------------------------------------

    async def __call__(self) -> Sample:
        """Take one sample.

        Raises:
            BadResponseError: Non-success HTTP status.
            TransportError:   Network failure, timeout, or no usable Date header.
        """
        session = self._get_session()
        request_time = self._clock()
        try:
            async with session.head(
                self.url,
                headers=NO_CACHE_HEADERS,
                allow_redirects=False,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                response_time = self._clock()
                if not resp.ok:
                    raise BadResponseError(
                        f"Bad date sample from server: {resp.status} {resp.reason}",
                        status=resp.status,
                    )
                date_header = resp.headers.get("Date")
        except aiohttp.ClientError as e:
            raise TransportError(f"Request to {self.url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Request to {self.url} timed out after {self.timeout}s"
            ) from e

        if not date_header:
            raise TransportError(f"Response from {self.url} has no Date header")
        try:
            server_time = parse_http_date(date_header)
        except ValueError as e:
            raise TransportError(str(e)) from e

        sample = Sample(
            request_time=request_time,
            response_time=response_time,
            server_time=server_time,
        )
        logger.debug(
            f"Sample: rtt={sample.round_trip.total_seconds() * 1000:.1f}ms "
            f"server={server_time.isoformat()}"
        )
        return sample
