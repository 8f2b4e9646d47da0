"""
Samples and Estimates
=====================

Data types shared by the sampler, estimator and tick aligner.

All instants are timezone-aware UTC datetimes; all durations are timedeltas.

  Sample:
    request_time    local clock, immediately before the request is issued
    response_time   local clock, immediately after the response arrives
    server_time     server's Date header, whole seconds only

  Estimate:
    date            best guess at server "now" at response_time
    offset          date - response_time (positive = server ahead)
    uncertainty     error bound on date
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional


# =================
# CONSTANTS
# =================

# The Date header only carries whole seconds
GRANULARITY = timedelta(seconds=1)
HALF_GRANULARITY = GRANULARITY / 2

# Probes per estimate in the default path
SAMPLE_COUNT = 10


def utc_now() -> datetime:
    """Current local wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def whole_seconds(value: datetime) -> datetime:
    """Drop the sub-second part of an instant."""
    return value.replace(microsecond=0)


# =================
# SAMPLE
# =================

@dataclass(frozen=True)
class Sample:
    """One timing probe against the server."""
    request_time: datetime
    response_time: datetime
    server_time: datetime

    def __post_init__(self):
        if self.response_time < self.request_time:
            raise ValueError(
                f"response_time {self.response_time.isoformat()} precedes "
                f"request_time {self.request_time.isoformat()}"
            )
        if self.server_time.microsecond:
            object.__setattr__(self, "server_time", whole_seconds(self.server_time))

    @property
    def round_trip(self) -> timedelta:
        return self.response_time - self.request_time

    @property
    def uncertainty(self) -> timedelta:
        """Half the round trip plus the half-second lost to the Date header."""
        return self.round_trip / 2 + HALF_GRANULARITY

    def to_estimate(self) -> "Estimate":
        """Coarse estimate: the server's second is centred at +0.5s."""
        date = self.server_time + HALF_GRANULARITY
        return Estimate(
            date=date,
            offset=date - self.response_time,
            uncertainty=self.uncertainty,
        )


# =================
# ESTIMATE
# =================

@dataclass(frozen=True)
class Estimate:
    """Best approximation of the server clock."""
    date: datetime
    offset: timedelta
    uncertainty: timedelta

    def now(self, clock: Callable[[], datetime] = utc_now) -> datetime:
        """Estimated server time right now, from the local clock."""
        return clock() + self.offset

    def better_than(self, other: Optional["Estimate"]) -> bool:
        """True if strictly tighter than `other` (or `other` is missing)."""
        return other is None or self.uncertainty < other.uncertainty

    def as_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "offset_ms": self.offset / timedelta(milliseconds=1),
            "uncertainty_ms": self.uncertainty / timedelta(milliseconds=1),
        }

    def __str__(self) -> str:
        offset_ms = self.offset / timedelta(milliseconds=1)
        uncertainty_ms = self.uncertainty / timedelta(milliseconds=1)
        return (
            f"date={self.date.isoformat()} "
            f"offset={offset_ms:+.1f}ms "
            f"uncertainty=±{uncertainty_ms:.1f}ms"
        )
