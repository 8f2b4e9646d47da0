"""
Probe Statistics
================

Tracks probe outcomes and round-trip times over a sliding window.
"""

from collections import deque
from datetime import timedelta


class ProbeStats:
    """Sliding-window probe statistics.

    Args:
        window: Number of recent round trips to keep for min/average.
    """

    def __init__(self, window: int = 100):
        self._rtts_ms: deque[float] = deque(maxlen=window)
        self.ok_count: int = 0
        self.fail_count: int = 0

    def record(self, round_trip: timedelta):
        """Record a successful probe's round trip."""
        self._rtts_ms.append(round_trip / timedelta(milliseconds=1))
        self.ok_count += 1

    def record_failure(self):
        self.fail_count += 1

    @property
    def attempts(self) -> int:
        return self.ok_count + self.fail_count

    @property
    def min_rtt_ms(self) -> float:
        return min(self._rtts_ms) if self._rtts_ms else 0.0

    @property
    def avg_rtt_ms(self) -> float:
        return sum(self._rtts_ms) / len(self._rtts_ms) if self._rtts_ms else 0.0

    def __str__(self) -> str:
        return (
            f"ok={self.ok_count} failed={self.fail_count} "
            f"rtt_min={self.min_rtt_ms:.1f}ms "
            f"rtt_avg={self.avg_rtt_ms:.1f}ms"
        )
