"""
Server Date Package
===================

Estimates a remote HTTP server's wall-clock time from request/response
timing and the server's Date header, with an explicit uncertainty bound.

Modules:
    sample     - Sample and Estimate types, constants
    sampler    - HTTP HEAD probe reading the Date header
    estimator  - Best-of-N estimation over repeated samples
    tick       - Tick alignment and refinement
    stats      - Probe statistics
    errors     - Exception types
"""

from .sample import (
    GRANULARITY,
    HALF_GRANULARITY,
    SAMPLE_COUNT,
    Sample,
    Estimate,
    utc_now,
)
from .errors import (
    ServerDateError,
    TransportError,
    BadResponseError,
    TickNotObservedError,
    ConfigurationError,
)
from .sampler import HttpSampler, Sampler, parse_http_date
from .stats import ProbeStats
from .estimator import estimate, get_server_date
from .tick import (
    align_to_tick,
    estimate_from_tick,
    get_aligned_server_date,
    has_captured_tick,
    sample_after_delay,
)

__all__ = [
    "GRANULARITY",
    "HALF_GRANULARITY",
    "SAMPLE_COUNT",
    "Sample",
    "Estimate",
    "utc_now",
    "ServerDateError",
    "TransportError",
    "BadResponseError",
    "TickNotObservedError",
    "ConfigurationError",
    "HttpSampler",
    "Sampler",
    "parse_http_date",
    "ProbeStats",
    "estimate",
    "get_server_date",
    "align_to_tick",
    "estimate_from_tick",
    "get_aligned_server_date",
    "has_captured_tick",
    "sample_after_delay",
]
