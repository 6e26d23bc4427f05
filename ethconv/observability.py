"""
============================================================================
Ether Numeric Conversion Engine - Prometheus Counters
============================================================================

Reliability Level: SOVEREIGN TIER (Mission-Critical)
Side Effects: Updates Prometheus metrics registry

METRICS EXPOSED
---------------
- ethconv_missing_rate_zero_total: conversion_util calls that returned the
  permissive 0 because currencies differ and no rate was loaded yet
- ethconv_errors_total: conversion errors raised by the facade, by error code

A permissive zero and a genuine zero conversion are indistinguishable by
value alone. The first counter is the signal that separates them.

============================================================================
"""

import logging

from prometheus_client import Counter

# Configure module logger
logger = logging.getLogger(__name__)


# ============================================================================
# PROMETHEUS METRICS DEFINITIONS
# ============================================================================

MISSING_RATE_ZERO = Counter(
    "ethconv_missing_rate_zero_total",
    "conversion_util calls answered with 0 because no conversion rate was supplied",
    ["from_currency", "to_currency"]
)

CONVERSION_ERRORS = Counter(
    "ethconv_errors_total",
    "Conversion errors raised by the facade",
    ["error_code"]
)


# ============================================================================
# METRIC UPDATE FUNCTIONS
# ============================================================================

def record_missing_rate_zero(from_currency: object, to_currency: object) -> None:
    """Count one permissive-zero answer for a currency pair."""
    MISSING_RATE_ZERO.labels(
        from_currency=str(from_currency),
        to_currency=str(to_currency),
    ).inc()


def record_conversion_error(error_code: str) -> None:
    """Count one raised conversion error."""
    CONVERSION_ERRORS.labels(error_code=error_code).inc()
    logger.debug(f"[NUMERIC-METRICS] Conversion error recorded | error_code={error_code}")
