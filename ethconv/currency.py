"""
============================================================================
Ether Numeric Conversion Engine - Currency Converter
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)

The exchange rate is an opaque input. This module never fetches or caches
rates. A missing rate between two different currencies is a hard error
(NUM-004); equal currencies skip the rate step entirely instead of
defaulting to 1.

============================================================================
"""

from decimal import Decimal
from typing import Optional, Union
import logging

from ethconv.errors import MissingRateError, NumericErrorCode
from ethconv.parser import NumericBase, parse
from ethconv.rounding import divide_magnitudes, multiply_magnitudes

# Configure module logger
logger = logging.getLogger(__name__)

Rate = Union[int, float, str, Decimal]


def rate_multiplier(rate: Rate, invert: bool = False) -> Decimal:
    """
    Decimal multiplier for a rate: the rate itself, or 1 / rate if inverted.

    Floats go through their decimal text, so 468.58 becomes
    Decimal("468.58") and never the binary expansion.

    Raises:
        ParseError: If the rate is not a finite decimal number (NUM-001)
        decimal.DivisionByZero: If a zero rate is inverted
    """
    multiplier = parse(rate, NumericBase.DEC)
    if invert:
        multiplier = divide_magnitudes(Decimal(1), multiplier)
    return multiplier


def require_rate(
    from_currency: Optional[str],
    to_currency: Optional[str],
    conversion_rate: Optional[Rate],
) -> Rate:
    """
    Return the conversion rate, failing when it is needed but absent.

    Raises:
        MissingRateError: If conversion_rate is None (NUM-004)
    """
    if conversion_rate is None:
        logger.error(
            f"[{NumericErrorCode.RATE_MISSING}] Conversion rate required | "
            f"from_currency={from_currency} | to_currency={to_currency}"
        )
        raise MissingRateError(
            f"Converting from {from_currency} to {to_currency} requires a "
            f"conversion_rate, but one was not provided"
        )
    return conversion_rate


def apply_rate(value: Decimal, rate: Rate, invert: bool = False) -> Decimal:
    """magnitude * rate, or magnitude / rate when inverted."""
    return multiply_magnitudes(value, rate_multiplier(rate, invert))
