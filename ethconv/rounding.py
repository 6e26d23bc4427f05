"""
============================================================================
Ether Numeric Conversion Engine - Rounding Policy
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)

Two caller-visible rounding modes:
- HALF_DOWN: display rounding, ties go toward zero
- DOWN: truncation toward zero, used for explicit round-down requests

A decimal-place count of zero or None is a no-op. It does NOT round to an
integer.

Sums, differences and products are exact: their context is widened to the
operand digits instead of rounding at the configured precision. Only
division and explicit quantization ever drop digits.

============================================================================
"""

from decimal import Decimal, ROUND_DOWN, ROUND_HALF_DOWN, ROUND_HALF_UP
from enum import Enum
from typing import Optional

from ethconv.config import get_conversion_config


class RoundingMode(Enum):
    """
    Caller-selectable rounding modes.

    Reliability Level: SOVEREIGN TIER
    """
    HALF_DOWN = "HALF_DOWN"
    DOWN = "DOWN"

    @property
    def decimal_rounding(self) -> str:
        """The matching decimal module rounding constant."""
        if self is RoundingMode.HALF_DOWN:
            return ROUND_HALF_DOWN
        if self is RoundingMode.DOWN:
            return ROUND_DOWN
        raise AssertionError(f"Unhandled rounding mode: {self!r}")


def _integer_digits(value: Decimal) -> int:
    """Digits left of the point, at least one."""
    return max(value.adjusted(), 0) + 1


def quantize_places(value: Decimal, places: int, rounding: str) -> Decimal:
    """
    Quantize value to exactly `places` decimal places.

    The context is widened to the integer digits of value, so large
    magnitudes are never refused by quantize().

    Args:
        value: Magnitude to quantize
        places: Number of decimal places (0 means integer)
        rounding: decimal module rounding constant

    Returns:
        Quantized Decimal (may carry trailing zeros)
    """
    context = get_conversion_config().arithmetic_context(
        _integer_digits(value) + places + 1
    )
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=rounding, context=context)


def strip_trailing_zeros(value: Decimal) -> Decimal:
    """Drop redundant fractional zeros without switching to exponent form."""
    if value == value.to_integral_value():
        # int() also collapses -0 to 0
        return Decimal(int(value))
    context = get_conversion_config().arithmetic_context(len(value.as_tuple().digits))
    return value.normalize(context)


# =============================================================================
# Exact Arithmetic
# =============================================================================

def add_magnitudes(first: Decimal, second: Decimal) -> Decimal:
    """first + second, never rounded whatever the operand sizes."""
    lowest = min(first.as_tuple().exponent, second.as_tuple().exponent)
    highest = max(first.adjusted(), second.adjusted())
    context = get_conversion_config().arithmetic_context(highest - lowest + 2)
    return context.add(first, second)


def subtract_magnitudes(first: Decimal, second: Decimal) -> Decimal:
    """first - second, never rounded whatever the operand sizes."""
    return add_magnitudes(first, second.copy_negate())


def multiply_magnitudes(first: Decimal, second: Decimal) -> Decimal:
    """first * second, never rounded whatever the operand sizes."""
    digits = len(first.as_tuple().digits) + len(second.as_tuple().digits)
    context = get_conversion_config().arithmetic_context(digits)
    return context.multiply(first, second)


def round_magnitude(
    value: Decimal,
    places: Optional[int],
    mode: RoundingMode = RoundingMode.HALF_DOWN,
) -> Decimal:
    """
    Round a magnitude to `places` decimal places.

    Args:
        value: Magnitude to round
        places: Decimal places; 0 or None returns value unchanged
        mode: RoundingMode (default: HALF_DOWN)

    Returns:
        Rounded magnitude without trailing zeros
    """
    if not places:
        return value
    return strip_trailing_zeros(quantize_places(value, places, mode.decimal_rounding))


def divide_magnitudes(dividend: Decimal, divisor: Decimal) -> Decimal:
    """
    Divide two magnitudes, keeping the configured number of decimal places.

    The context always holds every integer digit of the quotient plus the
    kept places, so large quotients are not cut short.

    Raises:
        decimal.DivisionByZero: For x / 0 (a ZeroDivisionError subclass)
        decimal.InvalidOperation: For 0 / 0
        Neither case is coerced to zero or Infinity.
    """
    config = get_conversion_config()
    quotient_digits = max(dividend.adjusted() - divisor.adjusted(), 0) + 2
    context = config.arithmetic_context(quotient_digits + config.division_places + 1)
    quotient = context.divide(dividend, divisor)
    return strip_trailing_zeros(
        quantize_places(quotient, config.division_places, ROUND_HALF_UP)
    )
