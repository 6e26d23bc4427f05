"""
Unit Tests for Denomination Scaling, Currency Rates and Rounding

Reliability Level: SOVEREIGN TIER

Tests the leaf components under NumericValue:
- Fixed WEI / GWEI / ETH multipliers
- Mandatory unit rounding applied while denominating
- Exchange-rate application and NUM-004 on a missing rate
- HALF_DOWN / DOWN rounding, with 0 decimals as a no-op
"""

import pytest
import os
from decimal import Decimal, DivisionByZero, InvalidOperation

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from ethconv.currency import apply_rate, rate_multiplier, require_rate
from ethconv.denomination import (
    ETH_MULTIPLIER,
    GWEI_MULTIPLIER,
    WEI_MULTIPLIER,
    EtherDenomination,
    denominate,
    multiplier_for,
    normalize,
    scaling_places_for,
)
from ethconv.errors import ArgumentError, MissingRateError, NumericErrorCode
from ethconv.rounding import RoundingMode, divide_magnitudes, round_magnitude


# =============================================================================
# Test Denomination Scaler
# =============================================================================

class TestDenominationScaler:
    """normalize() into ETH terms, denominate() back out with rounding."""

    def test_multipliers(self) -> None:
        assert WEI_MULTIPLIER == Decimal(10) ** 18
        assert GWEI_MULTIPLIER == Decimal(10) ** 9
        assert ETH_MULTIPLIER == Decimal(1)
        assert multiplier_for(EtherDenomination.WEI) == WEI_MULTIPLIER

    def test_scaling_places(self) -> None:
        assert scaling_places_for(EtherDenomination.WEI) == 0
        assert scaling_places_for(EtherDenomination.GWEI) == 9
        assert scaling_places_for(EtherDenomination.ETH) == 9

    def test_normalize_wei(self) -> None:
        assert normalize(Decimal(10 ** 18), EtherDenomination.WEI) == Decimal(1)

    def test_normalize_is_exact(self) -> None:
        assert normalize(Decimal("9358749494527040"), EtherDenomination.WEI) == Decimal(
            "0.00935874949452704"
        )

    def test_denominate_wei_rounds_to_integer(self) -> None:
        assert denominate(Decimal("0.0000000000000000015"), EtherDenomination.WEI) == Decimal(2)

    def test_denominate_eth_rounds_to_nine_places(self) -> None:
        assert denominate(Decimal("0.00935874949452704"), EtherDenomination.ETH) == Decimal(
            "0.009358749"
        )

    def test_denominate_gwei_rounds_to_nine_places(self) -> None:
        assert denominate(Decimal("1E-19"), EtherDenomination.GWEI) == Decimal(0)

    def test_coerce_names(self) -> None:
        assert EtherDenomination.coerce("gwei") is EtherDenomination.GWEI
        assert EtherDenomination.coerce(None) is None
        with pytest.raises(ArgumentError):
            EtherDenomination.coerce("finney")


# =============================================================================
# Test Currency Converter
# =============================================================================

class TestCurrencyConverter:

    def test_apply_rate(self) -> None:
        assert apply_rate(Decimal(2), 468.58) == Decimal("937.16")

    def test_apply_inverted_rate(self) -> None:
        assert apply_rate(Decimal(10), 4, invert=True) == Decimal("2.5")

    def test_float_rate_goes_through_text(self) -> None:
        assert rate_multiplier(0.1) == Decimal("0.1")

    def test_inverting_zero_rate(self) -> None:
        with pytest.raises(DivisionByZero):
            rate_multiplier(0, invert=True)

    def test_require_rate_passes_value_through(self) -> None:
        assert require_rate("ETH", "USD", 2) == 2

    def test_require_rate_missing(self) -> None:
        with pytest.raises(MissingRateError) as exc_info:
            require_rate("ETH", "USD", None)
        assert exc_info.value.error_code == NumericErrorCode.RATE_MISSING
        assert "requires a conversion_rate" in str(exc_info.value)


# =============================================================================
# Test Rounding Policy
# =============================================================================

class TestRoundingPolicy:

    def test_half_down_ties_toward_zero(self) -> None:
        assert round_magnitude(Decimal("1.25"), 1) == Decimal("1.2")
        assert round_magnitude(Decimal("-1.25"), 1) == Decimal("-1.2")
        assert round_magnitude(Decimal("1.251"), 1) == Decimal("1.3")

    def test_down_truncates(self) -> None:
        assert round_magnitude(Decimal("1.29"), 1, RoundingMode.DOWN) == Decimal("1.2")
        assert round_magnitude(Decimal("-1.29"), 1, RoundingMode.DOWN) == Decimal("-1.2")

    def test_zero_places_is_noop(self) -> None:
        value = Decimal("1.75")
        assert round_magnitude(value, 0) is value
        assert round_magnitude(value, None) is value

    def test_no_trailing_zeros(self) -> None:
        assert str(round_magnitude(Decimal("1"), 6)) == "1"
        assert str(round_magnitude(Decimal("468.580"), 2)) == "468.58"

    def test_division_keeps_twenty_places(self) -> None:
        assert divide_magnitudes(Decimal(1), Decimal(3)) == Decimal("0." + "3" * 20)

    def test_division_by_zero_is_not_coerced(self) -> None:
        with pytest.raises(ZeroDivisionError):
            divide_magnitudes(Decimal(1), Decimal(0))

    def test_zero_by_zero(self) -> None:
        with pytest.raises(InvalidOperation):
            divide_magnitudes(Decimal(0), Decimal(0))
