"""
Unit Tests for the Conversion Facade

Reliability Level: SOVEREIGN TIER

Tests conversion_util and its helpers:
- Pipeline order and the documented conversion scenarios
- Permissive zero for a missing rate (NUM-006) vs MissingRateError (NUM-004)
- Two-operand arithmetic with base validation (NUM-002)
- Comparison helpers and conversion_max returning the raw value
- Hex sums and the named WEI / GWEI / ETH conversions
"""

import pytest
import os
import logging
from decimal import Decimal, DivisionByZero

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from prometheus_client import REGISTRY

from ethconv.conversion import (
    ConversionOptions,
    add_currencies,
    add_hexes,
    conversion_greater_than,
    conversion_gte,
    conversion_less_than,
    conversion_lte,
    conversion_max,
    conversion_util,
    dec_eth_to_converted_currency,
    dec_gwei_to_hex_wei,
    dec_wei_to_dec_eth,
    divide_currencies,
    get_eth_conversion_from_wei_hex,
    get_value_from_wei_hex,
    get_wei_hex_from_decimal_value,
    hex_wei_to_dec_eth,
    int_to_hex,
    multiply_currencies,
    subtract_currencies,
    subtract_hexes,
    sum_hexes,
)
from ethconv.denomination import EtherDenomination
from ethconv.errors import ArgumentError, MissingRateError, NumericErrorCode, ParseError
from ethconv.parser import NumericBase
from ethconv.transaction_utils import calc_gas_total


def _sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


# =============================================================================
# Test conversion_util Pipeline
# =============================================================================

class TestConversionUtil:

    def test_hex_wei_to_usd(self) -> None:
        result = conversion_util(
            "0xde0b6b3a7640000",
            from_numeric_base=NumericBase.HEX,
            to_numeric_base=NumericBase.DEC,
            from_denomination=EtherDenomination.WEI,
            from_currency="ETH",
            to_currency="USD",
            conversion_rate=468.58,
            number_of_decimals=2,
        )
        assert result == "468.58"

    def test_gwei_to_hex_wei(self) -> None:
        result = conversion_util(
            "1",
            from_numeric_base="dec",
            to_numeric_base="hex",
            from_denomination="GWEI",
            to_denomination="WEI",
        )
        assert result == "3b9aca00"

    def test_from_denomination_defaults_target_to_eth(self) -> None:
        result = conversion_util(
            "9358749494527040",
            from_numeric_base=NumericBase.DEC,
            from_denomination=EtherDenomination.WEI,
        )
        assert result == Decimal("0.009358749")

    def test_without_target_base_returns_decimal(self) -> None:
        result = conversion_util("0x10", from_numeric_base=NumericBase.HEX)
        assert isinstance(result, Decimal)
        assert result == Decimal(16)

    def test_to_denomination_without_source_treats_value_as_eth(self) -> None:
        result = conversion_util(
            "2",
            from_numeric_base=NumericBase.DEC,
            to_denomination=EtherDenomination.GWEI,
        )
        assert result == Decimal(2 * 10 ** 9)

    def test_inverted_rate(self) -> None:
        result = conversion_util(
            "10",
            from_numeric_base=NumericBase.DEC,
            to_numeric_base=NumericBase.DEC,
            from_currency="USD",
            to_currency="ETH",
            conversion_rate=4,
            invert_conversion_rate=True,
        )
        assert result == "2.5"

    def test_number_of_decimals_is_half_down(self) -> None:
        result = conversion_util(
            "1.125",
            from_numeric_base=NumericBase.DEC,
            to_numeric_base=NumericBase.DEC,
            number_of_decimals=2,
        )
        assert result == "1.12"

    def test_round_down_after_number_of_decimals(self) -> None:
        result = conversion_util(
            "1.129",
            from_numeric_base=NumericBase.DEC,
            to_numeric_base=NumericBase.DEC,
            number_of_decimals=3,
            round_down=2,
        )
        assert result == "1.12"

    def test_unit_rounding_happens_before_number_of_decimals(self) -> None:
        result = conversion_util(
            "1234567890123",
            from_numeric_base=NumericBase.DEC,
            to_numeric_base=NumericBase.DEC,
            from_denomination=EtherDenomination.WEI,
            to_denomination=EtherDenomination.ETH,
            number_of_decimals=15,
        )
        assert result == "0.000001235"

    def test_empty_value_is_zero(self) -> None:
        assert conversion_util(None, from_numeric_base=NumericBase.HEX) == Decimal(0)
        assert conversion_util("", from_numeric_base=NumericBase.DEC) == Decimal(0)

    def test_same_currency_skips_rate(self) -> None:
        result = conversion_util(
            "5",
            from_numeric_base=NumericBase.DEC,
            from_currency="ETH",
            to_currency="ETH",
            conversion_rate=1000,
        )
        assert result == Decimal(5)

    def test_parse_error_propagates(self) -> None:
        before = _sample("ethconv_errors_total", {"error_code": NumericErrorCode.PARSE_FAILED})
        with pytest.raises(ParseError):
            conversion_util("zz", from_numeric_base=NumericBase.HEX)
        after = _sample("ethconv_errors_total", {"error_code": NumericErrorCode.PARSE_FAILED})
        assert after == before + 1

    def test_options_default_to_currency(self) -> None:
        options = ConversionOptions(from_currency="ETH")
        assert options.to_currency == "ETH"
        assert not options.currencies_differ


# =============================================================================
# Test Permissive Zero
# =============================================================================

class TestPermissiveZero:
    """conversion_util answers 0 when the rate is not loaded yet."""

    def test_returns_integer_zero(self, caplog) -> None:
        labels = {"from_currency": "ETH", "to_currency": "USD"}
        before = _sample("ethconv_missing_rate_zero_total", labels)

        with caplog.at_level(logging.WARNING, logger="ethconv.conversion"):
            result = conversion_util(
                "0x1",
                from_numeric_base=NumericBase.HEX,
                from_currency="ETH",
                to_currency="USD",
            )

        assert result == 0
        assert type(result) is int
        assert NumericErrorCode.RATE_MISSING_ZERO_DEFAULT in caplog.text
        assert _sample("ethconv_missing_rate_zero_total", labels) == before + 1

    def test_zero_rate_is_treated_as_missing(self) -> None:
        result = conversion_util(
            "1",
            from_numeric_base=NumericBase.DEC,
            from_currency="ETH",
            to_currency="USD",
            conversion_rate=0,
        )
        assert type(result) is int

    def test_genuine_zero_is_not_an_int(self) -> None:
        result = conversion_util(
            "0",
            from_numeric_base=NumericBase.DEC,
            from_currency="ETH",
            to_currency="USD",
            conversion_rate=468.58,
        )
        assert isinstance(result, Decimal)
        assert result == 0

    def test_arithmetic_helpers_raise_instead(self) -> None:
        with pytest.raises(MissingRateError) as exc_info:
            add_currencies(1, 2, a_base=10, b_base=10, from_currency="ETH", to_currency="USD")
        assert exc_info.value.error_code == NumericErrorCode.RATE_MISSING


# =============================================================================
# Test Two-Operand Arithmetic
# =============================================================================

class TestArithmeticHelpers:

    def test_add_whole_numbers(self) -> None:
        assert add_currencies(3, 9, a_base=10, b_base=10) == Decimal(12)

    def test_add_decimals(self) -> None:
        assert float(add_currencies(1.3, 1.9, a_base=10, b_base=10)) == 3.2

    def test_add_repeating_decimals(self) -> None:
        result = add_currencies(1 / 3, 1 / 9, a_base=10, b_base=10)
        assert float(result) == 0.4444444444444444

    def test_add_mixed_bases(self) -> None:
        result = add_currencies("0xa", "10", a_base=16, b_base=10, to_numeric_base=NumericBase.HEX)
        assert result == "14"

    def test_subtract(self) -> None:
        assert subtract_currencies("0x10", 1, a_base=16, b_base=10) == Decimal(15)

    def test_multiply_with_conversion(self) -> None:
        result = multiply_currencies(
            "0x5208",
            "1",
            multiplicand_base=16,
            multiplier_base=10,
            from_denomination=EtherDenomination.GWEI,
            to_denomination=EtherDenomination.GWEI,
        )
        assert result == Decimal(21000)

    def test_divide_decimals(self) -> None:
        assert divide_currencies(9, 3, dividend_base=10, divisor_base=10) == Decimal(3)

    def test_divide_hexadecimals(self) -> None:
        result = divide_currencies(1000, 0xa, dividend_base=16, divisor_base=16)
        assert float(result) == 0x100

    def test_divide_hex_from_decimal_literal(self) -> None:
        result = divide_currencies(0x3e8, 0xa, dividend_base=16, divisor_base=16)
        assert float(result) == 0x100

    def test_divide_by_zero_propagates(self) -> None:
        with pytest.raises(DivisionByZero):
            divide_currencies(1, 0, dividend_base=10, divisor_base=10)

    def test_invalid_base(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            divide_currencies(0x3e8, 0xa, dividend_base=10.5, divisor_base=7)
        assert "Must specify valid dividend_base and divisor_base" in str(exc_info.value)
        assert exc_info.value.error_code == NumericErrorCode.INVALID_BASE

    def test_missing_or_tiny_base(self) -> None:
        with pytest.raises(ArgumentError):
            add_currencies(1, 2, a_base=10)
        with pytest.raises(ArgumentError):
            add_currencies(1, 2, a_base=1, b_base=10)
        with pytest.raises(ArgumentError):
            multiply_currencies(1, 2, multiplicand_base=True, multiplier_base=10)

    def test_additive_identity(self) -> None:
        assert add_currencies("123.456", 0, a_base=10, b_base=10) == Decimal("123.456")

    def test_calc_gas_total(self) -> None:
        assert calc_gas_total(12, 15) == "17a"
        assert calc_gas_total("0x5208", "0x1") == "5208"
        assert calc_gas_total() == "0"


# =============================================================================
# Test Comparisons
# =============================================================================

class TestComparisons:

    ONE_ETH_IN_WEI = {
        "value": "0xde0b6b3a7640000",
        "from_numeric_base": NumericBase.HEX,
        "from_denomination": EtherDenomination.WEI,
    }
    HALF_ETH = {
        "value": "0.5",
        "from_numeric_base": NumericBase.DEC,
        "from_denomination": EtherDenomination.ETH,
    }

    def test_greater_and_less(self) -> None:
        assert conversion_greater_than(self.ONE_ETH_IN_WEI, self.HALF_ETH)
        assert not conversion_less_than(self.ONE_ETH_IN_WEI, self.HALF_ETH)
        assert conversion_less_than(self.HALF_ETH, self.ONE_ETH_IN_WEI)

    def test_gte_lte_on_equal_values(self) -> None:
        same = dict(self.HALF_ETH, value="0.50")
        assert conversion_gte(self.HALF_ETH, same)
        assert conversion_lte(self.HALF_ETH, same)

    def test_target_base_is_ignored(self) -> None:
        first = dict(self.HALF_ETH, to_numeric_base=NumericBase.HEX)
        assert conversion_less_than(first, self.ONE_ETH_IN_WEI)

    def test_max_returns_raw_value(self) -> None:
        assert conversion_max(self.ONE_ETH_IN_WEI, self.HALF_ETH) == "0xde0b6b3a7640000"
        assert conversion_max(self.HALF_ETH, self.ONE_ETH_IN_WEI) == "0xde0b6b3a7640000"

    def test_max_tie_returns_second(self) -> None:
        assert conversion_max(self.HALF_ETH, dict(self.HALF_ETH, value="0.50")) == "0.50"


# =============================================================================
# Test Hex Helpers
# =============================================================================

class TestHexHelpers:

    def test_sum_hexes(self) -> None:
        assert sum_hexes("0x1", "0x2", "0xf") == "0x12"
        assert sum_hexes("0xa") == "0xa"

    def test_add_hexes(self) -> None:
        assert add_hexes("0x5208", "0x1") == "5209"

    def test_subtract_hexes(self) -> None:
        assert subtract_hexes("0x10", "0x1") == "f"
        assert subtract_hexes("0x1", "0x10") == "-f"

    def test_int_to_hex(self) -> None:
        assert int_to_hex(255) == "0xff"


# =============================================================================
# Test Named Conversions
# =============================================================================

class TestNamedConversions:

    def test_dec_wei_to_dec_eth(self) -> None:
        assert dec_wei_to_dec_eth("10000000000000") == "0.00001"
        assert dec_wei_to_dec_eth("9358749494527040") == "0.009358749"

    def test_hex_wei_to_dec_eth(self) -> None:
        assert hex_wei_to_dec_eth("0xde0b6b3a7640000") == "1"

    def test_dec_gwei_to_hex_wei(self) -> None:
        assert dec_gwei_to_hex_wei(1) == "3b9aca00"

    def test_dec_eth_to_converted_currency(self) -> None:
        assert dec_eth_to_converted_currency("2", "USD", 468.58) == "937.16"

    def test_wei_hex_from_zero_eth(self) -> None:
        assert get_wei_hex_from_decimal_value("0", from_denomination=EtherDenomination.ETH) == "0"

    def test_wei_hex_from_ten_eth(self) -> None:
        result = get_wei_hex_from_decimal_value("10", from_denomination=EtherDenomination.ETH)
        assert result == "8ac7230489e80000"

    def test_wei_hex_from_fiat(self) -> None:
        result = get_wei_hex_from_decimal_value(
            "8",
            conversion_rate=4,
            from_currency="USD",
            invert_conversion_rate=True,
        )
        assert result == "1bc16d674ec80000"

    def test_value_from_wei_hex_in_eth(self) -> None:
        result = get_value_from_wei_hex(
            "0xde0b6b3a7640000", to_currency="ETH", number_of_decimals=6
        )
        assert result == "1"

    def test_value_from_wei_hex_in_fiat(self) -> None:
        result = get_value_from_wei_hex(
            "0xde0b6b3a7640000",
            to_currency="usd",
            conversion_rate=468.58,
            number_of_decimals=2,
        )
        assert result == "468.58"

    def test_value_from_wei_hex_missing_rate(self) -> None:
        with pytest.raises(MissingRateError):
            get_value_from_wei_hex("0x1", to_currency="usd")

    def test_eth_conversion_falls_back_to_smaller_units(self) -> None:
        assert get_eth_conversion_from_wei_hex("0xde0b6b3a7640000") == "1 ETH"
        assert get_eth_conversion_from_wei_hex("0x3e8") == "0.000001 GWEI"
        assert get_eth_conversion_from_wei_hex("0x1") == "1 WEI"
        assert get_eth_conversion_from_wei_hex("0x0") == "0 WEI"

    def test_eth_conversion_rejects_fiat_currency(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            get_eth_conversion_from_wei_hex("0x1", from_currency="USD", conversion_rate=468.58)
        assert "Ether denominations" in str(exc_info.value)

    def test_eth_conversion_accepts_lower_case_unit(self) -> None:
        assert get_eth_conversion_from_wei_hex("0x3b9aca00", from_currency="gwei") == "1 GWEI"


# =============================================================================
# Test Magnitudes Beyond the Configured Precision
# =============================================================================

class TestLargeMagnitudes:
    """Sums and products stay exact past 100 significant digits."""

    MAX_UINT256 = 2 ** 256 - 1

    def test_multiply_uint256_is_exact(self) -> None:
        result = multiply_currencies(
            hex(self.MAX_UINT256),
            hex(self.MAX_UINT256),
            multiplicand_base=16,
            multiplier_base=16,
        )
        assert result == Decimal(self.MAX_UINT256 ** 2)

    def test_multiply_uint256_hex_output(self) -> None:
        result = multiply_currencies(
            hex(self.MAX_UINT256),
            hex(self.MAX_UINT256),
            multiplicand_base=16,
            multiplier_base=16,
            to_numeric_base=NumericBase.HEX,
        )
        assert result == format(self.MAX_UINT256 ** 2, "x")

    def test_add_carries_past_configured_precision(self) -> None:
        result = add_currencies("9" * 120, "1", a_base=10, b_base=10)
        assert result == Decimal(10 ** 120)

    def test_subtract_keeps_low_digits(self) -> None:
        result = subtract_currencies("1" + "0" * 119, "1", a_base=10, b_base=10)
        assert result == Decimal("9" * 119)

    def test_sum_hexes_carries(self) -> None:
        assert sum_hexes(hex(16 ** 90 - 1), "0x1") == "0x1" + "0" * 90

    def test_divide_keeps_integer_digits(self) -> None:
        result = divide_currencies("1" * 120, 1, dividend_base=10, divisor_base=10)
        assert result == Decimal("1" * 120)

    def test_large_wei_to_eth_string(self) -> None:
        result = conversion_util(
            "1" * 120,
            from_numeric_base=NumericBase.DEC,
            to_numeric_base=NumericBase.DEC,
            from_denomination=EtherDenomination.WEI,
        )
        assert result == "1" * 102 + "." + "1" * 9

    def test_out_of_range_exponent_is_a_parse_error(self) -> None:
        before = _sample("ethconv_errors_total", {"error_code": NumericErrorCode.PARSE_FAILED})
        with pytest.raises(ParseError):
            conversion_util(
                "1e1000000",
                from_numeric_base="dec",
                to_numeric_base="dec",
                from_denomination="WEI",
            )
        after = _sample("ethconv_errors_total", {"error_code": NumericErrorCode.PARSE_FAILED})
        assert after == before + 1
