"""
============================================================================
Ether Numeric Conversion Engine - Conversion Facade
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)
Decimal Integrity: All intermediate values are decimal.Decimal magnitudes

Flat-option entry points for single-call conversions and two-operand
arithmetic. Each call runs the same pipeline, in this order:

    1. Parse value under from_numeric_base
    2. from_denomination set     -> normalize into ETH terms
    3. from_currency != to_currency -> require and apply conversion_rate
    4. to_denomination (or ETH when only from_denomination is set)
                                 -> denominate, with mandatory unit rounding
    5. number_of_decimals        -> round HALF_DOWN
    6. round_down                -> round DOWN
    7. to_numeric_base           -> string, otherwise the Decimal magnitude

PERMISSIVE ZERO:
    conversion_util() alone answers the integer 0 when currencies differ and
    no rate was supplied, so screens can render before a rate is loaded. The
    path is logged as NUM-006 and counted in ethconv_missing_rate_zero_total.
    Every other entry point raises MissingRateError (NUM-004).

ERROR CODES:
    - NUM-001: ParseError
    - NUM-002: ArgumentError (invalid operand base)
    - NUM-004: MissingRateError
    - NUM-006: Permissive zero returned (warning)

============================================================================
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple, Union
import logging

from ethconv.currency import Rate, require_rate
from ethconv.denomination import NORMALIZED_DENOMINATION, EtherDenomination
from ethconv.errors import ArgumentError, NumericConversionError, NumericErrorCode
from ethconv.numeric import NumericValue
from ethconv.observability import record_conversion_error, record_missing_rate_zero
from ethconv.parser import NumericBase, RawValue, add_hex_prefix, parse_in_radix
from ethconv.rounding import (
    RoundingMode,
    add_magnitudes,
    divide_magnitudes,
    multiply_magnitudes,
    subtract_magnitudes,
)

# Configure module logger
logger = logging.getLogger(__name__)

ConversionResult = Union[str, Decimal]

# Places kept by add_hexes / subtract_hexes
HEX_ARITHMETIC_PLACES = 6


# =============================================================================
# Conversion Options
# =============================================================================

@dataclass(frozen=True)
class ConversionOptions:
    """
    Flat option set consumed by the conversion pipeline.

    Bases and denominations accept their enum, or the legacy tags
    ("hex", "dec", "WEI", ...). to_currency defaults to from_currency.
    """

    from_currency: Optional[str] = None
    to_currency: Optional[str] = None
    from_numeric_base: Optional[NumericBase] = None
    to_numeric_base: Optional[NumericBase] = None
    from_denomination: Optional[EtherDenomination] = None
    to_denomination: Optional[EtherDenomination] = None
    number_of_decimals: Optional[int] = None
    round_down: Optional[int] = None
    conversion_rate: Optional[Rate] = None
    invert_conversion_rate: bool = False

    def __post_init__(self) -> None:
        if self.to_currency is None:
            object.__setattr__(self, "to_currency", self.from_currency)
        object.__setattr__(self, "from_numeric_base", NumericBase.coerce(self.from_numeric_base))
        object.__setattr__(self, "to_numeric_base", NumericBase.coerce(self.to_numeric_base))
        object.__setattr__(
            self, "from_denomination", EtherDenomination.coerce(self.from_denomination)
        )
        object.__setattr__(
            self, "to_denomination", EtherDenomination.coerce(self.to_denomination)
        )

    @property
    def currencies_differ(self) -> bool:
        return self.from_currency != self.to_currency


def _run_pipeline(value: Any, options: ConversionOptions) -> ConversionResult:
    numeric = NumericValue(value, options.from_numeric_base, options.from_denomination)

    if options.from_denomination is not None:
        numeric = numeric.normalize()

    if options.currencies_differ:
        rate = require_rate(options.from_currency, options.to_currency, options.conversion_rate)
        numeric = numeric.apply_conversion_rate(rate, options.invert_conversion_rate)

    target = options.to_denomination
    if target is None and options.from_denomination is not None:
        target = NORMALIZED_DENOMINATION
    if target is not None:
        numeric = numeric.denominate(target)

    if options.number_of_decimals is not None:
        numeric = numeric.round(options.number_of_decimals, RoundingMode.HALF_DOWN)

    if options.round_down:
        numeric = numeric.round(options.round_down, RoundingMode.DOWN)

    if options.to_numeric_base is not None:
        return numeric.to_base(options.to_numeric_base).to_string()

    return numeric.value


def _convert(value: Any, options: ConversionOptions) -> ConversionResult:
    try:
        return _run_pipeline(value, options)
    except NumericConversionError as e:
        record_conversion_error(e.error_code)
        raise


# =============================================================================
# Single-Value Conversion
# =============================================================================

def conversion_util(
    value: Optional[RawValue],
    *,
    from_currency: Optional[str] = None,
    to_currency: Optional[str] = None,
    from_numeric_base: Union[NumericBase, str, int, None] = None,
    to_numeric_base: Union[NumericBase, str, int, None] = None,
    from_denomination: Union[EtherDenomination, str, None] = None,
    to_denomination: Union[EtherDenomination, str, None] = None,
    number_of_decimals: Optional[int] = None,
    round_down: Optional[int] = None,
    conversion_rate: Optional[Rate] = None,
    invert_conversion_rate: bool = False,
) -> Union[ConversionResult, int]:
    """
    Convert a value between bases, denominations and currencies.

    Reliability Level: SOVEREIGN TIER
    Input Constraints: from_numeric_base required unless value is a Decimal
    Side Effects: Logs NUM-006 and bumps a counter on the permissive-zero path

    Args:
        value: Raw value; None or an empty value is treated as "0"
        from_currency: Currency of value
        to_currency: Target currency (default: from_currency)
        from_numeric_base: Base value is written in
        to_numeric_base: Base of the returned string; None returns the Decimal
        from_denomination: Unit value is expressed in
        to_denomination: Target unit (default ETH when from_denomination is set)
        number_of_decimals: HALF_DOWN rounding precision
        round_down: DOWN rounding precision
        conversion_rate: Rate from from_currency to to_currency
        invert_conversion_rate: Divide by the rate instead of multiplying

    Returns:
        str when to_numeric_base is set, otherwise Decimal. The integer 0
        (not Decimal, not str) when currencies differ and no rate is present.

    Raises:
        ParseError: If value cannot be parsed (NUM-001)
    """
    options = ConversionOptions(
        from_currency=from_currency,
        to_currency=to_currency,
        from_numeric_base=from_numeric_base,
        to_numeric_base=to_numeric_base,
        from_denomination=from_denomination,
        to_denomination=to_denomination,
        number_of_decimals=number_of_decimals,
        round_down=round_down,
        conversion_rate=conversion_rate,
        invert_conversion_rate=invert_conversion_rate,
    )

    if options.currencies_differ and not conversion_rate:
        logger.warning(
            f"[{NumericErrorCode.RATE_MISSING_ZERO_DEFAULT}] No conversion rate, "
            f"returning permissive 0 | from_currency={options.from_currency} | "
            f"to_currency={options.to_currency} | value={value!r}"
        )
        record_missing_rate_zero(options.from_currency, options.to_currency)
        return 0

    if value is None or (not isinstance(value, Decimal) and not value):
        value = "0"

    return _convert(value, options)


# =============================================================================
# Two-Operand Arithmetic
# =============================================================================

def _is_valid_base(base: Any) -> bool:
    return isinstance(base, int) and not isinstance(base, bool) and base > 1


def _validate_bases(first_name: str, first: Any, second_name: str, second: Any) -> None:
    if not (_is_valid_base(first) and _is_valid_base(second)):
        logger.error(
            f"[{NumericErrorCode.INVALID_BASE}] Invalid operand bases | "
            f"{first_name}={first!r} | {second_name}={second!r}"
        )
        record_conversion_error(NumericErrorCode.INVALID_BASE)
        raise ArgumentError(f"Must specify valid {first_name} and {second_name}")


def _operands(
    a: RawValue, a_radix: int, b: RawValue, b_radix: int
) -> Tuple[Decimal, Decimal]:
    try:
        return parse_in_radix(a, a_radix), parse_in_radix(b, b_radix)
    except NumericConversionError as e:
        record_conversion_error(e.error_code)
        raise


def add_currencies(
    a: RawValue,
    b: RawValue,
    *,
    a_base: Optional[int] = None,
    b_base: Optional[int] = None,
    **conversion_options: Any,
) -> ConversionResult:
    """
    a + b, each parsed in its own base, then run through the pipeline.

    Raises:
        ArgumentError: If a_base or b_base is not an integer > 1 (NUM-002)
        MissingRateError: If currencies differ without a rate (NUM-004)
    """
    _validate_bases("a_base", a_base, "b_base", b_base)
    first, second = _operands(a, a_base, b, b_base)
    return _convert(add_magnitudes(first, second), ConversionOptions(**conversion_options))


def subtract_currencies(
    a: RawValue,
    b: RawValue,
    *,
    a_base: Optional[int] = None,
    b_base: Optional[int] = None,
    **conversion_options: Any,
) -> ConversionResult:
    """a - b, each parsed in its own base, then run through the pipeline."""
    _validate_bases("a_base", a_base, "b_base", b_base)
    first, second = _operands(a, a_base, b, b_base)
    return _convert(subtract_magnitudes(first, second), ConversionOptions(**conversion_options))


def multiply_currencies(
    a: RawValue,
    b: RawValue,
    *,
    multiplicand_base: Optional[int] = None,
    multiplier_base: Optional[int] = None,
    **conversion_options: Any,
) -> ConversionResult:
    """a * b, each parsed in its own base, then run through the pipeline."""
    _validate_bases("multiplicand_base", multiplicand_base, "multiplier_base", multiplier_base)
    first, second = _operands(a, multiplicand_base, b, multiplier_base)
    return _convert(multiply_magnitudes(first, second), ConversionOptions(**conversion_options))


def divide_currencies(
    a: RawValue,
    b: RawValue,
    *,
    dividend_base: Optional[int] = None,
    divisor_base: Optional[int] = None,
    **conversion_options: Any,
) -> ConversionResult:
    """
    a / b, each parsed in its own base, then run through the pipeline.

    Division by zero is not special-cased.

    Raises:
        ArgumentError: If a base is not an integer > 1 (NUM-002)
        decimal.DivisionByZero: If b is zero
        decimal.InvalidOperation: If a and b are both zero
    """
    _validate_bases("dividend_base", dividend_base, "divisor_base", divisor_base)
    first, second = _operands(a, dividend_base, b, divisor_base)
    return _convert(divide_magnitudes(first, second), ConversionOptions(**conversion_options))


# =============================================================================
# Comparisons
# =============================================================================

def _converted_magnitude(side: Mapping[str, Any]) -> Decimal:
    props: Dict[str, Any] = dict(side)
    value = props.pop("value", None)
    props.pop("to_numeric_base", None)
    return _convert(value, ConversionOptions(**props))


def conversion_greater_than(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    """
    True if the first side converts to a larger magnitude.

    Each side is a mapping of conversion options plus "value";
    to_numeric_base is ignored.
    """
    return _converted_magnitude(first) > _converted_magnitude(second)


def conversion_less_than(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    return _converted_magnitude(first) < _converted_magnitude(second)


def conversion_gte(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    return _converted_magnitude(first) >= _converted_magnitude(second)


def conversion_lte(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    return _converted_magnitude(first) <= _converted_magnitude(second)


def conversion_max(first: Mapping[str, Any], second: Mapping[str, Any]) -> Any:
    """
    The original raw value of the side that converts larger.

    Ties return the second side's value.
    """
    if conversion_greater_than(first, second):
        return first["value"]
    return second["value"]


# =============================================================================
# Hex Helpers
# =============================================================================

def sum_hexes(first: str, *rest: str) -> str:
    """Sum of hex values as a 0x-prefixed hex string."""
    total = NumericValue(first, NumericBase.HEX)
    for hex_amount in rest:
        total = total.add(NumericValue(hex_amount, NumericBase.HEX))
    return total.to_prefixed_hex_string()


def add_hexes(a_hex_wei: str, b_hex_wei: str) -> str:
    """a + b as an unprefixed hex string."""
    return (
        NumericValue(a_hex_wei, NumericBase.HEX)
        .add(NumericValue(b_hex_wei, NumericBase.HEX))
        .round(HEX_ARITHMETIC_PLACES, RoundingMode.HALF_DOWN)
        .to_string()
    )


def subtract_hexes(a_hex_wei: str, b_hex_wei: str) -> str:
    """a - b as an unprefixed hex string."""
    return (
        NumericValue(a_hex_wei, NumericBase.HEX)
        .minus(NumericValue(b_hex_wei, NumericBase.HEX))
        .round(HEX_ARITHMETIC_PLACES, RoundingMode.HALF_DOWN)
        .to_string()
    )


def int_to_hex(value: int) -> str:
    """0x-prefixed hex text for a Python int."""
    return add_hex_prefix(format(value, "x"))


# =============================================================================
# Named Conversions
# =============================================================================

def dec_gwei_to_hex_wei(dec_gwei: RawValue) -> Union[ConversionResult, int]:
    """Decimal GWEI -> hex WEI string."""
    return conversion_util(
        dec_gwei,
        from_numeric_base=NumericBase.DEC,
        to_numeric_base=NumericBase.HEX,
        from_denomination=EtherDenomination.GWEI,
        to_denomination=EtherDenomination.WEI,
    )


def dec_wei_to_dec_eth(dec_wei: RawValue) -> str:
    """Decimal WEI -> decimal ETH string (9 decimal places at most)."""
    return (
        NumericValue(dec_wei, NumericBase.DEC, EtherDenomination.WEI)
        .to_denomination(EtherDenomination.ETH)
        .to_string()
    )


def hex_wei_to_dec_eth(hex_wei: str) -> str:
    """Hex WEI -> decimal ETH string."""
    return (
        NumericValue(hex_wei, NumericBase.HEX, EtherDenomination.WEI)
        .to_denomination(EtherDenomination.ETH)
        .to_base(NumericBase.DEC)
        .to_string()
    )


def dec_eth_to_converted_currency(
    eth_total: RawValue,
    converted_currency: str,
    conversion_rate: Optional[Rate],
) -> Union[ConversionResult, int]:
    """Decimal ETH -> decimal amount of another currency, 2 decimals."""
    return conversion_util(
        eth_total,
        from_numeric_base=NumericBase.DEC,
        to_numeric_base=NumericBase.DEC,
        from_currency=EtherDenomination.ETH.value,
        to_currency=converted_currency,
        number_of_decimals=2,
        conversion_rate=conversion_rate,
    )


def get_wei_hex_from_decimal_value(
    value: RawValue,
    conversion_rate: Rate = 1,
    from_denomination: Union[EtherDenomination, str] = EtherDenomination.ETH,
    from_currency: Optional[str] = None,
    invert_conversion_rate: bool = False,
) -> str:
    """
    Decimal amount -> unprefixed hex WEI string.

    The rate is applied whenever from_currency is not ETH.
    """
    numeric = NumericValue(value, NumericBase.DEC, from_denomination)
    if from_currency != EtherDenomination.ETH.value:
        numeric = numeric.apply_conversion_rate(conversion_rate, invert_conversion_rate)
    return numeric.to_base(NumericBase.HEX).to_denomination(EtherDenomination.WEI).to_string()


def get_value_from_wei_hex(
    value: str,
    from_currency: str = EtherDenomination.ETH.value,
    to_currency: Optional[str] = None,
    conversion_rate: Optional[Rate] = None,
    number_of_decimals: Optional[int] = None,
    to_denomination: Union[EtherDenomination, str] = EtherDenomination.ETH,
) -> str:
    """
    Hex WEI -> decimal string in to_denomination, optionally in another currency.

    to_currency defaults to from_currency.

    Raises:
        MissingRateError: If currencies differ and no rate is given (NUM-004)
    """
    if to_currency is None:
        to_currency = from_currency

    numeric = NumericValue(value, NumericBase.HEX, EtherDenomination.WEI)
    if from_currency != to_currency:
        rate = require_rate(from_currency, to_currency, conversion_rate)
        numeric = numeric.apply_conversion_rate(rate)
    return (
        numeric.to_base(NumericBase.DEC)
        .to_denomination(to_denomination)
        .round(number_of_decimals, RoundingMode.HALF_DOWN)
        .to_string()
    )


def get_eth_conversion_from_wei_hex(
    value: str,
    from_currency: str = EtherDenomination.ETH.value,
    conversion_rate: Optional[Rate] = None,
    number_of_decimals: int = 6,
) -> str:
    """
    Hex WEI rendered in the largest unit that does not round to zero.

    Tries from_currency, then GWEI, then WEI: "0x3e8" (1000 wei) renders as
    "0.000001 GWEI", "0x1" as "1 WEI". from_currency must name a
    denomination; fiat currencies have no smaller unit to fall back to.

    Raises:
        ArgumentError: If from_currency is not WEI, GWEI or ETH (NUM-002)
    """
    if not isinstance(from_currency, str) or (
        from_currency.strip().upper() not in EtherDenomination.__members__
    ):
        logger.error(
            f"[{NumericErrorCode.INVALID_BASE}] Unit fallback needs an Ether "
            f"denomination | from_currency={from_currency!r}"
        )
        raise ArgumentError(
            f"get_eth_conversion_from_wei_hex only renders Ether denominations "
            f"(WEI, GWEI, ETH), got from_currency={from_currency!r}"
        )

    for denomination in (EtherDenomination.coerce(from_currency), EtherDenomination.GWEI):
        converted = get_value_from_wei_hex(
            value,
            from_currency=from_currency,
            conversion_rate=conversion_rate,
            number_of_decimals=number_of_decimals,
            to_denomination=denomination,
        )
        if converted != "0":
            return f"{converted} {denomination.value}"

    converted = get_value_from_wei_hex(
        value,
        from_currency=from_currency,
        conversion_rate=conversion_rate,
        number_of_decimals=number_of_decimals,
        to_denomination=EtherDenomination.WEI,
    )
    return f"{converted} {EtherDenomination.WEI.value}"
