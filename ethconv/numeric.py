"""
============================================================================
Ether Numeric Conversion Engine - NumericValue
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)
Decimal Integrity: The magnitude is a decimal.Decimal and is never mutated

NumericValue is an immutable value object. Every method returns a new
instance (or the same instance when the call is a no-op), so steps can be
chained and read top to bottom:

    NumericValue("0x3b9aca00", NumericBase.HEX, EtherDenomination.WEI) \\
        .to_denomination(EtherDenomination.GWEI) \\
        .to_base(NumericBase.DEC) \\
        .to_string()                                    # "1"

The base only controls serialization. The denomination records which unit
the magnitude is expressed in and must be known before it can be changed.

ERROR CODES:
    - NUM-001: Raw value cannot be parsed (ParseError)
    - NUM-003: Denomination change without a source denomination (StateError)

============================================================================
"""

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union
import logging

from ethconv.config import get_conversion_config
from ethconv.currency import Rate, rate_multiplier
from ethconv.denomination import (
    NORMALIZED_DENOMINATION,
    EtherDenomination,
    denominate,
    normalize,
)
from ethconv.errors import NumericErrorCode, StateError
from ethconv.parser import NumericBase, RawValue, add_hex_prefix, parse
from ethconv.rounding import (
    RoundingMode,
    add_magnitudes,
    divide_magnitudes,
    multiply_magnitudes,
    quantize_places,
    round_magnitude,
    strip_trailing_zeros,
    subtract_magnitudes,
)

# Configure module logger
logger = logging.getLogger(__name__)

_HEX_DIGITS = "0123456789abcdef"


# =============================================================================
# Serialization Helpers
# =============================================================================

def format_decimal(value: Decimal) -> str:
    """Plain positional decimal text, no exponent and no trailing zeros."""
    return format(strip_trailing_zeros(value), "f")


def format_hex(value: Decimal, fraction_digits: Optional[int] = None) -> str:
    """
    Lowercase hexadecimal text for a magnitude.

    Fractions are expanded digit by digit and truncated after
    `fraction_digits` hex digits (default: configured hex_fraction_digits).
    """
    if fraction_digits is None:
        fraction_digits = get_conversion_config().hex_fraction_digits

    magnitude = value.copy_abs()
    integer_part = int(magnitude)
    fraction = subtract_magnitudes(magnitude, Decimal(integer_part))

    digits = []
    while fraction and len(digits) < fraction_digits:
        fraction = multiply_magnitudes(fraction, Decimal(16))
        digit = int(fraction)
        digits.append(_HEX_DIGITS[digit])
        fraction = subtract_magnitudes(fraction, Decimal(digit))

    text = format(integer_part, "x")
    fraction_text = "".join(digits).rstrip("0")
    if fraction_text:
        text = f"{text}.{fraction_text}"

    if value < 0 and text != "0":
        return f"-{text}"
    return text


# =============================================================================
# NumericValue
# =============================================================================

@dataclass(frozen=True)
class NumericValue:
    """
    Immutable magnitude tagged with a serialization base and a denomination.

    Reliability Level: SOVEREIGN TIER
    Input Constraints: base required unless value is None or a Decimal
    Side Effects: None

    Constructor arguments are normalized in __post_init__:
    - value None -> Decimal 0 with a decimal base
    - raw str/int/float -> parsed under `base` (ParseError on failure)
    - base "hex"/16 -> NumericBase.HEX, denomination "wei" -> EtherDenomination.WEI
    """

    value: Union[Decimal, RawValue, None] = None
    base: Optional[NumericBase] = None
    denomination: Optional[EtherDenomination] = None

    def __post_init__(self) -> None:
        base = NumericBase.coerce(self.base)
        object.__setattr__(self, "denomination", EtherDenomination.coerce(self.denomination))

        if self.value is None:
            object.__setattr__(self, "value", Decimal(0))
            object.__setattr__(self, "base", NumericBase.DEC)
            return

        object.__setattr__(self, "base", base)
        object.__setattr__(self, "value", parse(self.value, base))

    @classmethod
    def from_value(
        cls,
        value: Union[RawValue, None] = None,
        base: Union[NumericBase, int, str, None] = None,
        denomination: Union[EtherDenomination, str, None] = None,
    ) -> "NumericValue":
        """Build a NumericValue from raw input."""
        return cls(value, base, denomination)

    # -------------------------------------------------------------------------
    # Tag changes
    # -------------------------------------------------------------------------

    def to_base(self, base: Union[NumericBase, int, str]) -> "NumericValue":
        """Re-tag the serialization base. The magnitude is untouched."""
        base = NumericBase.coerce(base)
        if self.base is base:
            return self
        return replace(self, base=base)

    def set_denomination(
        self, denomination: Union[EtherDenomination, str]
    ) -> "NumericValue":
        """Declare which unit the current magnitude is expressed in."""
        return replace(self, denomination=denomination)

    # -------------------------------------------------------------------------
    # Denomination
    # -------------------------------------------------------------------------

    def _require_denomination(self, operation: str) -> EtherDenomination:
        if self.denomination is None:
            logger.error(
                f"[{NumericErrorCode.DENOMINATION_UNSET}] {operation} on a value "
                f"without denomination | value={self.value}"
            )
            raise StateError(
                "Set denomination before converting: construct the value with a "
                "denomination or call set_denomination() first"
            )
        return self.denomination

    def normalize(self) -> "NumericValue":
        """
        Express the magnitude in ETH terms.

        Raises:
            StateError: If no denomination is set (NUM-003)
        """
        source = self._require_denomination("normalize")
        return replace(
            self,
            value=normalize(self.value, source),
            denomination=NORMALIZED_DENOMINATION,
        )

    def denominate(
        self, denomination: Union[EtherDenomination, str]
    ) -> "NumericValue":
        """
        Scale an ETH-terms magnitude into `denomination`.

        Applies the mandatory unit rounding. An untagged magnitude is taken
        to be in ETH terms already.

        Raises:
            StateError: If the value is tagged with a unit other than ETH (NUM-003)
        """
        target = EtherDenomination.coerce(denomination)
        if self.denomination not in (None, NORMALIZED_DENOMINATION):
            raise StateError(
                f"Cannot denominate a value held in {self.denomination.value}; "
                f"normalize() it first"
            )
        return replace(self, value=denominate(self.value, target), denomination=target)

    def to_denomination(
        self, denomination: Union[EtherDenomination, str]
    ) -> "NumericValue":
        """
        Convert into another unit, with the mandatory unit rounding.

        A conversion to the current unit is a no-op.

        Raises:
            StateError: If no denomination is set (NUM-003)
        """
        target = EtherDenomination.coerce(denomination)
        source = self._require_denomination("to_denomination")
        if source is target:
            return self
        return self.normalize().denominate(target)

    # -------------------------------------------------------------------------
    # Rounding
    # -------------------------------------------------------------------------

    def round(
        self,
        number_of_decimals: Optional[int] = None,
        mode: RoundingMode = RoundingMode.HALF_DOWN,
    ) -> "NumericValue":
        """Round to a number of decimals. 0 or None is a no-op."""
        if not number_of_decimals:
            return self
        return replace(self, value=round_magnitude(self.value, number_of_decimals, mode))

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: "NumericValue") -> "NumericValue":
        """Sum of magnitudes. Keeps this base, drops the denomination."""
        return NumericValue(add_magnitudes(self.value, other.value), self.base)

    def minus(self, other: "NumericValue") -> "NumericValue":
        """Difference of magnitudes. Keeps this base, drops the denomination."""
        return NumericValue(subtract_magnitudes(self.value, other.value), self.base)

    def times(self, multiplier: "NumericValue") -> "NumericValue":
        """Product of magnitudes. Keeps this base and denomination."""
        return replace(self, value=multiply_magnitudes(self.value, multiplier.value))

    def divide(self, divisor: "NumericValue") -> "NumericValue":
        """
        Quotient of magnitudes. Keeps this base and denomination.

        Raises:
            decimal.DivisionByZero: If divisor is zero
            decimal.InvalidOperation: If both are zero
        """
        return replace(self, value=divide_magnitudes(self.value, divisor.value))

    def apply_conversion_rate(
        self, rate: Optional[Rate] = None, invert: bool = False
    ) -> "NumericValue":
        """
        Multiply by an exchange rate (default 1), or by 1 / rate if inverted.
        """
        if rate is None:
            rate = 1
        return self.times(NumericValue(rate_multiplier(rate, invert), NumericBase.DEC))

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def compare(self, other: "NumericValue") -> int:
        """-1, 0 or 1 as this magnitude is below, equal to or above other's."""
        if self.value < other.value:
            return -1
        if self.value > other.value:
            return 1
        return 0

    def is_zero(self) -> bool:
        return self.value.is_zero()

    def is_negative(self) -> bool:
        return self.value < 0

    # -------------------------------------------------------------------------
    # Terminal extraction
    # -------------------------------------------------------------------------

    def to_prefixed_hex_string(self) -> str:
        """0x-prefixed hex text, whatever the current base."""
        return add_hex_prefix(format_hex(self.value))

    def to_string(self) -> str:
        """Text in the current base (decimal when no base is set)."""
        if self.base is NumericBase.HEX:
            return format_hex(self.value)
        return format_decimal(self.value)

    def to_fixed(self, number_of_decimals: int) -> str:
        """Decimal text with exactly `number_of_decimals` places (ROUND_HALF_UP)."""
        return format(quantize_places(self.value, number_of_decimals, ROUND_HALF_UP), "f")

    def to_number(self) -> float:
        """Float value. Precision loss beyond 53 bits is the caller's concern."""
        return float(self.value)

    def __str__(self) -> str:
        return self.to_string()
