"""
============================================================================
Ether Numeric Conversion Engine - Magnitude Parser
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)
Decimal Integrity: Every accepted input becomes a decimal.Decimal magnitude

A digit string such as "100" is ambiguous: 0x100 (256) or decimal 100.
The parser never guesses. The caller declares the base and the raw value is
validated against it.

ACCEPTED SHAPES:
    - str: decimal numeral, or hexadecimal numeral with optional 0x prefix,
      optional leading '-' and an optional hex fraction ("a.8" == 10.5)
    - int / float: parsed through their decimal text; with a HEX base the
      text is read as hex only if it already looks like hex digits
    - Decimal: already canonical, passes through

ERROR CODES:
    - NUM-001: Value cannot be parsed under the declared base
    - NUM-002: Unknown numeric base

============================================================================
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union
import logging
import math
import re

from ethconv.config import get_conversion_config
from ethconv.errors import ArgumentError, NumericErrorCode, ParseError
from ethconv.rounding import add_magnitudes

# Configure module logger
logger = logging.getLogger(__name__)

RawValue = Union[str, int, float, Decimal]


# =============================================================================
# Constants
# =============================================================================

HEX_PREFIX = "0x"

_RADIX_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

_HEX_STRING = re.compile(r"^(?:0x)?[0-9a-f]+$", re.IGNORECASE)

_DECIMAL_STRING = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

# Magnitudes are accepted between 10^-1000 and 10^1000
MAX_ADJUSTED_EXPONENT = 1000


# =============================================================================
# Enums
# =============================================================================

class NumericBase(Enum):
    """
    Textual encodings a magnitude can be read from or written to.

    Reliability Level: SOVEREIGN TIER
    """
    DEC = 10
    HEX = 16

    @classmethod
    def coerce(cls, value: Union["NumericBase", int, str, None]) -> Optional["NumericBase"]:
        """
        Resolve a base given as the enum, its radix, or a legacy tag.

        Accepts NumericBase.HEX, 16 or "hex" (and the decimal equivalents).
        None stays None.

        Raises:
            ArgumentError: If value names no known base (NUM-002)
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            tag = value.strip().lower()
            if tag == "hex":
                return cls.HEX
            if tag == "dec":
                return cls.DEC
        elif isinstance(value, int) and not isinstance(value, bool):
            if value == 16:
                return cls.HEX
            if value == 10:
                return cls.DEC
        raise ArgumentError(f"Unknown numeric base: {value!r}")


# =============================================================================
# Hex String Helpers
# =============================================================================

def is_hex_string(value: str) -> bool:
    """True for strings of hex digits with an optional 0x prefix."""
    return bool(_HEX_STRING.match(value))


def strip_hex_prefix(value: str) -> str:
    """Remove a leading 0x / 0X, leaving the sign in place."""
    negative, unsigned = _split_sign(value)
    if unsigned[:2].lower() == HEX_PREFIX:
        unsigned = unsigned[2:]
    return f"-{unsigned}" if negative else unsigned


def add_hex_prefix(value: str) -> str:
    """Add a 0x prefix after any sign, unless one is already present."""
    negative, unsigned = _split_sign(value)
    if unsigned[:2].lower() != HEX_PREFIX:
        unsigned = HEX_PREFIX + unsigned
    return f"-{unsigned}" if negative else unsigned


def _split_sign(value: str) -> Tuple[bool, str]:
    if value.startswith("-"):
        return True, value[1:]
    return False, value


# =============================================================================
# Parsing
# =============================================================================

def _parse_failure(message: str, value: object) -> ParseError:
    logger.error(
        f"[{NumericErrorCode.PARSE_FAILED}] Magnitude parse failed | "
        f"value={value!r} | type={type(value).__name__} | reason={message}"
    )
    return ParseError(f"{message}: {value!r}")


def _check_exponent(magnitude: Decimal, value: object) -> Decimal:
    if magnitude and abs(magnitude.adjusted()) > MAX_ADJUSTED_EXPONENT:
        raise _parse_failure(
            f"Magnitude outside 1E-{MAX_ADJUSTED_EXPONENT} .. 1E+{MAX_ADJUSTED_EXPONENT}",
            value,
        )
    return magnitude


def _digits_valid(digits: str, radix: int) -> bool:
    allowed = _RADIX_ALPHABET[:radix]
    return bool(digits) and all(char in allowed for char in digits.lower())


def radix_string_to_decimal(value: str, radix: int) -> Decimal:
    """
    Parse a signed numeral written in `radix`, with an optional fraction.

    Both sides of a '.' must be valid digit runs in the radix. A 0x prefix
    is stripped when radix is 16.

    Raises:
        ParseError: If the text is not a numeral in the radix (NUM-001)
        ParseError: If the magnitude is outside 1E-1000 .. 1E+1000 (NUM-001)
    """
    if not 2 <= radix <= len(_RADIX_ALPHABET):
        raise _parse_failure(f"Unsupported radix {radix}", value)

    negative, unsigned = _split_sign(value.strip())
    if radix == 16 and unsigned[:2].lower() == HEX_PREFIX:
        unsigned = unsigned[2:]

    integer_digits, point, fraction_digits = unsigned.partition(".")
    if not _digits_valid(integer_digits, radix) or (
        point and not _digits_valid(fraction_digits, radix)
    ):
        raise _parse_failure(f"Not a base-{radix} numeral", value)

    magnitude = Decimal(int(integer_digits, radix))
    if fraction_digits:
        # Fractions in a power-of-two radix terminate within this precision
        context = get_conversion_config().arithmetic_context(
            len(fraction_digits) * radix.bit_length()
        )
        scale = Decimal(radix ** len(fraction_digits))
        fraction = context.divide(Decimal(int(fraction_digits, radix)), scale)
        magnitude = add_magnitudes(magnitude, fraction)

    if negative:
        magnitude = magnitude.copy_negate()
    return _check_exponent(magnitude, value)


def parse_string(value: str, declared_base: NumericBase) -> Decimal:
    """
    Parse a decimal or hexadecimal numeral.

    Raises:
        ParseError: If the string is not a numeral in declared_base (NUM-001)
    """
    if declared_base is NumericBase.HEX:
        return radix_string_to_decimal(value, 16)
    if declared_base is NumericBase.DEC:
        text = value.strip()
        if not _DECIMAL_STRING.match(text):
            raise _parse_failure("Not a finite decimal numeral", value)
        return _check_exponent(Decimal(text), value)
    raise AssertionError(f"Unhandled numeric base: {declared_base!r}")


def parse_number(value: Union[int, float], declared_base: NumericBase) -> Decimal:
    """
    Parse an int or float through its decimal text form.

    With a HEX base the text is read as hex only when it already consists of
    hex digits (e.g. 100 -> 0x100); anything else (1.5, -5) is decimal.

    Raises:
        ParseError: If the number is NaN or infinite (NUM-001)
    """
    if isinstance(value, float) and not math.isfinite(value):
        raise _parse_failure("Non-finite number", value)

    text = str(value)
    if declared_base is NumericBase.HEX and is_hex_string(text):
        return radix_string_to_decimal(text, 16)
    return parse_string(text, NumericBase.DEC)


def parse_decimal(value: Decimal) -> Decimal:
    """
    Accept an already-canonical magnitude.

    Raises:
        ParseError: If the Decimal is NaN or infinite (NUM-001)
    """
    if not value.is_finite():
        raise _parse_failure("Non-finite Decimal", value)
    return _check_exponent(value, value)


def parse(value: RawValue, declared_base: Optional[NumericBase] = None) -> Decimal:
    """
    Turn raw input plus a declared base into a canonical magnitude.

    Reliability Level: SOVEREIGN TIER
    Input Constraints: declared_base required unless value is a Decimal
    Side Effects: Logs NUM-001 on failure

    Args:
        value: str, int, float or Decimal
        declared_base: NumericBase the value is written in

    Returns:
        Decimal magnitude

    Raises:
        ParseError: If value cannot be unambiguously interpreted (NUM-001)
        ParseError: If the magnitude is outside 1E-1000 .. 1E+1000 (NUM-001)
    """
    if isinstance(value, Decimal):
        return parse_decimal(value)

    if declared_base is None:
        raise _parse_failure(
            "Numeric base must be specified when the value is not already a Decimal",
            value,
        )
    declared_base = NumericBase.coerce(declared_base)

    # bool is an int subclass but never a magnitude
    if isinstance(value, bool):
        raise _parse_failure("Booleans are not numeric values", value)
    if isinstance(value, str):
        return parse_string(value, declared_base)
    if isinstance(value, (int, float)):
        return parse_number(value, declared_base)

    raise _parse_failure(f"Values of type {type(value).__name__} cannot be parsed", value)


def parse_in_radix(value: RawValue, radix: int) -> Decimal:
    """
    Parse an arithmetic operand by its text form in an arbitrary radix.

    Unlike parse(), numbers are not sniffed: parse_in_radix(1000, 16) is
    0x1000. Decimals pass through unchanged.
    """
    if isinstance(value, Decimal):
        return parse_decimal(value)
    if isinstance(value, bool):
        raise _parse_failure("Booleans are not numeric values", value)
    if isinstance(value, float) and not math.isfinite(value):
        raise _parse_failure("Non-finite number", value)
    if radix == 10:
        return parse_string(str(value), NumericBase.DEC)
    return radix_string_to_decimal(str(value), radix)
