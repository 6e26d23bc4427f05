"""
============================================================================
Ether Numeric Conversion Engine - Error Codes and Exceptions
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)

Every failure raised by the engine carries an error code so that audit logs
can be grepped for a single failure class.

ERROR CODES:
    - NUM-001: Value cannot be parsed under the declared numeric base
    - NUM-002: Invalid numeric base argument for two-operand arithmetic
    - NUM-003: Denomination change requested without a source denomination
    - NUM-004: Currencies differ and no conversion rate was supplied
    - NUM-005: Engine configuration invalid
    - NUM-006: Permissive zero returned for a missing rate (warning only)

============================================================================
"""


class NumericErrorCode:
    """Numeric conversion error codes for audit logging."""
    PARSE_FAILED = "NUM-001"
    INVALID_BASE = "NUM-002"
    DENOMINATION_UNSET = "NUM-003"
    RATE_MISSING = "NUM-004"
    CONFIG_INVALID = "NUM-005"
    RATE_MISSING_ZERO_DEFAULT = "NUM-006"


class NumericConversionError(Exception):
    """
    Base class for all conversion engine failures.

    Reliability Level: SOVEREIGN TIER
    """

    default_code = NumericErrorCode.PARSE_FAILED

    def __init__(self, message: str, error_code: str = None):
        """
        Initialize conversion error.

        Args:
            message: Human-readable error message
            error_code: Sovereign error code (default: class default_code)
        """
        self.error_code = error_code or self.default_code
        self.message = message
        super().__init__(f"[{self.error_code}] {message}")


class ParseError(NumericConversionError, ValueError):
    """Raw input cannot be unambiguously interpreted under the declared base."""

    default_code = NumericErrorCode.PARSE_FAILED


class ArgumentError(NumericConversionError, ValueError):
    """A numeric base argument is missing or not an integer greater than 1."""

    default_code = NumericErrorCode.INVALID_BASE


class StateError(NumericConversionError):
    """A denomination-changing operation was called on an undenominated value."""

    default_code = NumericErrorCode.DENOMINATION_UNSET


class MissingRateError(NumericConversionError):
    """Currencies differ and no conversion rate was supplied."""

    default_code = NumericErrorCode.RATE_MISSING


class ConversionConfigurationError(NumericConversionError):
    """
    Raised when engine configuration is invalid.

    Fail-closed: a bad precision setting must stop startup rather than
    silently truncate balances.
    """

    default_code = NumericErrorCode.CONFIG_INVALID
