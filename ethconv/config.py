"""
============================================================================
Ether Numeric Conversion Engine - Configuration
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)

This module provides configuration management for the conversion engine:
- Environment variable parsing with type safety
- Default values for every setting
- Validation with fail-closed behavior (NUM-005)
- Construction of the decimal arithmetic context used by every operation

ENVIRONMENT VARIABLES:
    - ETHCONV_PRECISION: Minimum context precision; exact operations widen
      past it as their operands require (default: 100)
    - ETHCONV_DIVISION_PLACES: Decimal places kept by division (default: 20)
    - ETHCONV_HEX_FRACTION_DIGITS: Hex digits kept after the point when
      serializing fractional values (default: 20)

ERROR CODES:
    - NUM-005: Configuration invalid

============================================================================
"""

from decimal import (
    Context,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    ROUND_HALF_UP,
)
from typing import List, Optional
from dataclasses import dataclass
import logging
import os

from ethconv.errors import ConversionConfigurationError, NumericErrorCode

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Default Values
# =============================================================================

# Floor for every context; exact operations widen past it
DEFAULT_PRECISION = 100

# Matches the 20 decimal places kept by the legacy big-number division
DEFAULT_DIVISION_PLACES = 20

DEFAULT_HEX_FRACTION_DIGITS = 20

# Upper bound on the configured floor
MAX_PRECISION = 1000


# =============================================================================
# ConversionConfig Class
# =============================================================================

@dataclass(frozen=True)
class ConversionConfig:
    """
    Conversion engine configuration.

    ============================================================================
    CONFIGURATION PARAMETERS:
    ============================================================================
    - precision: Minimum context precision in digits (default: 100)
    - division_places: Decimal places kept by division (default: 20)
    - hex_fraction_digits: Hex fraction digits on serialization (default: 20)
    ============================================================================

    Reliability Level: L6 Critical (Sovereign Tier)
    Input Constraints: All values must be positive, division_places < precision
    Side Effects: None (frozen)
    """

    precision: int = DEFAULT_PRECISION
    division_places: int = DEFAULT_DIVISION_PLACES
    hex_fraction_digits: int = DEFAULT_HEX_FRACTION_DIGITS

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConversionConfigurationError: If any value is out of range (NUM-005)
        """
        errors: List[str] = []

        if not 1 <= self.precision <= MAX_PRECISION:
            errors.append(
                f"ETHCONV_PRECISION must be between 1 and {MAX_PRECISION}, "
                f"got: {self.precision}"
            )

        if self.division_places < 0:
            errors.append(
                f"ETHCONV_DIVISION_PLACES must be non-negative, got: {self.division_places}"
            )
        elif self.division_places >= self.precision:
            errors.append(
                f"ETHCONV_DIVISION_PLACES ({self.division_places}) must be lower "
                f"than ETHCONV_PRECISION ({self.precision})"
            )

        if self.hex_fraction_digits < 0:
            errors.append(
                f"ETHCONV_HEX_FRACTION_DIGITS must be non-negative, "
                f"got: {self.hex_fraction_digits}"
            )

        if errors:
            error_msg = "Conversion configuration validation failed: " + "; ".join(errors)
            logger.error(f"[{NumericErrorCode.CONFIG_INVALID}] {error_msg}")
            raise ConversionConfigurationError(error_msg)

        logger.debug(
            f"[NUMERIC-CONFIG] Configuration validated | "
            f"precision={self.precision} | "
            f"division_places={self.division_places} | "
            f"hex_fraction_digits={self.hex_fraction_digits}"
        )

    def arithmetic_context(self, min_precision: Optional[int] = None) -> Context:
        """
        Build the decimal context used for magnitude arithmetic.

        Division by zero, invalid operations and overflow are trapped so they
        surface as exceptions instead of Infinity/NaN magnitudes.

        Args:
            min_precision: Significant digits the caller needs for an exact
                result; the context is widened past the configured precision
                when this is larger
        """
        precision = self.precision
        if min_precision is not None and min_precision > precision:
            precision = min_precision
        return Context(
            prec=precision,
            rounding=ROUND_HALF_UP,
            traps=[DivisionByZero, InvalidOperation, Overflow],
        )

    @classmethod
    def from_environment(cls, validate: bool = True) -> "ConversionConfig":
        """
        Load configuration from environment variables.

        Malformed integers fall back to their defaults with a warning; values
        that parse but are out of range fail validation.

        Args:
            validate: Whether to validate configuration after loading (default: True)

        Returns:
            ConversionConfig instance with values from environment

        Raises:
            ConversionConfigurationError: If configuration is invalid (NUM-005)
        """
        config = cls(
            precision=_read_int("ETHCONV_PRECISION", DEFAULT_PRECISION),
            division_places=_read_int("ETHCONV_DIVISION_PLACES", DEFAULT_DIVISION_PLACES),
            hex_fraction_digits=_read_int(
                "ETHCONV_HEX_FRACTION_DIGITS", DEFAULT_HEX_FRACTION_DIGITS
            ),
        )

        logger.info(
            f"[NUMERIC-CONFIG] Loading configuration from environment | "
            f"ETHCONV_PRECISION={config.precision} | "
            f"ETHCONV_DIVISION_PLACES={config.division_places} | "
            f"ETHCONV_HEX_FRACTION_DIGITS={config.hex_fraction_digits}"
        )

        if validate:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for logging."""
        return {
            "precision": self.precision,
            "division_places": self.division_places,
            "hex_fraction_digits": self.hex_fraction_digits,
        }


def _read_int(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(
            f"[NUMERIC-CONFIG] Invalid {name} value: {raw}, using default: {default}"
        )
        return default


# =============================================================================
# Module-Level Configuration Instance
# =============================================================================

_config_instance: Optional[ConversionConfig] = None


def get_conversion_config() -> ConversionConfig:
    """
    Get the global conversion configuration instance.

    Loads from environment variables on first access.

    Raises:
        ConversionConfigurationError: If configuration is invalid (NUM-005)
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = ConversionConfig.from_environment(validate=True)

    return _config_instance


def reset_conversion_config() -> None:
    """
    Reset the global configuration instance.

    Primarily for tests that change environment variables between cases.
    """
    global _config_instance
    _config_instance = None
    logger.debug("[NUMERIC-CONFIG] Configuration instance reset")
