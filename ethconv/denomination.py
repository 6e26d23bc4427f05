"""
============================================================================
Ether Numeric Conversion Engine - Denomination Scaler
============================================================================

Reliability Level: L6 Critical (Sovereign Tier)

Fixed-ratio conversion between WEI (base unit), GWEI (mid unit) and ETH
(major unit). Magnitudes are normalized into ETH terms and denominated back
out of them.

MANDATORY UNIT ROUNDING:
    Denominating always rounds, before any caller-requested precision:
    - WEI:  0 decimal places
    - GWEI: 9 decimal places
    - ETH:  9 decimal places

============================================================================
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

from ethconv.config import get_conversion_config
from ethconv.errors import ArgumentError
from ethconv.rounding import multiply_magnitudes, quantize_places, strip_trailing_zeros


class EtherDenomination(Enum):
    """
    Units a magnitude can be expressed in.

    Reliability Level: SOVEREIGN TIER
    """
    WEI = "WEI"
    GWEI = "GWEI"
    ETH = "ETH"

    @classmethod
    def coerce(
        cls, value: Union["EtherDenomination", str, None]
    ) -> Optional["EtherDenomination"]:
        """
        Resolve a denomination given as the enum or its name ("gwei").

        Raises:
            ArgumentError: If value names no known denomination (NUM-002)
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ArgumentError(f"Unknown denomination: {value!r}")


# =============================================================================
# Constants
# =============================================================================

# Units per ETH
WEI_MULTIPLIER = Decimal("1000000000000000000")
GWEI_MULTIPLIER = Decimal("1000000000")
ETH_MULTIPLIER = Decimal("1")

WEI_SCALING_PLACES = 0
GWEI_SCALING_PLACES = 9
ETH_SCALING_PLACES = 9

SCALING_ROUNDING = ROUND_HALF_UP

# Denomination every magnitude is normalized into
NORMALIZED_DENOMINATION = EtherDenomination.ETH


def multiplier_for(denomination: EtherDenomination) -> Decimal:
    """How many units of `denomination` make one ETH."""
    if denomination is EtherDenomination.WEI:
        return WEI_MULTIPLIER
    if denomination is EtherDenomination.GWEI:
        return GWEI_MULTIPLIER
    if denomination is EtherDenomination.ETH:
        return ETH_MULTIPLIER
    raise AssertionError(f"Unhandled denomination: {denomination!r}")


def scaling_places_for(denomination: EtherDenomination) -> int:
    """Decimal places kept when a magnitude is denominated into a unit."""
    if denomination is EtherDenomination.WEI:
        return WEI_SCALING_PLACES
    if denomination is EtherDenomination.GWEI:
        return GWEI_SCALING_PLACES
    if denomination is EtherDenomination.ETH:
        return ETH_SCALING_PLACES
    raise AssertionError(f"Unhandled denomination: {denomination!r}")


def normalize(value: Decimal, from_denomination: EtherDenomination) -> Decimal:
    """
    Express a magnitude held in `from_denomination` in ETH terms.

    Exact: every multiplier is a power of ten, so the quotient keeps the
    digits of value.
    """
    context = get_conversion_config().arithmetic_context(len(value.as_tuple().digits))
    return context.divide(value, multiplier_for(from_denomination))


def denominate(value: Decimal, to_denomination: EtherDenomination) -> Decimal:
    """
    Express an ETH-terms magnitude in `to_denomination`.

    Applies the mandatory unit rounding (ROUND_HALF_UP) unconditionally.
    """
    scaled = multiply_magnitudes(value, multiplier_for(to_denomination))
    rounded = quantize_places(scaled, scaling_places_for(to_denomination), SCALING_ROUNDING)
    return strip_trailing_zeros(rounded)
