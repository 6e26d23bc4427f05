"""
============================================================================
Ether Numeric Conversion Engine v1.0.0
============================================================================

Reliability Level: SOVEREIGN TIER (Mission-Critical)
Purpose: Precision-preserving conversion of monetary and gas values across
numeric base, unit denomination and currency

Components:
    - parser: raw input + declared base -> Decimal magnitude
    - denomination: WEI / GWEI / ETH scaling with mandatory unit rounding
    - currency: exchange-rate application
    - rounding: HALF_DOWN / DOWN rounding policy
    - numeric: immutable NumericValue with a chainable API
    - conversion: flat-option facade, arithmetic, comparison and hex helpers

============================================================================
"""

from ethconv.config import (
    ConversionConfig,
    get_conversion_config,
    reset_conversion_config,
)
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
from ethconv.errors import (
    ArgumentError,
    ConversionConfigurationError,
    MissingRateError,
    NumericConversionError,
    NumericErrorCode,
    ParseError,
    StateError,
)
from ethconv.numeric import NumericValue
from ethconv.parser import NumericBase, parse
from ethconv.rounding import RoundingMode
from ethconv.transaction_utils import calc_gas_total

__all__ = [
    # Configuration
    'ConversionConfig',
    'get_conversion_config',
    'reset_conversion_config',
    # Value types
    'NumericValue',
    'NumericBase',
    'EtherDenomination',
    'RoundingMode',
    'parse',
    # Facade
    'ConversionOptions',
    'conversion_util',
    'add_currencies',
    'subtract_currencies',
    'multiply_currencies',
    'divide_currencies',
    'conversion_greater_than',
    'conversion_less_than',
    'conversion_gte',
    'conversion_lte',
    'conversion_max',
    'sum_hexes',
    'add_hexes',
    'subtract_hexes',
    'int_to_hex',
    'dec_gwei_to_hex_wei',
    'dec_wei_to_dec_eth',
    'hex_wei_to_dec_eth',
    'dec_eth_to_converted_currency',
    'get_wei_hex_from_decimal_value',
    'get_value_from_wei_hex',
    'get_eth_conversion_from_wei_hex',
    'calc_gas_total',
    # Errors
    'NumericErrorCode',
    'NumericConversionError',
    'ParseError',
    'ArgumentError',
    'StateError',
    'MissingRateError',
    'ConversionConfigurationError',
]

# Version tracking
__version__ = '1.0.0'
