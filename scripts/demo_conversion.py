#!/usr/bin/env python3
"""
Conversion Engine Demonstration
Walks one value across base, denomination and currency
"""

import logging

from dotenv import load_dotenv

from ethconv import (
    EtherDenomination,
    NumericBase,
    NumericValue,
    conversion_util,
    get_conversion_config,
    sum_hexes,
)

# Load environment variables first (ETHCONV_* settings)
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

config = get_conversion_config()

print('=' * 60)
print('CONVERSION ENGINE DEMONSTRATION')
print(f'Configuration: {config.to_dict()}')
print('=' * 60)

# The same digits in two bases
print('\n--- Declared Base ---')
for base in (NumericBase.DEC, NumericBase.HEX):
    value = NumericValue('100', base)
    print(f'"100" as {base.name}: {value.to_base(NumericBase.DEC)}')

# Denomination chain
print('\n--- Denomination (mandatory unit rounding) ---')
wei = NumericValue('9358749494527040', NumericBase.DEC, EtherDenomination.WEI)
print(f'WEI:  {wei}')
print(f'GWEI: {wei.to_denomination(EtherDenomination.GWEI)}')
print(f'ETH:  {wei.to_denomination(EtherDenomination.ETH)}')

# Currency conversion through the facade
print('\n--- Currency ---')
usd = conversion_util(
    '0xde0b6b3a7640000',
    from_numeric_base=NumericBase.HEX,
    to_numeric_base=NumericBase.DEC,
    from_denomination=EtherDenomination.WEI,
    from_currency='ETH',
    to_currency='USD',
    conversion_rate=468.58,
    number_of_decimals=2,
)
print(f'1 ETH at 468.58 -> {usd} USD')

# Permissive zero (logged as NUM-006)
missing = conversion_util(
    '1',
    from_numeric_base=NumericBase.DEC,
    from_currency='ETH',
    to_currency='USD',
)
print(f'Missing rate -> {missing!r} ({type(missing).__name__})')

# Gas fee totals
print('\n--- Hex Sums ---')
print(f"0x5208 + 0x1 + 0xff -> {sum_hexes('0x5208', '0x1', '0xff')}")

print('\n' + '=' * 60)
