"""
Transaction fee arithmetic on hex-encoded gas values.
"""

from ethconv.conversion import multiply_currencies
from ethconv.parser import NumericBase, RawValue


def calc_gas_total(gas_limit: RawValue = "0", gas_price: RawValue = "0") -> str:
    """
    gas_limit * gas_price as an unprefixed hex string.

    Both operands are read as hex, numbers included: calc_gas_total(12, 15)
    is 0x12 * 0x15 == "17a".
    """
    return multiply_currencies(
        gas_limit,
        gas_price,
        to_numeric_base=NumericBase.HEX,
        multiplicand_base=16,
        multiplier_base=16,
    )
