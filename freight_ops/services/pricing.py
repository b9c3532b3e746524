"""
Freight cost calculation.

Pure functions over already-resolved values: the caller looks
the tariff up, this module only does the arithmetic.
"""

from decimal import Decimal, ROUND_HALF_UP

from freight_ops.exceptions import ValidationError
from freight_ops.models.tariff import Tariff

CURRENCY_PRECISION = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize a value to currency precision."""
    return Decimal(str(value)).quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)


def calculate_cost(weight, tariff: Tariff | None, default_rate) -> Decimal:
    """
    Price a shipment.

    weight x tariff.kg_rate when a tariff applies, otherwise
    weight x default_rate. The fallback is a business default,
    not an error.
    """
    if weight is None:
        raise ValidationError("weight is required")
    weight = Decimal(str(weight))
    if weight <= 0:
        raise ValidationError("weight must be positive")

    rate = tariff.kg_rate if tariff is not None else default_rate
    return to_money(weight * Decimal(str(rate)))
