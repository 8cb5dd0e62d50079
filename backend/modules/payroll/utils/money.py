from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def minor_unit(minor_units: int) -> Decimal:
    """``2`` -> ``Decimal('0.01')``"""
    return Decimal(1).scaleb(-minor_units)


def round_money(value: Decimal, minor_units: int = 2) -> Decimal:
    """Round half up to the currency's minor unit."""
    return to_decimal(value).quantize(minor_unit(minor_units), rounding=ROUND_HALF_UP)
