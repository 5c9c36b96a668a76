from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


MINOR_UNITS_PER_MAJOR = Decimal("100")


def to_minor_units(value: Decimal | float | int | str) -> int:
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    minor = (amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if minor < 0:
        return 0
    return int(minor)
