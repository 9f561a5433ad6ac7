from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not an amount")
    # repr(float) даёт кратчайшую форму, поэтому 0.1 остаётся ровно 0.1
    return Decimal(repr(value)) if isinstance(value, float) else Decimal(value)


def round_half_up(value: Number, places: int) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def format_money(value: Number, places: int) -> str:
    return f"{round_half_up(value, places):.{places}f}"


def to_wire_number(value: Decimal) -> Union[int, float]:
    # целые суммы пишутся как 237, а не 237.0
    return int(value) if value == value.to_integral_value() else float(value)
