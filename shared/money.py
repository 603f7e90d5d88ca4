from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import Field, PlainSerializer

CENTS = Decimal("0.01")

# Fixed-point amount: validated as Decimal with two places, rendered as a
# JSON number.
Money = Annotated[
    Decimal,
    Field(max_digits=10, decimal_places=2),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]

PositiveMoney = Annotated[Money, Field(gt=0)]


def quantize(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    return quantize(Decimal(unit_price) * quantity)
