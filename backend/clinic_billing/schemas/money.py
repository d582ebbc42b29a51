"""Decimal field types shared by the money-carrying schemas.

Scales match the storage columns: amounts are ``Numeric(12, 4)`` and exchange
rates ``Numeric(18, 8)``. Inputs finer than that are refused rather than
rounded on the way to the database.
"""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field


def _reject_float(value: Any) -> Any:
    # Binary floats cannot represent most cent amounts exactly
    if isinstance(value, float):
        raise ValueError("money amounts must be given as strings, integers or Decimals")
    return value


Money = Annotated[
    Decimal, BeforeValidator(_reject_float), Field(max_digits=12, decimal_places=4)
]
Rate = Annotated[
    Decimal, BeforeValidator(_reject_float), Field(max_digits=18, decimal_places=8)
]
