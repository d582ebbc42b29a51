from enum import Enum


class Currency(str, Enum):
    """Currencies accepted at the clinic's cash desks."""

    USD = "USD"
    UYU = "UYU"
