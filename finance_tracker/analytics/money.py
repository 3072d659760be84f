from decimal import Decimal, ROUND_HALF_UP

_CENTS = Decimal("0.01")
_UNITS = Decimal("1")


def round_money(value: float) -> float:
    """Round half-up to 2 decimals (12.345 -> 12.35)."""
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def round_whole(value: float) -> int:
    """Round half-up to an integer, used for figures quoted in messages."""
    return int(Decimal(str(value)).quantize(_UNITS, rounding=ROUND_HALF_UP))


def format_amount(value: float, currency: str = "") -> str:
    """Whole-unit amount with an optional currency code, e.g. ``130 RON``."""
    text = str(round_whole(value))
    return f"{text} {currency}" if currency else text
