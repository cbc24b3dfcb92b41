from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP

from utils.constants import CENT, DEFAULT_CURRENCY_SYMBOL


def to_amount(value) -> Decimal:
    """Coerce a user amount to a cent-quantized Decimal.

    Floats go through str() so 0.1 stays 0.10 instead of its binary
    expansion. Raises ValueError for anything that is not a number.
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def split_amount(total: Decimal, parts: int) -> list[Decimal]:
    """Split total into `parts` cent amounts that sum to total exactly.

    Every share is total / parts truncated to the cent; the leftover cents
    are added to the first share.
    """
    if parts < 1:
        raise ValueError("Cannot split into fewer than one part.")
    total = to_amount(total)
    share = (total / parts).quantize(CENT, rounding=ROUND_DOWN)
    shares = [share] * parts
    shares[0] = total - share * (parts - 1)
    return shares


def format_currency(amount: Decimal, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format an amount as currency string, e.g. 'R$ 1,234.56'."""
    return f"{symbol} {amount:,.2f}"


def format_percent(value: Decimal) -> str:
    return f"{value:.1f}%"
