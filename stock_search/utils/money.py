from decimal import Decimal, ROUND_HALF_UP
import logging

logger = logging.getLogger(__name__)


def dec(x) -> Decimal:
    """
    Safely convert any value to `Decimal`.

    Args:
        x: The value to convert.

    Returns:
        A Decimal representation of the value (defaults to 0 if `x` is None).
    """
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))


def quantize(dec: Decimal, decimals: int) -> Decimal:
    """
    Round a Decimal to the specified number of decimal places using ROUND_HALF_UP.

    Args:
        dec: The Decimal to round.
        decimals: Number of decimal places.

    Returns:
        Rounded Decimal value.
    """
    q = Decimal("1").scaleb(-decimals) if decimals else Decimal("1")
    return dec.quantize(q, rounding=ROUND_HALF_UP)


def format_usd_amount(amount, *, decimals: int = 2) -> str:
    """
    Format an amount as a dollar price badge, e.g. `$1234.50`.

    Negative amounts keep the sign in front of the currency symbol (`-$3.10`).

    Args:
        amount: Numeric-like value.
        decimals: Number of decimal places.

    Returns:
        Formatted string.
    """
    q = quantize(dec(amount), decimals)
    sign = "-" if q < 0 else ""
    return f"{sign}${abs(q):.{decimals}f}"
