"""Display formatting for amounts and percentages.

Upstream figures are floats in the account currency (EUR). Signed variants
always carry an explicit '+' or '-'.
"""

CURRENCY_SYMBOL = "€"


def money_display(amount: float) -> str:
    """1234.5 -> '1234.50 €'."""
    return f"{amount:.2f} {CURRENCY_SYMBOL}"


def signed_money_display(amount: float) -> str:
    """50 -> '+50.00 €', -12 -> '-12.00 €'."""
    return f"{amount:+.2f} {CURRENCY_SYMBOL}"


def percent_display(value: float) -> str:
    """5 -> '+5.00%', -1 -> '-1.00%'."""
    return f"{value:+.2f}%"


def weight_display(value: float) -> str:
    """Unsigned portfolio weight: 25 -> '25.0%'."""
    return f"{value:.1f}%"


def color_for(value: float) -> str:
    """'green' for zero or gains, 'red' for losses."""
    return "green" if value >= 0 else "red"


def size_display(num_bytes: int) -> str:
    """Byte count with binary units: 2048 -> '2.0 KB'."""
    size = float(max(num_bytes, 0))
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{round(size, 2)} {unit}"
        size /= 1024
    return f"{round(size, 2)} GB"
