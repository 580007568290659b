from utils.constants import CURRENCY_SYMBOL


def format_currency(amount: float, symbol: str = CURRENCY_SYMBOL, grouped: bool = True) -> str:
    """Format a float as currency string, e.g. '¥1,234.56' ('¥1234.56' ungrouped)."""
    if grouped:
        return f"{symbol}{amount:,.2f}"
    return f"{symbol}{amount:.2f}"


def format_signed(amount: float, type_: str, symbol: str = CURRENCY_SYMBOL) -> str:
    """'+¥12.00' for income, '-¥12.00' for expense."""
    sign = "+" if type_ == "income" else "-"
    return f"{sign}{symbol}{abs(amount):.2f}"
