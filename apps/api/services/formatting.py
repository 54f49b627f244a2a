from ..settings import settings


def format_currency(amount: float, symbol: str | None = None) -> str:
    """Single display rule for money: symbol, thousands grouping, two decimals."""
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    # round first so tiny negatives don't show as "-$0.00"
    amount = round(amount, 2)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
