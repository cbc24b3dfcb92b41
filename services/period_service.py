from datetime import date
from typing import Iterable, Optional

from models.transaction import Transaction
from utils.date_helpers import add_months, month_bounds


def select_month(
    ledger: Iterable[Transaction],
    wallet_id: Optional[str],
    year: int,
    month: int,
) -> list[Transaction]:
    """Rows dated within the month (both ends inclusive) for one wallet.

    Pass wallet_id=None for all wallets. Ledger order is preserved.
    """
    start, end = month_bounds(year, month)
    return [
        tx for tx in ledger
        if start <= tx.date <= end
        and (wallet_id is None or tx.wallet == wallet_id)
    ]


def filter_transactions(
    rows: Iterable[Transaction],
    type_filter: Optional[str] = None,
    category_filter: Optional[str] = None,
) -> list[Transaction]:
    """Apply the list filters; None or 'all' disables a filter."""
    result = []
    for tx in rows:
        if type_filter not in (None, "all") and tx.type != type_filter:
            continue
        if category_filter not in (None, "all") and tx.category != category_filter:
            continue
        result.append(tx)
    return result


def categories_in(rows: Iterable[Transaction]) -> list[str]:
    """Distinct categories in first-seen order, for building filter choices."""
    return list(dict.fromkeys(tx.category for tx in rows))


def month_window(end: date, count: int) -> list[tuple[int, int]]:
    """(year, month) tuples for `count` months ending at `end`, oldest first."""
    if count < 1:
        raise ValueError("Window must cover at least one month.")
    first = end.replace(day=1)
    months = []
    for i in range(count - 1, -1, -1):
        d = add_months(first, -i)
        months.append((d.year, d.month))
    return months


def series_rows(ledger: Iterable[Transaction], series_id: str) -> list[Transaction]:
    """The origin row and every row linked to it, sorted by date."""
    rows = [tx for tx in ledger if tx.series_id == series_id]
    return sorted(rows, key=lambda tx: tx.date)
