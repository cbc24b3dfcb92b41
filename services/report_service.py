from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from models.credit_card import CreditCard
from models.report import (
    ZERO,
    CategoryShare,
    LedgerAggregate,
    MetricInsight,
    MonthlyTotals,
    TrendPoint,
)
from models.transaction import Transaction
from models.wallet import Wallet
from services.period_service import month_window, select_month
from utils.constants import DEFAULT_TREND_MONTHS, EXPORT_HEADER, METRICS
from utils.date_helpers import format_date, month_key


def compute_totals(rows: Iterable[Transaction]) -> MonthlyTotals:
    income = ZERO
    expense = ZERO
    for tx in rows:
        if tx.type == "income":
            income += tx.amount
        elif tx.type == "expense":
            expense += tx.amount
    return MonthlyTotals(income=income, expense=expense)


def category_breakdown(rows: Iterable[Transaction]) -> list[CategoryShare]:
    """Expense totals per category, largest first."""
    by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for tx in rows:
        if tx.type == "expense":
            by_category[tx.category] += tx.amount

    total = sum(by_category.values(), ZERO)
    shares = [
        CategoryShare(
            category=name,
            total=amount,
            percentage=amount / total * 100 if total > 0 else ZERO,
        )
        for name, amount in by_category.items()
    ]
    shares.sort(key=lambda s: (-s.total, s.category))
    return shares


def card_exposure(rows: Iterable[Transaction]) -> dict[str, dict[str, Decimal]]:
    """{card_id: {'YYYY-MM': amount}} summed from the rows as stored.

    Installment rows already carry their own month and share of the
    purchase, so each row counts once, in the month of its own date.
    """
    exposure: dict[str, dict[str, Decimal]] = {}
    for tx in rows:
        if tx.type != "expense" or not tx.credit_card:
            continue
        months = exposure.setdefault(tx.credit_card, {})
        key = month_key(tx.date.year, tx.date.month)
        months[key] = months.get(key, ZERO) + tx.amount
    for card_id in exposure:
        exposure[card_id] = dict(sorted(exposure[card_id].items()))
    return exposure


def card_exposure_for_month(
    rows: Iterable[Transaction], year: int, month: int
) -> dict[str, Decimal]:
    """{card_id: amount} for a single month."""
    key = month_key(year, month)
    return {
        card_id: months[key]
        for card_id, months in card_exposure(rows).items()
        if key in months
    }


def aggregate(rows: Iterable[Transaction]) -> LedgerAggregate:
    rows = list(rows)
    return LedgerAggregate(
        totals=compute_totals(rows),
        category_breakdown=category_breakdown(rows),
        per_card_monthly_exposure=card_exposure(rows),
    )


def trend_series(
    ledger: Iterable[Transaction],
    wallet_id: Optional[str],
    end_date: date,
    month_count: int = DEFAULT_TREND_MONTHS,
) -> list[TrendPoint]:
    """Return per-month totals for `month_count` months ending at end_date, oldest first."""
    ledger = list(ledger)
    return [
        TrendPoint(year=y, month=m, totals=compute_totals(select_month(ledger, wallet_id, y, m)))
        for y, m in month_window(end_date, month_count)
    ]


def recommendations(metric: str, current: Decimal, trend: str) -> list[str]:
    """Rule-based advice for a metric given its newest value and trend.

    For "savings", `current` is a percentage (0-100).
    """
    advice = []
    if metric == "balance":
        if current < 0:
            advice.append("Your balance is negative. Cut non-essential expenses first.")
            advice.append("Consider raising your income with extra work or freelancing.")
        elif current > 0:
            advice.append("Keep an emergency fund of 3-6 months of expenses.")
            advice.append("Consider investing the surplus so your money grows.")
    elif metric == "income":
        if trend == "down":
            advice.append("Your income is falling. Look for new sources of income.")
            advice.append("Diversify your income sources for more security.")
        else:
            advice.append("Invest in your professional development to grow it further.")
            advice.append("Consider building passive income.")
    elif metric == "expense":
        if trend == "up":
            advice.append("Your expenses are rising. Review unnecessary spending.")
            advice.append("Apply the 50/30/20 rule: 50% needs, 30% wants, 20% savings.")
        advice.append("Cancel subscriptions and services you do not use regularly.")
        advice.append("Compare prices before large purchases.")
    elif metric == "savings":
        if current < 10:
            advice.append("Savings rate is very low. Aim for at least 10% of income.")
            advice.append("Automate saving: set money aside as soon as you are paid.")
        elif current < 20:
            advice.append("Good rate! Try to raise it gradually to 20%.")
        else:
            advice.append("Excellent! Keep this pace and consider investing.")
    else:
        raise ValueError(f"Invalid metric: {metric}")
    return advice


def metric_insight(series: list[TrendPoint], metric: str) -> MetricInsight:
    """Compare the newest month of a trend series against the one before it."""
    if metric not in METRICS:
        raise ValueError(f"Invalid metric: {metric}")
    if not series:
        raise ValueError("Trend series is empty.")

    values = [p.value_of(metric) for p in series]
    current = values[-1]
    previous = values[-2] if len(values) > 1 else ZERO
    if previous != 0:
        change = (current - previous) / abs(previous) * 100
    else:
        change = ZERO

    if current > previous:
        trend = "up"
    elif current < previous:
        trend = "down"
    else:
        trend = "stable"

    return MetricInsight(
        metric=metric,
        current=current,
        previous=previous,
        percentage_change=change,
        trend=trend,
        average=sum(values, ZERO) / len(values),
        maximum=max(values),
        minimum=min(values),
        recommendations=recommendations(metric, current, trend),
    )


def export_rows(
    rows: Iterable[Transaction],
    wallets: Iterable[Wallet] = (),
    cards: Iterable[CreditCard] = (),
) -> list[list[str]]:
    """Return rows suitable for CSV export."""
    wallet_map = {w.id: w.name for w in wallets}
    card_map = {c.id: c.name for c in cards}
    result = [list(EXPORT_HEADER)]
    for tx in sorted(rows, key=lambda t: (t.date, t.id)):
        result.append([
            format_date(tx.date),
            tx.type,
            tx.category,
            tx.description,
            f"{tx.amount:.2f}",
            wallet_map.get(tx.wallet, tx.wallet),
            card_map.get(tx.credit_card, tx.credit_card or ""),
            tx.label if tx.is_installment else "",
            tx.recurrence_frequency if tx.is_recurring else "",
        ])
    return result
