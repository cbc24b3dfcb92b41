import logging
import os
import sys
from datetime import date
from decimal import Decimal

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models.credit_card import CreditCard
from models.transaction import TransactionDraft
from services.ledger_service import LedgerService
from services.report_service import metric_insight
from utils.app_config import get_currency_symbol
from utils.constants import APP_NAME
from utils.currency import format_currency, format_percent
from utils.date_helpers import friendly_month, parse_date, today

SAMPLE_DRAFTS = [
    ("income",  "Salary",    "5000",  "Monthly salary",       "2025-01-05", None, None, "monthly"),
    ("expense", "Housing",   "1200",  "Rent",                 "2025-01-10", None, None, "monthly"),
    ("expense", "Food",      "450",   "Groceries",            "2025-01-15", None, None, None),
    ("expense", "Transport", "320",   "Fuel and transit",     "2025-01-18", None, None, None),
    ("income",  "Freelance", "1500",  "Freelance project",    "2025-01-20", None, None, None),
    ("expense", "Leisure",   "280",   "Cinema and dinner",    "2025-01-22", "card", None, None),
    ("expense", "Education", "900",   "Online course",        "2025-01-25", "card", 3, None),
]


def build_sample_ledger(reference: date) -> LedgerService:
    ledger = LedgerService(cards=[CreditCard(id="card", name="Main card", limit=Decimal("3000"))])
    for type_, category, amount, description, day, card, installments, frequency in SAMPLE_DRAFTS:
        ledger.add(
            TransactionDraft(
                type=type_,
                category=category,
                amount=Decimal(amount),
                description=description,
                date=parse_date(day),
                wallet="principal",
                credit_card=card,
                installments=installments,
                is_recurring=frequency is not None,
                recurrence_frequency=frequency,
                recurrence_end_date=parse_date("2025-12-31") if frequency else None,
            ),
            reference_date=reference,
        )
    return ledger


def print_month(ledger: LedgerService, year: int, month: int, symbol: str):
    summary = ledger.get_summary("principal", year, month)
    totals = summary.totals
    print(f"{APP_NAME}: {friendly_month(year, month)}")
    print(f"  Income:       {format_currency(totals.income, symbol)}")
    print(f"  Expenses:     {format_currency(totals.expense, symbol)}")
    print(f"  Balance:      {format_currency(totals.balance, symbol)}")
    print(f"  Savings rate: {format_percent(totals.savings_rate * 100)}")

    if summary.category_breakdown:
        print("  By category:")
        for share in summary.category_breakdown:
            print(f"    {share.category:<12} {format_currency(share.total, symbol):>14} "
                  f"{format_percent(share.percentage):>7}")

    for card in ledger.get_cards():
        usage = ledger.get_card_usage(card.id, year, month)
        print(f"  {card.name}: {format_currency(usage.used, symbol)} used, "
              f"{format_currency(usage.available, symbol)} available")

    series = ledger.get_trend("principal", date(year, month, 1))
    insight = metric_insight(series, "expense")
    print(f"  Expenses are {insight.trend} "
          f"({format_percent(insight.percentage_change)} vs previous month)")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) > 1:
        target = parse_date(sys.argv[1] + "-01")
        if target is None:
            print(f"Usage: {sys.argv[0]} [YYYY-MM]", file=sys.stderr)
            sys.exit(2)
    else:
        target = date(2025, 3, 1)

    ledger = build_sample_ledger(reference=today())
    print_month(ledger, target.year, target.month, get_currency_symbol())


if __name__ == "__main__":
    main()
