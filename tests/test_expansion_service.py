import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from models.errors import InvalidTransactionError
from models.transaction import (
    InstallmentTransaction,
    RecurringTransaction,
    Transaction,
    TransactionDraft,
)
from services.expansion_service import (
    expand_installments,
    expand_recurrence,
    horizon_from,
    materialize,
    occurrence_dates,
    validate_draft,
)


def _draft(**overrides):
    fields = {
        "type": "expense",
        "category": "Food",
        "amount": Decimal("300.00"),
        "description": "Groceries",
        "date": date(2025, 1, 10),
        "wallet": "principal",
    }
    fields.update(overrides)
    return TransactionDraft(**fields)


@pytest.mark.parametrize("total", ["1000.00", "99.99", "1234.57", "0.60"])
def test_installment_amounts_sum_exactly(total, id_factory):
    for n in range(1, 61):
        rows = expand_installments(_draft(amount=Decimal(total), installments=n), "origin", id_factory)
        assert len(rows) == n
        assert sum(r.amount for r in rows) == Decimal(total), f"cent drift for n={n}"
        assert all(r.amount > 0 for r in rows)


def test_installment_remainder_goes_to_first_row(id_factory):
    rows = expand_installments(_draft(amount=Decimal("100"), installments=3), "origin", id_factory)
    assert [r.amount for r in rows] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]


def test_installment_dates_clamp_to_month_end(id_factory):
    leap = expand_installments(_draft(date=date(2024, 1, 31), installments=3), "a", id_factory)
    assert [r.date for r in leap] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]

    common = expand_installments(_draft(date=date(2025, 1, 31), installments=3), "b", id_factory)
    assert [r.date for r in common] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]


def test_installment_rows_link_to_origin(id_factory):
    rows = expand_installments(_draft(installments=4, credit_card="X"), "origin", id_factory)

    assert all(isinstance(r, InstallmentTransaction) for r in rows)
    assert rows[0].id == "origin"
    assert rows[0].parent_transaction_id is None
    assert [r.parent_transaction_id for r in rows[1:]] == ["origin"] * 3
    assert [r.current_installment for r in rows] == [1, 2, 3, 4]
    assert {r.installments for r in rows} == {4}
    assert {r.credit_card for r in rows} == {"X"}
    assert len({r.id for r in rows}) == 4
    assert rows[1].label == "2/4"


def test_monthly_recurrence_stops_at_end_date(id_factory):
    draft = _draft(
        date=date(2025, 1, 15),
        is_recurring=True,
        recurrence_frequency="monthly",
        recurrence_end_date=date(2025, 4, 15),
    )
    rows = expand_recurrence(draft, date(2030, 1, 1), "origin", id_factory)

    assert [r.date for r in rows] == [
        date(2025, 1, 15), date(2025, 2, 15), date(2025, 3, 15), date(2025, 4, 15),
    ]
    assert all(isinstance(r, RecurringTransaction) and r.is_recurring for r in rows)
    assert rows[0].id == "origin"
    assert [r.parent_transaction_id for r in rows] == [None, "origin", "origin", "origin"]


def test_recurrence_without_end_date_stops_at_horizon(id_factory):
    start = date(2024, 1, 1)
    horizon = horizon_from(start, 12)
    draft = _draft(date=start, is_recurring=True, recurrence_frequency="daily")

    rows = expand_recurrence(draft, horizon, "origin", id_factory)

    assert len(rows) <= 367
    assert len(rows) == 367
    assert rows[-1].date == horizon
    assert all(r.date <= horizon for r in rows)


def test_horizon_before_end_date_wins(id_factory):
    draft = _draft(
        date=date(2025, 1, 15),
        is_recurring=True,
        recurrence_frequency="monthly",
        recurrence_end_date=date(2025, 12, 31),
    )
    rows = expand_recurrence(draft, date(2025, 3, 1), "origin", id_factory)
    assert [r.date for r in rows] == [date(2025, 1, 15), date(2025, 2, 15)]


def test_recurrence_always_keeps_the_origin_occurrence(id_factory):
    draft = _draft(date=date(2025, 6, 1), is_recurring=True, recurrence_frequency="weekly")
    rows = expand_recurrence(draft, date(2025, 1, 1), "origin", id_factory)
    assert [r.date for r in rows] == [date(2025, 6, 1)]


def test_monthly_steps_do_not_drift_after_short_months():
    dates = occurrence_dates(date(2024, 1, 31), "monthly", None, date(2024, 4, 30))
    assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]


def test_yearly_steps_from_leap_day():
    dates = occurrence_dates(date(2024, 2, 29), "yearly", None, date(2029, 1, 1))
    assert dates == [
        date(2024, 2, 29), date(2025, 2, 28), date(2026, 2, 28), date(2027, 2, 28), date(2028, 2, 29),
    ]


def test_weekly_steps():
    dates = occurrence_dates(date(2025, 1, 1), "weekly", date(2025, 1, 29), date(2030, 1, 1))
    assert len(dates) == 5
    assert dates[-1] == date(2025, 1, 29)


def test_non_recurring_draft_is_a_single_plain_row(id_factory):
    rows = expand_recurrence(_draft(), date(2030, 1, 1), "origin", id_factory)
    assert len(rows) == 1
    assert type(rows[0]) is Transaction
    assert rows[0].id == "origin"
    assert rows[0].amount == Decimal("300.00")


def test_materialize_prefers_installments_over_recurrence(id_factory, caplog):
    draft = _draft(installments=3, is_recurring=True, recurrence_frequency="monthly")

    with caplog.at_level(logging.WARNING):
        rows = materialize(draft, date(2030, 1, 1), "origin", id_factory)

    assert len(rows) == 3
    assert all(r.is_installment and not r.is_recurring for r in rows)
    assert "ignoring recurrence" in caplog.text


def test_materialize_single_installment_is_plain(id_factory):
    rows = materialize(_draft(installments=1), date(2030, 1, 1), id_factory=id_factory)
    assert len(rows) == 1
    assert not rows[0].is_installment
    assert rows[0].id == "tx-1"


def test_materialize_recurring(id_factory):
    draft = _draft(is_recurring=True, recurrence_frequency="monthly")
    rows = materialize(draft, date(2025, 6, 30), id_factory=id_factory)
    assert len(rows) == 6
    assert rows[0].id == "tx-1"
    assert {r.parent_transaction_id for r in rows[1:]} == {"tx-1"}


def test_amount_is_quantized_to_cents(id_factory):
    rows = materialize(_draft(amount=Decimal("10.005")), date(2030, 1, 1), id_factory=id_factory)
    assert rows[0].amount == Decimal("10.01")


@pytest.mark.parametrize("overrides", [
    {"amount": Decimal("0")},
    {"amount": Decimal("-5")},
    {"amount": "abc"},
    {"installments": 0},
    {"amount": Decimal("0.02"), "installments": 3},
    {"is_recurring": True, "recurrence_frequency": "hourly"},
    {"is_recurring": True, "recurrence_frequency": None},
    {"is_recurring": True, "recurrence_frequency": "monthly", "recurrence_end_date": date(2024, 12, 31)},
    {"type": "income", "credit_card": "X"},
    {"type": "transfer"},
    {"description": "   "},
    {"wallet": ""},
    {"date": datetime(2025, 1, 31, 15, 0)},
    {"date": "2025-01-31"},
])
def test_invalid_drafts_are_rejected(overrides):
    with pytest.raises(InvalidTransactionError):
        validate_draft(_draft(**overrides))


def test_invalid_draft_error_is_a_value_error():
    with pytest.raises(ValueError):
        expand_installments(_draft(installments=0), "origin")


def test_horizon_from_clamps():
    assert horizon_from(date(2025, 1, 31), 1) == date(2025, 2, 28)
    with pytest.raises(ValueError):
        horizon_from(date(2025, 1, 1), 0)
