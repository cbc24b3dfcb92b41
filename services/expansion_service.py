"""Turn a submitted transaction into the dated ledger rows it stands for.

Installment drafts become one row per month with the amount split to the
cent; recurring drafts become one row per frequency step up to the earlier
of their end date and the caller's horizon. Nothing here reads the clock or
touches the ledger: the horizon and the ids come in as arguments.
"""
import logging
import uuid
from datetime import date, datetime
from typing import Callable, Optional

from models.errors import InvalidTransactionError
from models.transaction import (
    InstallmentTransaction,
    RecurringTransaction,
    Transaction,
    TransactionDraft,
)
from utils.constants import CENT, FREQUENCIES, TRANSACTION_TYPES
from utils.currency import split_amount, to_amount
from utils.date_helpers import add_months, shift_date

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def horizon_from(reference: date, months: int) -> date:
    """Last date recurrence may reach when generating from `reference`."""
    if months < 1:
        raise ValueError("Horizon must be at least one month.")
    return add_months(reference, months)


def validate_draft(draft: TransactionDraft):
    if draft.type not in TRANSACTION_TYPES:
        raise InvalidTransactionError(f"Invalid type: {draft.type}")
    if not draft.description or not draft.description.strip():
        raise InvalidTransactionError("Description cannot be empty.")
    if not draft.category or not draft.category.strip():
        raise InvalidTransactionError("Category cannot be empty.")
    if not draft.wallet:
        raise InvalidTransactionError("A wallet is required.")
    if not isinstance(draft.date, date) or isinstance(draft.date, datetime):
        raise InvalidTransactionError(f"Invalid date: {draft.date!r}")
    try:
        amount = to_amount(draft.amount)
    except ValueError as exc:
        raise InvalidTransactionError(str(exc)) from None
    if amount <= 0:
        raise InvalidTransactionError("Amount must be positive.")
    if draft.credit_card and draft.type != "expense":
        raise InvalidTransactionError("Only expenses can be charged to a credit card.")
    if draft.installments is not None:
        if draft.installments < 1:
            raise InvalidTransactionError("Installments must be at least 1.")
        if amount < CENT * draft.installments:
            raise InvalidTransactionError(
                f"{amount} cannot be split into {draft.installments} installments."
            )
    if draft.is_recurring:
        if draft.recurrence_frequency not in FREQUENCIES:
            raise InvalidTransactionError(
                f"Invalid frequency: {draft.recurrence_frequency}"
            )
        if draft.recurrence_end_date is not None and draft.recurrence_end_date < draft.date:
            raise InvalidTransactionError("Recurrence end date is before the start date.")


def _row_fields(draft: TransactionDraft) -> dict:
    return {
        "type": draft.type,
        "category": draft.category.strip(),
        "amount": to_amount(draft.amount),
        "description": draft.description.strip(),
        "date": draft.date,
        "wallet": draft.wallet,
        "credit_card": draft.credit_card or None,
    }


def expand_installments(
    draft: TransactionDraft,
    origin_id: str,
    id_factory: Optional[IdFactory] = None,
) -> list[InstallmentTransaction]:
    """Return one row per installment, oldest first.

    Row 1 carries `origin_id` and is the parent of every later row. Each
    row is dated `base + i months` with the day clamped to the month end.
    """
    validate_draft(draft)
    make_id = id_factory or new_transaction_id
    count = draft.installments or 1
    fields = _row_fields(draft)
    amounts = split_amount(fields.pop("amount"), count)
    base = fields.pop("date")

    rows = []
    for i, amount in enumerate(amounts):
        rows.append(InstallmentTransaction(
            id=origin_id if i == 0 else make_id(),
            amount=amount,
            date=add_months(base, i),
            parent_transaction_id=None if i == 0 else origin_id,
            installments=count,
            current_installment=i + 1,
            **fields,
        ))
    logger.debug("Expanded %s into %d installments", origin_id, count)
    return rows


def occurrence_dates(
    start: date, frequency: str, end_date: Optional[date], horizon_date: date
) -> list[date]:
    """Dates from `start` stepping by `frequency` up to min(end_date, horizon_date).

    `start` itself is always included.
    """
    bound = min(end_date, horizon_date) if end_date else horizon_date
    dates = [start]
    step = 1
    while True:
        current = shift_date(start, frequency, step)
        if current > bound:
            break
        dates.append(current)
        step += 1
    return dates


def expand_recurrence(
    draft: TransactionDraft,
    horizon_date: date,
    origin_id: Optional[str] = None,
    id_factory: Optional[IdFactory] = None,
) -> list[Transaction]:
    """Return every occurrence of a recurring draft, oldest first.

    A draft that is not recurring comes back as a single plain row.
    """
    validate_draft(draft)
    make_id = id_factory or new_transaction_id
    first_id = origin_id or make_id()
    fields = _row_fields(draft)

    if not draft.is_recurring:
        return [Transaction(id=first_id, **fields)]

    base = fields.pop("date")
    dates = occurrence_dates(
        base, draft.recurrence_frequency, draft.recurrence_end_date, horizon_date
    )
    rows = []
    for i, occurrence in enumerate(dates):
        rows.append(RecurringTransaction(
            id=first_id if i == 0 else make_id(),
            date=occurrence,
            parent_transaction_id=None if i == 0 else first_id,
            recurrence_frequency=draft.recurrence_frequency,
            recurrence_end_date=draft.recurrence_end_date,
            **fields,
        ))
    logger.debug(
        "Expanded %s into %d %s occurrences up to %s",
        first_id, len(rows), draft.recurrence_frequency, rows[-1].date,
    )
    return rows


def materialize(
    draft: TransactionDraft,
    horizon_date: date,
    origin_id: Optional[str] = None,
    id_factory: Optional[IdFactory] = None,
) -> list[Transaction]:
    """Expand any draft into ledger rows.

    Installments win over recurrence: a draft carrying both is split into
    installments and its recurrence settings are dropped.
    """
    make_id = id_factory or new_transaction_id
    origin_id = origin_id or make_id()
    if draft.is_installment:
        if draft.is_recurring:
            logger.warning(
                "Draft %r has installments and recurrence; ignoring recurrence",
                draft.description,
            )
        return expand_installments(draft, origin_id, make_id)
    return expand_recurrence(draft, horizon_date, origin_id, make_id)
