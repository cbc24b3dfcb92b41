from typing import Iterable

from models.credit_card import CardUsage, CreditCard
from models.errors import CreditLimitExceededError
from models.report import ZERO
from models.transaction import Transaction
from services.report_service import card_exposure
from utils.date_helpers import month_key


def card_usage(card: CreditCard, ledger: Iterable[Transaction], year: int, month: int) -> CardUsage:
    """How much of the card's limit the ledger uses in one month."""
    key = month_key(year, month)
    used = card_exposure(ledger).get(card.id, {}).get(key, ZERO)
    return CardUsage(card_id=card.id, month=key, limit=card.limit, used=used)


def check_limit(card: CreditCard, ledger: Iterable[Transaction], new_rows: Iterable[Transaction]):
    """Raise CreditLimitExceededError if new_rows push any month past the card limit.

    Only the rows being added are checked; months already over the limit
    because of existing rows are not reported on their own.
    """
    incoming = card_exposure(tx for tx in new_rows if tx.credit_card == card.id).get(card.id, {})
    if not incoming:
        return
    existing = card_exposure(tx for tx in ledger if tx.credit_card == card.id).get(card.id, {})
    for key, amount in incoming.items():
        total = existing.get(key, ZERO) + amount
        if total > card.limit:
            raise CreditLimitExceededError(
                f"{card.name}: {key} would reach {total:.2f} of a {card.limit:.2f} limit."
            )
