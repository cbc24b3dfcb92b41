import logging
from datetime import date
from typing import Iterable, Optional

from models.category import CategorySet
from models.credit_card import CardUsage, CreditCard
from models.errors import InvalidTransactionError
from models.report import LedgerAggregate, TrendPoint
from models.transaction import Transaction, TransactionDraft
from models.wallet import Wallet
from services import category_service
from services.credit_card_service import card_usage, check_limit
from services.expansion_service import (
    IdFactory,
    horizon_from,
    materialize,
    new_transaction_id,
    validate_draft,
)
from services.period_service import categories_in, filter_transactions, select_month, series_rows
from services.report_service import aggregate, card_exposure_for_month, export_rows, trend_series
from utils.app_config import get_horizon_months, get_trend_months
from utils.constants import DEFAULT_WALLETS
from utils.date_helpers import today

logger = logging.getLogger(__name__)


class LedgerService:
    """Owns the application's ledger list and feeds it to the pure engine functions."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        wallets: Optional[Iterable[Wallet]] = None,
        cards: Iterable[CreditCard] = (),
        categories: Optional[CategorySet] = None,
        horizon_months: Optional[int] = None,
        trend_months: Optional[int] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self._rows: list[Transaction] = list(transactions)
        if wallets is None:
            wallets = [Wallet(**w) for w in DEFAULT_WALLETS]
        self._wallets = {w.id: w for w in wallets}
        self._cards = {c.id: c for c in cards}
        self._categories = categories or CategorySet.default()
        self._horizon_months = horizon_months or get_horizon_months()
        self._trend_months = trend_months or get_trend_months()
        self._id_factory = id_factory or new_transaction_id

    # ── Reads ────────────────────────────────────────────────────────────────

    def get_all(self) -> list[Transaction]:
        return list(self._rows)

    def get_by_id(self, tx_id: str) -> Transaction | None:
        for tx in self._rows:
            if tx.id == tx_id:
                return tx
        return None

    def get_series(self, tx_id: str) -> list[Transaction]:
        tx = self.get_by_id(tx_id)
        if tx is None:
            return []
        return series_rows(self._rows, tx.series_id)

    def get_wallets(self) -> list[Wallet]:
        return list(self._wallets.values())

    def get_cards(self) -> list[CreditCard]:
        return list(self._cards.values())

    @property
    def categories(self) -> CategorySet:
        return self._categories

    def get_month(
        self,
        wallet_id: str | None,
        year: int,
        month: int,
        type_filter: str | None = None,
        category_filter: str | None = None,
    ) -> list[Transaction]:
        rows = select_month(self._rows, wallet_id, year, month)
        return filter_transactions(rows, type_filter, category_filter)

    def get_summary(self, wallet_id: str | None, year: int, month: int) -> LedgerAggregate:
        return aggregate(select_month(self._rows, wallet_id, year, month))

    def get_trend(
        self, wallet_id: str | None, end_date: date, months: int | None = None
    ) -> list[TrendPoint]:
        return trend_series(self._rows, wallet_id, end_date, months or self._trend_months)

    def get_card_usage(self, card_id: str, year: int, month: int) -> CardUsage:
        card = self._cards.get(card_id)
        if card is None:
            raise ValueError(f"Unknown card: {card_id}")
        return card_usage(card, self._rows, year, month)

    def get_card_exposure(self, year: int, month: int) -> dict:
        """{card_id: amount} charged to each card in the month, across wallets."""
        return card_exposure_for_month(self._rows, year, month)

    def get_month_categories(self, wallet_id: str | None, year: int, month: int) -> list[str]:
        return categories_in(select_month(self._rows, wallet_id, year, month))

    def export_month(self, wallet_id: str | None, year: int, month: int) -> list[list[str]]:
        """Return rows suitable for CSV export."""
        rows = select_month(self._rows, wallet_id, year, month)
        return export_rows(rows, self._wallets.values(), self._cards.values())

    # ── Writes ───────────────────────────────────────────────────────────────

    def add(self, draft: TransactionDraft, reference_date: date | None = None) -> list[Transaction]:
        """Expand the draft, check the card limit and append the new rows.

        reference_date (default: today) anchors the recurrence horizon.
        Returns the new rows in expansion order.
        """
        self._validate(draft)
        horizon = horizon_from(reference_date or today(), self._horizon_months)
        rows = materialize(draft, horizon, id_factory=self._id_factory)

        taken = {tx.id for tx in self._rows}
        duplicated = [tx.id for tx in rows if tx.id in taken]
        if duplicated:
            raise InvalidTransactionError(f"Transaction ids already in use: {duplicated}")

        if draft.credit_card:
            check_limit(self._cards[draft.credit_card], self._rows, rows)

        self._rows.extend(rows)
        logger.info("Added %d row(s) for %r", len(rows), draft.description)
        return rows

    def delete(self, tx_id: str):
        """Remove a single row. Other rows of its series stay."""
        before = len(self._rows)
        self._rows = [tx for tx in self._rows if tx.id != tx_id]
        if len(self._rows) == before:
            raise KeyError(tx_id)
        logger.info("Deleted transaction %s", tx_id)

    def add_category(self, type_: str, name: str):
        self._categories = category_service.add_category(self._categories, type_, name)

    def remove_category(self, type_: str, name: str):
        self._categories = category_service.remove_category(self._categories, type_, name)

    def _validate(self, draft: TransactionDraft):
        validate_draft(draft)
        if draft.wallet not in self._wallets:
            raise InvalidTransactionError(f"Unknown wallet: {draft.wallet}")
        if (draft.type, draft.category.strip()) not in self._categories:
            raise InvalidTransactionError(f"Unknown {draft.type} category: {draft.category}")
        if draft.credit_card and draft.credit_card not in self._cards:
            raise InvalidTransactionError(f"Unknown card: {draft.credit_card}")
