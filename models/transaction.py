from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class TransactionDraft:
    """What the user submitted, before it becomes one or more ledger rows."""
    type: str               # 'income' | 'expense'
    category: str
    amount: Decimal
    description: str
    date: date
    wallet: str
    credit_card: Optional[str] = None
    installments: Optional[int] = None
    is_recurring: bool = False
    recurrence_frequency: Optional[str] = None   # 'daily' | 'weekly' | 'monthly' | 'yearly'
    recurrence_end_date: Optional[date] = None

    @property
    def is_installment(self) -> bool:
        return self.installments is not None and self.installments > 1


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str               # 'income' | 'expense'
    category: str
    amount: Decimal
    description: str
    date: date
    wallet: str
    credit_card: Optional[str] = None
    parent_transaction_id: Optional[str] = None

    @property
    def is_installment(self) -> bool:
        return False

    @property
    def is_recurring(self) -> bool:
        return False

    @property
    def series_id(self) -> str:
        """Id of the row that started this row's series (itself for origins)."""
        return self.parent_transaction_id or self.id


@dataclass(frozen=True)
class InstallmentTransaction(Transaction):
    installments: int = 1
    current_installment: int = 1   # 1-indexed

    def __post_init__(self):
        if not 1 <= self.current_installment <= self.installments:
            raise ValueError(
                f"Installment {self.current_installment} outside 1..{self.installments}"
            )

    @property
    def is_installment(self) -> bool:
        return True

    @property
    def label(self) -> str:
        return f"{self.current_installment}/{self.installments}"


@dataclass(frozen=True)
class RecurringTransaction(Transaction):
    recurrence_frequency: str = "monthly"
    recurrence_end_date: Optional[date] = None

    @property
    def is_recurring(self) -> bool:
        return True
