from dataclasses import dataclass
from decimal import Decimal

from utils.currency import to_amount


@dataclass(frozen=True)
class CreditCard:
    id: str
    name: str
    limit: Decimal

    def __post_init__(self):
        limit = to_amount(self.limit)
        if limit <= 0:
            raise ValueError("Card limit must be positive.")
        object.__setattr__(self, "limit", limit)


@dataclass(frozen=True)
class CardUsage:
    card_id: str
    month: str          # 'YYYY-MM'
    limit: Decimal
    used: Decimal

    @property
    def available(self) -> Decimal:
        return self.limit - self.used

    @property
    def percentage(self) -> Decimal:
        return self.used / self.limit * 100
