from dataclasses import dataclass, field
from decimal import Decimal

ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthlyTotals:
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense

    @property
    def savings_rate(self) -> Decimal:
        """Share of income kept, as a fraction. Zero when there is no income."""
        if self.income <= 0:
            return ZERO
        return self.balance / self.income


@dataclass(frozen=True)
class CategoryShare:
    category: str
    total: Decimal
    percentage: Decimal     # 0-100


@dataclass(frozen=True)
class LedgerAggregate:
    totals: MonthlyTotals
    category_breakdown: list[CategoryShare] = field(default_factory=list)
    # card id -> 'YYYY-MM' -> amount
    per_card_monthly_exposure: dict[str, dict[str, Decimal]] = field(default_factory=dict)


@dataclass(frozen=True)
class TrendPoint:
    year: int
    month: int
    totals: MonthlyTotals

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month:02d}"

    def value_of(self, metric: str) -> Decimal:
        if metric == "income":
            return self.totals.income
        if metric == "expense":
            return self.totals.expense
        if metric == "balance":
            return self.totals.balance
        if metric == "savings":
            return self.totals.savings_rate * 100
        raise ValueError(f"Invalid metric: {metric}")


@dataclass(frozen=True)
class MetricInsight:
    metric: str
    current: Decimal
    previous: Decimal
    percentage_change: Decimal
    trend: str              # 'up' | 'down' | 'stable'
    average: Decimal
    maximum: Decimal
    minimum: Decimal
    recommendations: list[str] = field(default_factory=list)
