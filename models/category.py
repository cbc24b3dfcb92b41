from dataclasses import dataclass

from utils.constants import DEFAULT_CATEGORIES


@dataclass(frozen=True)
class CategorySet:
    """Ordered category names per transaction type.

    Transactions reference categories by name, so dropping a name here
    leaves existing rows untouched.
    """
    income: tuple[str, ...] = ()
    expense: tuple[str, ...] = ()

    @classmethod
    def default(cls) -> "CategorySet":
        return cls(
            income=tuple(DEFAULT_CATEGORIES["income"]),
            expense=tuple(DEFAULT_CATEGORIES["expense"]),
        )

    def names_for(self, type_: str) -> tuple[str, ...]:
        if type_ == "income":
            return self.income
        if type_ == "expense":
            return self.expense
        raise ValueError(f"Invalid type: {type_}")

    def __contains__(self, item) -> bool:
        type_, name = item
        return name in self.names_for(type_)
