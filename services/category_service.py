from models.category import CategorySet


def _replace(categories: CategorySet, type_: str, names: tuple[str, ...]) -> CategorySet:
    if type_ == "income":
        return CategorySet(income=names, expense=categories.expense)
    return CategorySet(income=categories.income, expense=names)


def add_category(categories: CategorySet, type_: str, name: str) -> CategorySet:
    name = name.strip()
    if not name:
        raise ValueError("Category name cannot be empty.")
    existing = categories.names_for(type_)
    if name.lower() in (c.lower() for c in existing):
        raise ValueError(f"A category named '{name}' already exists.")
    return _replace(categories, type_, existing + (name,))


def remove_category(categories: CategorySet, type_: str, name: str) -> CategorySet:
    """Drop a category name. Rows already using it keep the name."""
    existing = categories.names_for(type_)
    if name not in existing:
        raise ValueError(f"No {type_} category named '{name}'.")
    return _replace(categories, type_, tuple(c for c in existing if c != name))
