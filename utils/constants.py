from decimal import Decimal

APP_NAME = "Finance Tracker"
CONFIG_DIR_NAME = ".finance_tracker"
CONFIG_ENV_VAR = "FINANCE_TRACKER_CONFIG"

DATE_FORMAT = "%Y-%m-%d"

CENT = Decimal("0.01")
DEFAULT_CURRENCY_SYMBOL = "R$"
DEFAULT_HORIZON_MONTHS = 12
DEFAULT_TREND_MONTHS = 6

TRANSACTION_TYPES = ("income", "expense")
FREQUENCIES = ("daily", "weekly", "monthly", "yearly")
METRICS = ("income", "expense", "balance", "savings")

DEFAULT_WALLETS = [
    {"id": "principal",   "name": "Principal"},
    {"id": "investments", "name": "Investments"},
]

DEFAULT_CATEGORIES = {
    "income":  ["Salary", "Freelance", "Investments", "Other"],
    "expense": ["Housing", "Food", "Transport", "Leisure", "Health", "Education", "Other"],
}

EXPORT_HEADER = [
    "Date", "Type", "Category", "Description", "Amount",
    "Wallet", "Card", "Installment", "Recurrence",
]
