class InvalidTransactionError(ValueError):
    """A submitted transaction cannot be turned into ledger rows."""


class CreditLimitExceededError(ValueError):
    """A purchase would take a credit card past its limit."""
