"""Domain exceptions for the balance tracker."""


class BalanceTrackerError(Exception):
    """Base exception for balance tracker errors"""


class DataSourceError(BalanceTrackerError):
    """The bank document could not be fetched or parsed"""


class AccountNotFoundError(BalanceTrackerError):
    """No account with the requested id exists in the ledger"""

    def __init__(self, account_id: int):
        super().__init__(f"account {account_id} not found")
        self.account_id = account_id


class InvalidQueryError(BalanceTrackerError):
    """Query parameters of a request failed validation"""

    def __init__(self, errors: list):
        super().__init__("invalid query parameters")
        self.errors = errors
