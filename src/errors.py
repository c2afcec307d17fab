from decimal import Decimal


class LedgerError(Exception):
    """Base class for per-record failures. The record is skipped, the run continues."""


class MalformedRecord(LedgerError):
    pass


class MalformedAmount(LedgerError):
    pass


class DuplicateTransactionId(LedgerError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"tx {transaction_id}: transaction id already recorded")


class InvalidAmount(LedgerError):
    def __init__(self, transaction_id: int, amount: Decimal):
        self.transaction_id = transaction_id
        self.amount = amount
        super().__init__(f"tx {transaction_id}: amount must be positive, got {amount}")


class UnknownAccount(LedgerError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"client {client_id}: no such account")


class InsufficientFunds(LedgerError):
    def __init__(self, client_id: int, available: Decimal, requested: Decimal):
        self.client_id = client_id
        self.available = available
        self.requested = requested
        super().__init__(f"client {client_id}: insufficient funds (available {available}, requested {requested})")


class UnknownTransaction(LedgerError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"tx {transaction_id}: no such transaction")


class InvalidDisputeTransition(LedgerError):
    def __init__(self, transaction_id: int, reason: str):
        self.transaction_id = transaction_id
        self.reason = reason
        super().__init__(f"tx {transaction_id}: {reason}")
