import logging
from typing import Tuple

from account_book import AccountBook
from errors import DuplicateTransactionId, InsufficientFunds, InvalidAmount, InvalidDisputeTransition, MalformedRecord
from models import ClientAccount, LedgerEntry, Transaction, TransactionType
from transaction_ledger import TransactionLedger

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies one transaction at a time to the account book and transaction ledger.
    Every failed precondition raises a LedgerError before any state is touched.
    """

    def __init__(self, accounts: AccountBook, ledger: TransactionLedger):
        self._accounts = accounts
        self._ledger = ledger

    def process_transaction(self, transaction: Transaction) -> None:
        """
        Process a single transaction.

        Raises:
            LedgerError subclass describing why the record was rejected.
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)

    def _handle_deposit(self, transaction: Transaction) -> None:
        self._check_amount(transaction)

        entry = self._entry_for(transaction)
        self._ledger.record(entry)

        if transaction.client_id in self._accounts:
            self._accounts.get(transaction.client_id).credit(transaction.amount)
        else:
            logger.debug(f"Deposit tx {transaction.transaction_id}: opening account for client {transaction.client_id}")
            self._accounts.open(transaction.client_id, transaction.amount)

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        account = self._accounts.get(transaction.client_id)
        self._check_amount(transaction)

        if transaction.transaction_id in self._ledger:
            raise DuplicateTransactionId(transaction.transaction_id)

        if account.available < transaction.amount:
            raise InsufficientFunds(account.client_id, account.available, transaction.amount)

        self._ledger.record(self._entry_for(transaction))
        account.debit(transaction.amount)

    def _handle_dispute(self, transaction: Transaction) -> None:
        account, entry = self._disputed_entry(transaction)
        self._ledger.transition(entry.transaction_id, TransactionType.DISPUTE)
        account.hold(entry.amount)

    def _handle_resolve(self, transaction: Transaction) -> None:
        account, entry = self._disputed_entry(transaction)
        self._ledger.transition(entry.transaction_id, TransactionType.RESOLVE)
        account.release_hold(entry.amount)

    def _handle_chargeback(self, transaction: Transaction) -> None:
        account, entry = self._disputed_entry(transaction)
        self._ledger.transition(entry.transaction_id, TransactionType.CHARGEBACK)
        account.remove_held(entry.amount)

    def _disputed_entry(self, transaction: Transaction) -> Tuple[ClientAccount, LedgerEntry]:
        """Resolve the account and referenced entry for a dispute, resolve or chargeback."""
        account = self._accounts.get(transaction.client_id)
        entry = self._ledger.lookup(transaction.transaction_id)

        if entry.client_id != transaction.client_id:
            raise InvalidDisputeTransition(
                transaction.transaction_id,
                f"belongs to client {entry.client_id}, not client {transaction.client_id}",
            )
        return account, entry

    @staticmethod
    def _check_amount(transaction: Transaction) -> None:
        if transaction.amount is None:
            raise MalformedRecord(f"{transaction.transaction_type.value} tx {transaction.transaction_id}: missing amount")
        if transaction.amount <= 0:
            raise InvalidAmount(transaction.transaction_id, transaction.amount)

    @staticmethod
    def _entry_for(transaction: Transaction) -> LedgerEntry:
        return LedgerEntry(
            transaction_id=transaction.transaction_id,
            client_id=transaction.client_id,
            amount=transaction.amount,
            kind=transaction.transaction_type,
        )
