import csv
import logging
from typing import Dict, Iterable, Optional

from account_book import AccountBook
from amount import parse_amount
from errors import LedgerError, MalformedRecord
from models import ClientAccount, ProcessingStats, Transaction, TransactionType
from transaction_ledger import TransactionLedger
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class LedgerEngine:
    """
    Replays transactions in input order against a fresh account book.
    A rejected record is logged and skipped; it never stops the run.
    """

    def __init__(self):
        self._accounts = AccountBook()
        self._ledger = TransactionLedger()
        self._processor = TransactionProcessor(self._accounts, self._ledger)
        self._stats = ProcessingStats()

    @property
    def accounts(self) -> AccountBook:
        return self._accounts

    @property
    def ledger(self) -> TransactionLedger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """
        Process CSV file and return final account states.

        An unreadable line is rejected like any other bad record. Only an
        OSError, or a csv.Error on the header row, means the input as a
        whole could not be read; those propagate.
        """
        logger.info(f"Replaying transactions from {filepath}")

        # Undecodable bytes survive as lone surrogates and fail that row only.
        with open(filepath, "r", newline="", encoding="utf-8-sig", errors="surrogateescape") as f:
            reader = csv.DictReader(f)
            # Header is read up front so a broken header stays fatal.
            reader.fieldnames
            while True:
                try:
                    row = next(reader)
                except StopIteration:
                    break
                except csv.Error as e:
                    self._reject(MalformedRecord(str(e)), f"line {reader.line_num}", logging.WARNING)
                    continue
                self._process_csv_row(reader.line_num, row)

        logger.info(f"Replay complete: {self._stats.summary()}")
        return self._accounts.as_dict()

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            self.process_transaction(transaction)
        return self._accounts.as_dict()

    def process_transaction(self, transaction: Transaction) -> bool:
        """Apply one transaction. Returns False if it was rejected."""
        try:
            self._processor.process_transaction(transaction)
        except LedgerError as e:
            self._reject(e, transaction)
            return False

        logger.debug(f"Applied {transaction}")
        self._stats.record_success()
        return True

    def _process_csv_row(self, line_num: int, row: Dict[Optional[str], object]) -> None:
        try:
            transaction = parse_csv_row(row)
        except LedgerError as e:
            self._reject(e, f"line {line_num}", logging.WARNING)
            return
        self.process_transaction(transaction)

    def _reject(self, error: LedgerError, source, level: int = logging.INFO) -> None:
        reason = type(error).__name__
        logger.log(level, f"Rejected {source}: {reason}: {error}")
        self._stats.record_rejection(reason)


def parse_csv_row(row: Dict[Optional[str], object]) -> Transaction:
    """
    Parse CSV row into Transaction.

    Raises MalformedRecord for a missing or invalid field and
    MalformedAmount for an unparseable amount.
    """
    # DictReader files surplus fields under None and pads short rows with None.
    normalized = {
        k.strip(): v.strip()
        for k, v in row.items()
        if isinstance(k, str) and isinstance(v, str)
    }
    if any(_is_undecodable(value) for value in normalized.values()):
        raise MalformedRecord("row contains bytes that are not valid UTF-8")

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except KeyError:
        raise MalformedRecord("missing type") from None
    except ValueError:
        raise MalformedRecord(f"unknown transaction type {normalized['type']!r}") from None

    client_id = _parse_id(normalized, "client", MAX_CLIENT_ID)
    transaction_id = _parse_id(normalized, "tx", MAX_TRANSACTION_ID)

    amount = None
    amount_str = normalized.get("amount", "")
    if transaction_type.moves_funds:
        if not amount_str:
            raise MalformedRecord(f"{transaction_type.value} tx {transaction_id}: missing amount")
        amount = parse_amount(amount_str)
    elif amount_str:
        logger.debug(f"{transaction_type.value} tx {transaction_id}: ignoring amount {amount_str!r}")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _is_undecodable(text: str) -> bool:
    # surrogateescape maps each undecodable byte to U+DC80..U+DCFF
    return any("\udc80" <= ch <= "\udcff" for ch in text)


def _parse_id(fields: Dict[str, str], name: str, maximum: int) -> int:
    value = fields.get(name, "")
    if not (value.isascii() and value.isdigit()):
        raise MalformedRecord(f"{name} must be an unsigned integer, got {value!r}")
    parsed = int(value)
    if parsed > maximum:
        raise MalformedRecord(f"{name} {parsed} out of range (max {maximum})")
    return parsed
