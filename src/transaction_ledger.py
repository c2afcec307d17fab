import logging
from typing import Dict

from errors import DuplicateTransactionId, InvalidDisputeTransition, UnknownTransaction
from models import DisputeState, LedgerEntry, TransactionType

logger = logging.getLogger(__name__)

# (state, event) -> next state. Anything missing is an illegal transition.
DISPUTE_TRANSITIONS = {
    (DisputeState.NORMAL, TransactionType.DISPUTE): DisputeState.DISPUTED,
    (DisputeState.DISPUTED, TransactionType.RESOLVE): DisputeState.RESOLVED,
    (DisputeState.DISPUTED, TransactionType.CHARGEBACK): DisputeState.CHARGED_BACK,
}


class TransactionLedger:
    """
    Memory of every accepted deposit and withdrawal, keyed by transaction id.
    Entries are never removed so later disputes can always find them.
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, entry: LedgerEntry) -> None:
        """Store a new entry. An existing id is never overwritten."""
        if entry.transaction_id in self._entries:
            raise DuplicateTransactionId(entry.transaction_id)
        self._entries[entry.transaction_id] = entry

    def lookup(self, transaction_id: int) -> LedgerEntry:
        try:
            return self._entries[transaction_id]
        except KeyError:
            raise UnknownTransaction(transaction_id) from None

    def transition(self, transaction_id: int, event: TransactionType) -> LedgerEntry:
        """
        Move the entry's dispute state along the lifecycle.

        Raises InvalidDisputeTransition without touching the entry when
        the event is not legal from the current state.
        """
        entry = self.lookup(transaction_id)
        next_state = DISPUTE_TRANSITIONS.get((entry.dispute_state, event))
        if next_state is None:
            raise InvalidDisputeTransition(
                transaction_id,
                f"cannot {event.value} a transaction in state {entry.dispute_state.value}",
            )

        logger.debug(f"tx {transaction_id}: {entry.dispute_state.value} -> {next_state.value}")
        entry.dispute_state = next_state
        return entry
