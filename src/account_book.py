from decimal import Decimal
from typing import Dict, List

from errors import UnknownAccount
from models import ClientAccount


class AccountBook:
    """Client accounts keyed by client id. Accounts are opened lazily and never closed."""

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def open(self, client_id: int, initial: Decimal) -> ClientAccount:
        """Create an account funded with its first deposit."""
        account = ClientAccount(client_id=client_id, available=initial)
        self._accounts[client_id] = account
        return account

    def get(self, client_id: int) -> ClientAccount:
        try:
            return self._accounts[client_id]
        except KeyError:
            raise UnknownAccount(client_id) from None

    def accounts(self) -> List[ClientAccount]:
        """All accounts in ascending client id order."""
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]

    def as_dict(self) -> Dict[int, ClientAccount]:
        return dict(self._accounts)
