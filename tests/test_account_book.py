import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from account_book import AccountBook
from errors import UnknownAccount


class TestAccountBook:
    def setup_method(self):
        self.book = AccountBook()

    def test_open(self):
        account = self.book.open(7, Decimal("12.5"))

        assert 7 in self.book
        assert len(self.book) == 1
        assert self.book.get(7) is account
        assert account.available == Decimal("12.5")
        assert account.held == Decimal("0")
        assert account.locked is False

    def test_get_unknown(self):
        with pytest.raises(UnknownAccount) as exc_info:
            self.book.get(3)
        assert exc_info.value.client_id == 3

    def test_accounts_sorted_by_client(self):
        for client_id in (30, 2, 15):
            self.book.open(client_id, Decimal("1"))

        assert [account.client_id for account in self.book.accounts()] == [2, 15, 30]
        assert set(self.book.as_dict()) == {2, 15, 30}
