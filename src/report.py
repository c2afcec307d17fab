import csv
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, TextIO

from amount import format_amount
from models import ClientAccount

HEADER = ("client", "available", "held", "total", "locked")


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    def as_row(self) -> List[str]:
        return [
            str(self.client_id),
            format_amount(self.available),
            format_amount(self.held),
            format_amount(self.total),
            str(self.locked).lower(),
        ]


def account_snapshots(accounts: Iterable[ClientAccount]) -> List[AccountSnapshot]:
    """One snapshot per account, ascending client id."""
    return [
        AccountSnapshot(
            client_id=account.client_id,
            available=account.available,
            held=account.held,
            total=account.total,
            locked=account.locked,
        )
        for account in sorted(accounts, key=lambda account: account.client_id)
    ]


def write_report(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    for snapshot in account_snapshots(accounts):
        writer.writerow(snapshot.as_row())
