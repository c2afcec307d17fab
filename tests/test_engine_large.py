import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ledger_engine import LedgerEngine


def replay_rows(tmp_path, rows):
    csv_file = tmp_path / "large_test.csv"
    csv_file.write_text('\n'.join(["type,client,tx,amount"] + rows))

    engine = LedgerEngine()
    accounts = engine.process_file(str(csv_file))
    return engine, accounts


class TestLedgerEngineLargeScale:
    def test_concurrent_disputes_close_one_at_a_time(self, tmp_path):
        """Every client opens four disputes at once; only the last close unlocks."""
        num_clients = 500
        amounts = [10, 20, 30, 40]
        rows = []

        def tx_id(client_id, index):
            return client_id * 10 + index

        # Rounds are interleaved across clients, so each client's records are spread out.
        for index, amount in enumerate(amounts):
            for client_id in range(1, num_clients + 1):
                rows.append(f"deposit,{client_id},{tx_id(client_id, index)},{amount}")
        for index in range(len(amounts)):
            for client_id in range(1, num_clients + 1):
                rows.append(f"dispute,{client_id},{tx_id(client_id, index)},")
        for index in range(3):
            for client_id in range(1, num_clients + 1):
                rows.append(f"resolve,{client_id},{tx_id(client_id, index)},")
        for client_id in range(2, num_clients + 1, 2):
            rows.append(f"chargeback,{client_id},{tx_id(client_id, 3)},")

        engine, accounts = replay_rows(tmp_path, rows)

        assert len(accounts) == num_clients
        assert engine.stats.rejected == 0

        for client_id in range(1, num_clients + 1):
            account = accounts[client_id]
            assert account.available == Decimal("60"), f"Client {client_id}"
            if client_id % 2 == 0:
                assert account.held == Decimal("0")
                assert account.total == Decimal("60")
                assert account.lock_count == 0
                assert account.locked is False
            else:
                assert account.held == Decimal("40")
                assert account.total == Decimal("100")
                assert account.lock_count == 1
                assert account.locked is True

    def test_clawback_drives_balances_negative(self, tmp_path):
        """Disputing both sides of spent funds goes negative, and only deposits recover it."""
        num_clients = 300
        rows = []
        for client_id in range(1, num_clients + 1):
            deposit_tx = client_id * 10
            withdrawal_tx = client_id * 10 + 1
            rows += [
                f"deposit,{client_id},{deposit_tx},100",
                f"withdrawal,{client_id},{withdrawal_tx},70",
                f"dispute,{client_id},{deposit_tx},",
                f"dispute,{client_id},{withdrawal_tx},",
                f"chargeback,{client_id},{deposit_tx},",
                f"withdrawal,{client_id},{client_id * 10 + 2},1",
                f"deposit,{client_id},{client_id * 10 + 3},200",
            ]

        engine, accounts = replay_rows(tmp_path, rows)

        assert engine.stats.rejections["InsufficientFunds"] == num_clients
        assert engine.stats.rejected == num_clients
        assert len(engine.ledger) == num_clients * 3

        for client_id in range(1, num_clients + 1):
            account = accounts[client_id]
            # 100 - 70 - 100 - 70 + 200
            assert account.available == Decimal("60"), f"Client {client_id}"
            assert account.held == Decimal("70")
            assert account.total == Decimal("130")
            assert account.lock_count == 1
            assert account.locked is True

    def test_repeated_lifecycle_events_are_rejected(self, tmp_path):
        """Replayed disputes, resolves, chargebacks and deposit ids change nothing."""
        num_clients = 200
        rows = []
        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit,{client_id},{client_id},50.1234")
        for event in ["dispute", "dispute", "resolve", "resolve", "chargeback"]:
            for client_id in range(1, num_clients + 1):
                rows.append(f"{event},{client_id},{client_id},")
        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit,{client_id},{client_id},50.1234")

        engine, accounts = replay_rows(tmp_path, rows)

        assert engine.stats.processed == num_clients * 3
        assert engine.stats.rejections["InvalidDisputeTransition"] == num_clients * 3
        assert engine.stats.rejections["DuplicateTransactionId"] == num_clients

        for client_id in range(1, num_clients + 1):
            account = accounts[client_id]
            assert account.available == Decimal("50.1234"), f"Client {client_id}"
            assert account.held == Decimal("0")
            assert account.lock_count == 0
            assert account.locked is False
