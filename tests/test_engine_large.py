import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from payments_engine import PaymentsEngine


class TestPaymentsEngineLargeScale:
    def test_1000_accounts_6000_transactions(self, tmp_path):
        """Each client: deposits of 100, 200, 300, withdrawals of 50, 100, then one more deposit of 50."""
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        for client_id in range(1, num_clients + 1):
            for kind, amount in [("deposit", 100), ("deposit", 200), ("deposit", 300),
                                 ("withdrawal", 50), ("withdrawal", 100)]:
                rows.append(f"{kind}, {client_id}, {tx_id}, {amount}")
                tx_id += 1

        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients
        assert engine.stats.processed == 6000
        assert engine.stats.rejected == 0

        for client_id in range(1, num_clients + 1):
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

    def test_with_disputes_resolves_chargebacks(self, tmp_path):
        """Five groups of ten clients, each exercising a different dispute path."""
        rows = ["type, client, tx, amount"]

        def deposits(client_id, *amounts):
            for offset, amount in enumerate(amounts, start=1):
                rows.append(f"deposit, {client_id}, {client_id * 100 + offset}, {amount}")

        # 1-10: deposits only
        for client_id in range(1, 11):
            deposits(client_id, 100, 150, 250)

        # 11-20: dispute then resolve the first deposit
        for client_id in range(11, 21):
            deposits(client_id, 100, 150, 250)
        for client_id in range(11, 21):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")
        for client_id in range(11, 21):
            rows.append(f"resolve, {client_id}, {client_id * 100 + 1},")

        # 21-30: dispute then charge back the first deposit, then try to deposit again
        for client_id in range(21, 31):
            deposits(client_id, 100, 150, 250)
        for client_id in range(21, 31):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")
        for client_id in range(21, 31):
            rows.append(f"chargeback, {client_id}, {client_id * 100 + 1},")
        for client_id in range(21, 31):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 9}, 1000")

        # 31-40: withdrawal, then dispute of the first deposit left open
        for client_id in range(31, 41):
            deposits(client_id, 150, 250)
            rows.append(f"withdrawal, {client_id}, {client_id * 100 + 3}, 100")
        for client_id in range(31, 41):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")

        # 41-50: resolved dispute, then a rejected second dispute
        for client_id in range(41, 51):
            deposits(client_id, 100, 200, 300)
        for client_id in range(41, 51):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 2},")
        for client_id in range(41, 51):
            rows.append(f"resolve, {client_id}, {client_id * 100 + 2},")
        for client_id in range(41, 51):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 2},")

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        for client_id in range(1, 21):
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        for client_id in range(21, 31):
            assert accounts[client_id].available == Decimal("400"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].total == Decimal("400")
            assert accounts[client_id].locked is True

        for client_id in range(31, 41):
            assert accounts[client_id].available == Decimal("150"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("150")
            assert accounts[client_id].total == Decimal("300")
            assert accounts[client_id].locked is False

        for client_id in range(41, 51):
            assert accounts[client_id].available == Decimal("600"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        assert engine.stats.rejections_by_kind == {"account_locked": 10, "invalid_dispute": 10}

    def test_many_invalid_rows(self, tmp_path):
        """A feed that is mostly garbage still finishes and keeps only valid rows."""
        rows = ["type, client, tx, amount", "deposit, 1, 1, 10"]
        for tx_id in range(2, 20002):
            rows.append(f"dispute, 1, {tx_id},")

        csv_file = tmp_path / "invalid_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert accounts[1].available == Decimal("10")
        assert engine.stats.rejections_by_kind == {"non_existing_dispute": 20000}
