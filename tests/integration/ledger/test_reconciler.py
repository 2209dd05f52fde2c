"""
ReconciliationEngine 테스트

초기 데이터(opening_balance=0) 보정 규칙, dry run, 적용.
"""

from decimal import Decimal

import pytest

from core.ledger import ReconciliationEngine


async def insert_transaction(db, user_id: int, wallet_id: int, category_id: int, amount: str) -> None:
    """잔액을 건드리지 않고 거래 행만 기록 (drift 재현용)"""
    await db.execute(
        """
        INSERT INTO transactions (user_id, category_id, wallet_id, amount, transaction_date)
        VALUES (?, ?, ?, ?, '2026-03-01')
        """,
        (user_id, category_id, wallet_id, amount),
    )
    await db.commit()


class TestDryRun:
    """apply=False"""

    @pytest.mark.asyncio
    async def test_consistent_wallet(self, db, seed, user_id) -> None:
        wallet = await seed.wallet(user_id, opening="100.00", balance="150.00")
        salary = await seed.category(user_id, "Salary", "income")
        await insert_transaction(db, user_id, wallet, salary, "50.00")

        report = await ReconciliationEngine(db).recalculate(user_id)

        row = report.rows[0]
        assert report.applied is False
        assert row.net_from_entries == Decimal("50.00")
        assert row.proposed_balance == Decimal("150.00")
        assert row.drift == Decimal("0.00")
        assert report.drifted == []

    @pytest.mark.asyncio
    async def test_drift_reported_not_written(self, db, seed, user_id) -> None:
        wallet = await seed.wallet(user_id, opening="100.00", balance="175.00")
        food = await seed.category(user_id, "Food", "expense")
        await insert_transaction(db, user_id, wallet, food, "25.00")

        report = await ReconciliationEngine(db).recalculate(user_id, apply=False)

        row = report.rows[0]
        assert row.proposed_balance == Decimal("75.00")
        assert row.drift == Decimal("100.00")
        assert [r.wallet_id for r in report.drifted] == [wallet]
        assert await seed.balance(wallet) == Decimal("175.00")

    @pytest.mark.asyncio
    async def test_legacy_opening_inferred(self, db, seed, user_id) -> None:
        """opening=0이고 net≠0이면 opening = current - net"""
        wallet = await seed.wallet(user_id, opening="0.00", balance="500.00")
        salary = await seed.category(user_id, "Salary", "income")
        await insert_transaction(db, user_id, wallet, salary, "200.00")

        row = (await ReconciliationEngine(db).recalculate(user_id)).rows[0]

        assert row.opening_balance == Decimal("300.00")
        assert row.proposed_balance == Decimal("500.00")
        assert row.drift == Decimal("0.00")
        assert await seed.opening(wallet) == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_rows_per_wallet_in_id_order(self, db, seed, user_id) -> None:
        first = await seed.wallet(user_id, "A", opening="10.00")
        second = await seed.wallet(user_id, "B", opening="20.00")
        other = await seed.user("other@example.com")
        await seed.wallet(other, "Other", opening="30.00")

        report = await ReconciliationEngine(db).recalculate(user_id)

        assert [r.wallet_id for r in report.rows] == [first, second]
        assert report.to_dict()["rows"][0]["proposed_balance"] == "10.00"


class TestTransfersOption:
    """include_transfers"""

    @pytest.mark.asyncio
    async def test_transfers_excluded_by_default(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="100.00", balance="60.00")
        bank = await seed.wallet(user_id, "Bank", opening="0.00", balance="40.00", wallet_type="bank")
        await db.execute(
            """
            INSERT INTO transfers (user_id, from_wallet_id, to_wallet_id, amount, transfer_date)
            VALUES (?, ?, ?, '40.00', '2026-03-01')
            """,
            (user_id, cash, bank),
        )
        await db.commit()

        excluded = await ReconciliationEngine(db).recalculate(user_id)
        included = await ReconciliationEngine(db).recalculate(user_id, include_transfers=True)

        assert {r.wallet_id: r.drift for r in excluded.rows} == {
            cash: Decimal("-40.00"),
            bank: Decimal("40.00"),
        }
        assert included.include_transfers is True
        assert included.drifted == []


class TestApply:
    """apply=True"""

    @pytest.mark.asyncio
    async def test_apply_writes_opening_and_balance(self, db, seed, user_id) -> None:
        drifted = await seed.wallet(user_id, "Drifted", opening="100.00", balance="999.00")
        legacy = await seed.wallet(user_id, "Legacy", opening="0.00", balance="80.00")
        food = await seed.category(user_id, "Food", "expense")
        await insert_transaction(db, user_id, drifted, food, "30.00")
        await insert_transaction(db, user_id, legacy, food, "20.00")

        report = await ReconciliationEngine(db).recalculate(user_id, apply=True)

        assert report.applied is True
        assert await seed.balance(drifted) == Decimal("70.00")
        assert await seed.opening(legacy) == Decimal("100.00")
        assert await seed.balance(legacy) == Decimal("80.00")

        again = await ReconciliationEngine(db).recalculate(user_id)
        assert again.drifted == []

    @pytest.mark.asyncio
    async def test_no_wallets(self, db, user_id) -> None:
        report = await ReconciliationEngine(db).recalculate(user_id, apply=True)

        assert report.rows == []
