"""
동시성 테스트

동시에 실행된 잔액 변경이 서로의 delta를 덮어쓰지 않는지 검증
(잔액 읽기와 쓰기 사이에 지연을 넣어 경합 구간을 넓힘).
"""

import asyncio
from decimal import Decimal
from pathlib import Path

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import ConcurrencyConflict, InsufficientBalance
from core.ledger import BalanceMutator, TransactionInput, TransferInput, WalletDirectory


@pytest.fixture
def slow_balance_reads(monkeypatch):
    """잔액 조회 후 이벤트 루프 양보"""
    original = WalletDirectory._read_balance

    async def slow_read(self, wallet_id):
        balance = await original(self, wallet_id)
        await asyncio.sleep(0.01)
        return balance

    monkeypatch.setattr(WalletDirectory, "_read_balance", slow_read)


def income(wallet_id: int, category_id: int, amount: str) -> TransactionInput:
    return TransactionInput(
        wallet_id=wallet_id,
        category_id=category_id,
        amount=amount,
        transaction_date="2026-03-01",
    )


class TestConcurrentMutations:

    @pytest.mark.asyncio
    async def test_shared_adapter(self, db, seed, user_id, slow_balance_reads) -> None:
        """같은 연결을 공유하는 동시 생성"""
        wallet = await seed.wallet(user_id, opening="100.00")
        salary = await seed.category(user_id, "Salary", "income")
        mutator = BalanceMutator(db)

        await asyncio.gather(*[
            mutator.create_transaction(user_id, income(wallet, salary, "10"))
            for _ in range(10)
        ])

        assert await seed.balance(wallet) == Decimal("200.00")
        assert await seed.count("transactions") == 10

    @pytest.mark.asyncio
    async def test_separate_connections(
        self,
        db,
        db_path: Path,
        seed,
        user_id,
        slow_balance_reads,
    ) -> None:
        """요청별 연결처럼 서로 다른 연결에서 동시 생성"""
        wallet = await seed.wallet(user_id, opening="0.00")
        salary = await seed.category(user_id, "Salary", "income")

        async def create(amount: str) -> None:
            async with SQLiteAdapter(db_path) as conn:
                await BalanceMutator(conn).create_transaction(
                    user_id, income(wallet, salary, amount)
                )

        await asyncio.gather(*[create("5.25") for _ in range(6)])

        assert await seed.balance(wallet) == Decimal("31.50")

    @pytest.mark.asyncio
    async def test_concurrent_transfers_never_overdraw(
        self,
        db,
        db_path: Path,
        seed,
        user_id,
        slow_balance_reads,
    ) -> None:
        """잔액 100에서 60 이체 2건 동시 실행 → 1건만 성공"""
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")

        async def move() -> bool:
            async with SQLiteAdapter(db_path) as conn:
                try:
                    await BalanceMutator(conn).create_transfer(
                        user_id,
                        TransferInput(
                            from_wallet_id=cash,
                            to_wallet_id=bank,
                            amount="60",
                            transfer_date="2026-03-01",
                        ),
                    )
                    return True
                except InsufficientBalance:
                    return False

        results = await asyncio.gather(move(), move())

        assert sorted(results) == [False, True]
        assert await seed.balance(cash) == Decimal("40.00")
        assert await seed.balance(bank) == Decimal("60.00")


class TestRetry:

    @pytest.mark.asyncio
    async def test_conflict_retried(self, db, seed, user_id, monkeypatch) -> None:
        """ConcurrencyConflict는 작업 단위 전체 재실행"""
        wallet = await seed.wallet(user_id, opening="0.00")
        salary = await seed.category(user_id, "Salary", "income")
        mutator = BalanceMutator(db, retry_backoff_sec=0)
        original = mutator.entries.insert_transaction
        calls = {"count": 0}

        async def flaky_insert(uid, inp):
            calls["count"] += 1
            if calls["count"] == 1:
                raise ConcurrencyConflict()
            return await original(uid, inp)

        monkeypatch.setattr(mutator.entries, "insert_transaction", flaky_insert)

        await mutator.create_transaction(user_id, income(wallet, salary, "10"))

        assert calls["count"] == 2
        assert await seed.balance(wallet) == Decimal("10.00")
        assert await seed.count("transactions") == 1

    @pytest.mark.asyncio
    async def test_retry_limit(self, db, seed, user_id, monkeypatch) -> None:
        wallet = await seed.wallet(user_id, opening="0.00")
        salary = await seed.category(user_id, "Salary", "income")
        mutator = BalanceMutator(db, max_retries=1, retry_backoff_sec=0)

        async def always_conflict(uid, inp):
            raise ConcurrencyConflict()

        monkeypatch.setattr(mutator.entries, "insert_transaction", always_conflict)

        with pytest.raises(ConcurrencyConflict) as exc_info:
            await mutator.create_transaction(user_id, income(wallet, salary, "10"))

        assert exc_info.value.retryable is True
        assert await seed.balance(wallet) == Decimal("0.00")
