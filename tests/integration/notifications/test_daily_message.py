"""
일일 알림 메시지 테스트
"""

from datetime import date

import pytest

from core.ledger import BalanceMutator, TransactionInput
from core.notifications import build_daily_message
from core.notifications.messages import DAILY_TITLE, over_budget_categories


async def spend(db, user_id: int, wallet: int, category: int, amount: str, day: str) -> None:
    await BalanceMutator(db).create_transaction(
        user_id,
        TransactionInput(wallet_id=wallet, category_id=category, amount=amount, transaction_date=day),
    )


class TestDailyMessage:

    @pytest.mark.asyncio
    async def test_summary_and_budget_warning(self, db, seed, user_id) -> None:
        wallet = await seed.wallet(user_id, opening="5000.00")
        salary = await seed.category(user_id, "Salary", "income")
        food = await seed.category(user_id, "Food", "expense")
        await seed.budget(user_id, food, "300.00", "2026-03")
        await spend(db, user_id, wallet, food, "300", "2026-03-02")
        await spend(db, user_id, wallet, food, "20", "2026-03-10")
        await spend(db, user_id, wallet, food, "25.50", "2026-03-10")
        await spend(db, user_id, wallet, salary, "100", "2026-03-09")

        message = await build_daily_message(db, user_id, date(2026, 3, 10))

        assert message.title == DAILY_TITLE
        assert message.body == (
            "Today income: 0.00 | Today expense: 45.50 | Over budget: Food 345.50/300.00"
        )
        assert message.data == {"type": "daily", "date": "2026-03-10", "period": "2026-03"}

    @pytest.mark.asyncio
    async def test_flags_off(self, db, user_id) -> None:
        message = await build_daily_message(
            db,
            user_id,
            date(2026, 3, 10),
            include_summary=False,
            include_budget_warning=False,
        )

        assert message.body == "Remember to record today's transactions"

    @pytest.mark.asyncio
    async def test_no_warning_within_budget(self, db, seed, user_id) -> None:
        wallet = await seed.wallet(user_id, opening="1000.00")
        food = await seed.category(user_id, "Food", "expense")
        await seed.budget(user_id, food, "300.00", "2026-03")
        await spend(db, user_id, wallet, food, "300", "2026-03-02")

        message = await build_daily_message(db, user_id, date(2026, 3, 10))

        assert "Over budget" not in message.body


class TestOverBudget:

    @pytest.mark.asyncio
    async def test_top_three_by_overspend(self, db, seed, user_id) -> None:
        wallet = await seed.wallet(user_id, opening="10000.00")
        overspends = {"A": "10", "B": "50", "C": "30", "D": "20"}
        for name, extra in overspends.items():
            category = await seed.category(user_id, name, "expense")
            await seed.budget(user_id, category, "100.00", "2026-03")
            await spend(db, user_id, wallet, category, str(100 + int(extra)), "2026-03-05")

        results = await over_budget_categories(db, user_id, date(2026, 3, 10))

        assert [r.category_name for r in results] == ["B", "C", "D"]

    @pytest.mark.asyncio
    async def test_future_entries_ignored(self, db, seed, user_id) -> None:
        """오늘 이후 거래는 제외"""
        wallet = await seed.wallet(user_id, opening="1000.00")
        food = await seed.category(user_id, "Food", "expense")
        await seed.budget(user_id, food, "100.00", "2026-03")
        await spend(db, user_id, wallet, food, "500", "2026-03-20")

        assert await over_budget_categories(db, user_id, date(2026, 3, 10)) == []
