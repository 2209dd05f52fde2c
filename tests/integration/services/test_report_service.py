"""
리포트 서비스 테스트
"""

from decimal import Decimal

import pytest

from core.errors import ValidationError
from core.ledger import BalanceMutator, TransactionInput
from web.services.report_service import ReportService, parse_month_year


class TestParseMonthYear:

    def test_both_or_neither(self) -> None:
        assert parse_month_year(None, None) is None
        assert parse_month_year(3, 2026) == "2026-03"

    @pytest.mark.parametrize("month, year", [(3, None), (None, 2026), (13, 2026), (0, 2026), (3, 99)])
    def test_invalid(self, month, year) -> None:
        with pytest.raises(ValidationError):
            parse_month_year(month, year)


class TestDashboard:

    @pytest.mark.asyncio
    async def test_totals_and_category_stats(self, db, seed, user_id) -> None:
        wallet = await seed.wallet(user_id, opening="0.00")
        salary = await seed.category(user_id, "Salary", "income")
        food = await seed.category(user_id, "Food", "expense")
        rent = await seed.category(user_id, "Rent", "expense")
        mutator = BalanceMutator(db)
        entries = [
            (salary, "3000", "2026-03-01"),
            (food, "120", "2026-03-02"),
            (food, "80", "2026-03-15"),
            (rent, "900", "2026-03-05"),
            (food, "55", "2026-04-01"),
        ]
        for category, amount, day in entries:
            await mutator.create_transaction(
                user_id,
                TransactionInput(wallet_id=wallet, category_id=category, amount=amount, transaction_date=day),
            )
        service = ReportService(db)

        march = await service.dashboard(user_id, month=3, year=2026)
        overall = await service.dashboard(user_id)

        assert march.income == Decimal("3000.00")
        assert march.expense == Decimal("1100.00")
        assert march.balance == Decimal("1900.00")
        assert march.category_stats == [("Rent", Decimal("900.00")), ("Food", Decimal("200.00"))]
        assert march.to_dict()["period"] == "2026-03"
        assert overall.expense == Decimal("1155.00")
        assert overall.period is None

    @pytest.mark.asyncio
    async def test_empty(self, db, user_id) -> None:
        report = await ReportService(db).dashboard(user_id)

        assert report.to_dict() == {
            "period": None,
            "income": "0.00",
            "expense": "0.00",
            "balance": "0.00",
            "category_stats": [],
        }
