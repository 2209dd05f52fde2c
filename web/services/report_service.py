"""
리포트 서비스

대시보드 집계: 수입/지출/차액과 지출 카테고리별 합계.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import ValidationError
from core.ledger.validation import quantize_money
from core.types import CategoryType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class DashboardReport:
    """대시보드 집계 결과"""

    income: Decimal = ZERO
    expense: Decimal = ZERO
    category_stats: list[tuple[str, Decimal]] = field(default_factory=list)
    period: str | None = None

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period,
            "income": str(self.income),
            "expense": str(self.expense),
            "balance": str(self.balance),
            "category_stats": [
                {"name": name, "total": str(total)} for name, total in self.category_stats
            ],
        }


def parse_month_year(month: Any, year: Any) -> str | None:
    """month/year → 'YYYY-MM' (둘 다 지정하거나 둘 다 생략)"""
    if month is None and year is None:
        return None
    if month is None or year is None:
        raise ValidationError("month and year must be provided together")
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError("Invalid month")
    if not isinstance(year, int) or not 1000 <= year <= 9999:
        raise ValidationError("Invalid year")
    return f"{year:04d}-{month:02d}"


class ReportService:
    """리포트 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def dashboard(
        self,
        user_id: int,
        month: int | None = None,
        year: int | None = None,
    ) -> DashboardReport:
        """대시보드 집계 (month/year 지정 시 해당 월만)"""
        period = parse_month_year(month, year)

        sql = """
            SELECT c.type, c.name, t.amount
            FROM transactions t
            JOIN categories c ON c.id = t.category_id
            WHERE t.user_id = ?
        """
        params: list[Any] = [user_id]
        if period is not None:
            sql += " AND t.transaction_date BETWEEN ? AND ?"
            params.extend([f"{period}-01", f"{period}-31"])

        report = DashboardReport(period=period)
        expense_by_name: dict[str, Decimal] = {}

        for category_type, name, amount in await self.db.fetchall(sql, tuple(params)):
            value = Decimal(str(amount))
            if category_type == CategoryType.INCOME.value:
                report.income += value
            elif category_type == CategoryType.EXPENSE.value:
                report.expense += value
                expense_by_name[name] = expense_by_name.get(name, ZERO) + value

        report.income = quantize_money(report.income)
        report.expense = quantize_money(report.expense)
        report.category_stats = sorted(
            ((name, quantize_money(total)) for name, total in expense_by_name.items()),
            key=lambda item: item[1],
            reverse=True,
        )
        return report
