"""
일일 알림 메시지 생성

오늘 수입/지출 합계와 이번 달 예산 초과 카테고리(최대 3개)를 요약.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.validation import quantize_money
from core.types import CategoryType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

DAILY_TITLE = "Daily Finance Reminder"
MAX_BUDGET_WARNINGS = 3

ZERO = Decimal("0")


@dataclass(frozen=True)
class OverBudget:
    """예산 초과 카테고리"""

    category_name: str
    spent: Decimal
    budget: Decimal

    @property
    def overspend(self) -> Decimal:
        return self.spent - self.budget


@dataclass(frozen=True)
class DailyMessage:
    """일일 알림 메시지"""

    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)


async def daily_totals(db: SQLiteAdapter, user_id: int, day: str) -> tuple[Decimal, Decimal]:
    """특정 일자의 (수입, 지출) 합계"""
    rows = await db.fetchall(
        """
        SELECT c.type, t.amount
        FROM transactions t
        JOIN categories c ON c.id = t.category_id AND c.user_id = t.user_id
        WHERE t.user_id = ? AND t.transaction_date = ?
        """,
        (user_id, day),
    )
    income = ZERO
    expense = ZERO
    for category_type, amount in rows:
        if category_type == CategoryType.INCOME.value:
            income += Decimal(str(amount))
        elif category_type == CategoryType.EXPENSE.value:
            expense += Decimal(str(amount))
    return quantize_money(income), quantize_money(expense)


async def over_budget_categories(
    db: SQLiteAdapter,
    user_id: int,
    today: date,
    limit: int = MAX_BUDGET_WARNINGS,
) -> list[OverBudget]:
    """이번 달 1일~오늘 지출이 예산을 넘은 카테고리 (초과액 내림차순)"""
    period = today.strftime("%Y-%m")
    budgets = await db.fetchall(
        """
        SELECT b.category_id, c.name, b.amount
        FROM budgets b
        JOIN categories c ON c.id = b.category_id AND c.user_id = b.user_id
        WHERE b.user_id = ? AND b.period = ?
        """,
        (user_id, period),
    )

    results: list[OverBudget] = []
    for category_id, name, budget_amount in budgets:
        spent_rows = await db.fetchall(
            """
            SELECT amount FROM transactions
            WHERE user_id = ? AND category_id = ?
              AND transaction_date BETWEEN ? AND ?
            """,
            (user_id, category_id, f"{period}-01", today.isoformat()),
        )
        spent = quantize_money(sum((Decimal(str(r[0])) for r in spent_rows), ZERO))
        budget = Decimal(str(budget_amount))
        if spent > budget:
            results.append(OverBudget(category_name=name, spent=spent, budget=budget))

    results.sort(key=lambda o: o.overspend, reverse=True)
    return results[:limit]


async def build_daily_message(
    db: SQLiteAdapter,
    user_id: int,
    today: date,
    include_summary: bool = True,
    include_budget_warning: bool = True,
) -> DailyMessage:
    """일일 알림 메시지 생성

    본문 예: "Today income: 0.00 | Today expense: 45.50 | Over budget: Food 320.00/300.00"
    """
    day = today.isoformat()
    period = today.strftime("%Y-%m")

    parts: list[str] = []
    if include_summary:
        income, expense = await daily_totals(db, user_id, day)
        parts.append(f"Today income: {income:.2f}")
        parts.append(f"Today expense: {expense:.2f}")

    if include_budget_warning:
        warnings = await over_budget_categories(db, user_id, today)
        if warnings:
            parts.append(
                "Over budget: "
                + ", ".join(
                    f"{w.category_name} {w.spent:.2f}/{w.budget:.2f}" for w in warnings
                )
            )

    if not parts:
        parts.append("Remember to record today's transactions")

    return DailyMessage(
        title=DAILY_TITLE,
        body=" | ".join(parts),
        data={"type": "daily", "date": day, "period": period},
    )
