"""
예산 서비스

월별 카테고리 예산 CRUD. 잔액에는 영향 없음.
조회 시 해당 월 지출(spent)을 함께 계산.
"""

import logging
from decimal import Decimal
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import BudgetNotFound, DuplicateBudget, InvalidCategory, ValidationError
from core.ledger.validation import parse_amount, parse_id, parse_period, quantize_money

logger = logging.getLogger(__name__)


class BudgetService:
    """예산 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def _spent(self, user_id: int, category_id: int, period: str) -> Decimal:
        """기간 내 카테고리 거래 합계"""
        rows = await self.db.fetchall(
            """
            SELECT amount FROM transactions
            WHERE user_id = ? AND category_id = ?
              AND transaction_date BETWEEN ? AND ?
            """,
            (user_id, category_id, f"{period}-01", f"{period}-31"),
        )
        return quantize_money(sum((Decimal(str(r[0])) for r in rows), Decimal("0")))

    async def list_budgets(self, user_id: int, period: str | None = None) -> list[dict[str, Any]]:
        """예산 목록 (카테고리 이름, 지출액 포함)"""
        sql = """
            SELECT b.*, c.name AS category_name, c.type AS category_type
            FROM budgets b
            JOIN categories c ON c.id = b.category_id
            WHERE b.user_id = ?
        """
        params: list[Any] = [user_id]
        if period is not None:
            sql += " AND b.period = ?"
            params.append(parse_period(period))
        sql += " ORDER BY b.period DESC, c.name"

        rows = await self.db.fetchall_dict(sql, tuple(params))
        budgets = []
        for row in rows:
            spent = await self._spent(user_id, row["category_id"], row["period"])
            row["amount"] = str(row["amount"])
            row["spent"] = str(spent)
            budgets.append(row)
        return budgets

    async def get_budget(self, user_id: int, budget_id: int) -> dict[str, Any]:
        row = await self.db.fetchone_dict(
            """
            SELECT b.*, c.name AS category_name, c.type AS category_type
            FROM budgets b
            JOIN categories c ON c.id = b.category_id
            WHERE b.id = ? AND b.user_id = ?
            """,
            (budget_id, user_id),
        )
        if row is None:
            raise BudgetNotFound()
        row["amount"] = str(row["amount"])
        row["spent"] = str(await self._spent(user_id, row["category_id"], row["period"]))
        return row

    async def _ensure_category(self, user_id: int, category_id: int) -> None:
        row = await self.db.fetchone(
            "SELECT id FROM categories WHERE id = ? AND user_id = ?",
            (category_id, user_id),
        )
        if row is None:
            raise InvalidCategory()

    async def _ensure_unique(
        self,
        user_id: int,
        category_id: int,
        period: str,
        exclude_id: int | None = None,
    ) -> None:
        row = await self.db.fetchone(
            """
            SELECT id FROM budgets
            WHERE user_id = ? AND category_id = ? AND period = ? AND id != ?
            """,
            (user_id, category_id, period, exclude_id or 0),
        )
        if row is not None:
            raise DuplicateBudget()

    async def create_budget(
        self,
        user_id: int,
        category_id: Any,
        amount: Any,
        period: Any,
    ) -> dict[str, Any]:
        """예산 생성

        Raises:
            InvalidAmount / InvalidPeriod / InvalidCategory / DuplicateBudget
        """
        category_id = parse_id(category_id, "category_id")
        parsed_amount = parse_amount(amount)
        parsed_period = parse_period(period)

        async with self.db.transaction():
            await self._ensure_category(user_id, category_id)
            await self._ensure_unique(user_id, category_id, parsed_period)
            cursor = await self.db.execute(
                """
                INSERT INTO budgets (user_id, category_id, amount, period)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, category_id, str(parsed_amount), parsed_period),
            )
            budget_id = cursor.lastrowid

        logger.info(
            f"예산 생성: {budget_id}",
            extra={"user_id": user_id, "period": parsed_period},
        )
        return await self.get_budget(user_id, budget_id)

    async def update_budget(
        self,
        user_id: int,
        budget_id: int,
        amount: Any,
        category_id: Any = None,
    ) -> dict[str, Any]:
        """예산 수정 (category_id 생략 시 유지)"""
        if amount is None:
            raise ValidationError("amount is required")
        parsed_amount = parse_amount(amount)
        new_category_id = parse_id(category_id, "category_id") if category_id is not None else None

        async with self.db.transaction():
            current = await self.db.fetchone(
                "SELECT category_id, period FROM budgets WHERE id = ? AND user_id = ?",
                (budget_id, user_id),
            )
            if current is None:
                raise BudgetNotFound()

            final_category_id = new_category_id if new_category_id is not None else current[0]
            if final_category_id != current[0]:
                await self._ensure_category(user_id, final_category_id)
                await self._ensure_unique(
                    user_id, final_category_id, current[1], exclude_id=budget_id
                )

            await self.db.execute(
                """
                UPDATE budgets
                SET amount = ?, category_id = ?, updated_at = datetime('now')
                WHERE id = ? AND user_id = ?
                """,
                (str(parsed_amount), final_category_id, budget_id, user_id),
            )

        return await self.get_budget(user_id, budget_id)

    async def delete_budget(self, user_id: int, budget_id: int) -> None:
        cursor = await self.db.execute(
            "DELETE FROM budgets WHERE id = ? AND user_id = ?",
            (budget_id, user_id),
        )
        await self.db.commit()
        if cursor.rowcount == 0:
            raise BudgetNotFound()
        logger.info(f"예산 삭제: {budget_id}", extra={"user_id": user_id})
