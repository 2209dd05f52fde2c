"""
카테고리 분류기

카테고리 유형(income/expense)으로 거래 금액의 부호 결정.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from core.errors import CategoryNotFound, InvalidCategoryType
from core.types import CategoryType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter


def parse_category_type(value: CategoryType | str) -> CategoryType:
    """카테고리 유형 파싱

    Raises:
        InvalidCategoryType: income/expense 이외의 값 (저장소의 오래된 값 포함)
    """
    if isinstance(value, CategoryType):
        return value
    try:
        return CategoryType(value)
    except ValueError as e:
        raise InvalidCategoryType(f"Invalid category type: {value!r}") from e


def delta_for_type(category_type: CategoryType | str, amount: Decimal) -> Decimal:
    """유형별 잔액 변화량

    income → +amount, expense → -amount
    """
    if parse_category_type(category_type) == CategoryType.INCOME:
        return amount
    return -amount


class CategoryClassifier:
    """카테고리 분류기

    사용자 소유 범위 내에서만 카테고리 조회.

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def classify(self, category_id: int, user_id: int) -> CategoryType:
        """카테고리 유형 조회

        Raises:
            CategoryNotFound: 해당 사용자 소유 카테고리 없음
            InvalidCategoryType: 저장된 유형이 income/expense가 아님
        """
        row = await self.db.fetchone(
            "SELECT type FROM categories WHERE id = ? AND user_id = ?",
            (category_id, user_id),
        )
        if row is None:
            raise CategoryNotFound()
        return parse_category_type(row[0])

    async def delta(self, category_id: int, user_id: int, amount: Decimal) -> Decimal:
        """카테고리 기준 잔액 변화량"""
        return delta_for_type(await self.classify(category_id, user_id), amount)
