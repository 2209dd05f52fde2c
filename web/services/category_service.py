"""
카테고리 서비스

카테고리 CRUD.

규칙:
- (사용자, 유형) 내에서 이름은 대소문자 무시 유일
- 거래 또는 예산이 참조 중이면 삭제 불가
- 사용 중인 카테고리의 유형 변경은 잔액 변경과 동일하게 처리:
  지갑별 금액 합계 S에 대해 new_sign·S - old_sign·S 만큼 이동
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import CategoryInUse, CategoryMissing, DuplicateCategory, ValidationError
from core.ledger import Category, LedgerEntryStore, WalletDirectory
from core.ledger.classifier import delta_for_type, parse_category_type

logger = logging.getLogger(__name__)


class CategoryService:
    """카테고리 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.entries = LedgerEntryStore(db)
        self.wallets = WalletDirectory(db)

    async def list_categories(
        self,
        user_id: int,
        category_type: str | None = None,
    ) -> list[Category]:
        """카테고리 목록 (유형 필터 선택)"""
        sql = "SELECT * FROM categories WHERE user_id = ?"
        params: list[Any] = [user_id]
        if category_type is not None:
            sql += " AND type = ?"
            params.append(parse_category_type(category_type).value)
        sql += " ORDER BY type, name"

        rows = await self.db.fetchall_dict(sql, tuple(params))
        return [Category.from_row(row) for row in rows]

    async def _get(self, user_id: int, category_id: int) -> Category | None:
        row = await self.db.fetchone_dict(
            "SELECT * FROM categories WHERE id = ? AND user_id = ?",
            (category_id, user_id),
        )
        return Category.from_row(row) if row else None

    async def get_category(self, user_id: int, category_id: int) -> Category:
        category = await self._get(user_id, category_id)
        if category is None:
            raise CategoryMissing()
        return category

    async def _ensure_unique(
        self,
        user_id: int,
        name: str,
        category_type: str,
        exclude_id: int | None = None,
    ) -> None:
        row = await self.db.fetchone(
            """
            SELECT id FROM categories
            WHERE user_id = ? AND type = ? AND LOWER(name) = LOWER(?)
              AND id != ?
            """,
            (user_id, category_type, name, exclude_id or 0),
        )
        if row is not None:
            raise DuplicateCategory()

    async def create_category(self, user_id: int, name: str, category_type: str) -> Category:
        """카테고리 생성

        Raises:
            ValidationError / InvalidCategoryType / DuplicateCategory
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        parsed_type = parse_category_type(category_type)

        async with self.db.transaction():
            await self._ensure_unique(user_id, name, parsed_type.value)
            cursor = await self.db.execute(
                "INSERT INTO categories (user_id, name, type) VALUES (?, ?, ?)",
                (user_id, name, parsed_type.value),
            )
            category_id = cursor.lastrowid

        logger.info(f"카테고리 생성: {category_id}", extra={"user_id": user_id})
        return await self.get_category(user_id, category_id)

    async def update_category(
        self,
        user_id: int,
        category_id: int,
        name: str | None = None,
        category_type: str | None = None,
    ) -> Category:
        """카테고리 수정

        유형이 바뀌면 이 카테고리를 쓰는 거래의 지갑 잔액을 같은 작업 단위에서 재부호화.

        Raises:
            CategoryMissing / DuplicateCategory / InvalidCategoryType
        """
        if name is None and category_type is None:
            raise ValidationError("No fields to update")
        new_name = name.strip() if name is not None else None
        if new_name is not None and not new_name:
            raise ValidationError("Category name is required")
        new_type = parse_category_type(category_type) if category_type is not None else None

        async with self.db.transaction():
            current = await self._get(user_id, category_id)
            if current is None:
                raise CategoryMissing()

            final_name = new_name if new_name is not None else current.name
            final_type = new_type.value if new_type is not None else current.type
            await self._ensure_unique(user_id, final_name, final_type, exclude_id=category_id)

            if final_type != current.type:
                await self._resign_balances(user_id, category_id, current.type, final_type)

            await self.db.execute(
                "UPDATE categories SET name = ?, type = ? WHERE id = ? AND user_id = ?",
                (final_name, final_type, category_id, user_id),
            )

        return await self.get_category(user_id, category_id)

    async def _resign_balances(
        self,
        user_id: int,
        category_id: int,
        old_type: str,
        new_type: str,
    ) -> None:
        """유형 변경에 따른 지갑 잔액 이동 (작업 단위 내부)"""
        totals = await self.entries.category_amounts_by_wallet(user_id, category_id)
        if not totals:
            return

        await self.wallets.lock_in_order(user_id, totals.keys())
        for wallet_id in sorted(totals):
            amount = totals[wallet_id]
            shift = delta_for_type(new_type, amount) - delta_for_type(old_type, amount)
            await self.wallets.apply_delta(wallet_id, shift)

        logger.info(
            f"카테고리 유형 변경으로 잔액 재부호화: {category_id}",
            extra={
                "user_id": user_id,
                "old_type": old_type,
                "new_type": new_type,
                "wallets": sorted(totals),
            },
        )

    async def delete_category(self, user_id: int, category_id: int) -> None:
        """카테고리 삭제

        Raises:
            CategoryMissing / CategoryInUse (거래 또는 예산이 참조)
        """
        async with self.db.transaction():
            if await self._get(user_id, category_id) is None:
                raise CategoryMissing()

            tx_count, budget_count = await self.entries.category_usage(user_id, category_id)
            if tx_count or budget_count:
                raise CategoryInUse()

            await self.db.execute(
                "DELETE FROM categories WHERE id = ? AND user_id = ?",
                (category_id, user_id),
            )

        logger.info(f"카테고리 삭제: {category_id}", extra={"user_id": user_id})
