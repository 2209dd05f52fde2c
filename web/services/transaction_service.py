"""
거래 서비스

거래 조회(필터/페이지)와 변경(BalanceMutator 위임).
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import TransactionNotFound
from core.ledger import BalanceMutator, LedgerEntryStore, Transaction, TransactionInput
from core.ledger.validation import parse_date_range, parse_id, parse_page

logger = logging.getLogger(__name__)


def _format_row(row: dict[str, Any]) -> dict[str, Any]:
    """조인 행의 금액을 문자열로 정리"""
    row = dict(row)
    row["amount"] = str(row["amount"])
    return row


class TransactionService:
    """거래 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.entries = LedgerEntryStore(db)
        self.mutator = BalanceMutator(db)

    async def list_transactions(
        self,
        user_id: int,
        start_date: str | None = None,
        end_date: str | None = None,
        category_id: int | None = None,
        wallet_id: int | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """거래 목록

        Returns:
            {"transactions": [...], "limit": int, "offset": int}
        """
        start, end = parse_date_range(start_date, end_date)
        page_limit, page_offset = parse_page(limit, offset)
        if category_id is not None:
            category_id = parse_id(category_id, "category_id")
        if wallet_id is not None:
            wallet_id = parse_id(wallet_id, "wallet_id")

        rows = await self.entries.list_transactions(
            user_id,
            start_date=start,
            end_date=end,
            category_id=category_id,
            wallet_id=wallet_id,
            limit=page_limit,
            offset=page_offset,
        )
        return {
            "transactions": [_format_row(row) for row in rows],
            "limit": page_limit,
            "offset": page_offset,
        }

    async def get_transaction(self, user_id: int, transaction_id: int) -> dict[str, Any]:
        row = await self.entries.get_transaction_detail(user_id, transaction_id)
        if row is None:
            raise TransactionNotFound()
        return _format_row(row)

    async def create_transaction(self, user_id: int, inp: TransactionInput) -> Transaction:
        return await self.mutator.create_transaction(user_id, inp)

    async def update_transaction(
        self,
        user_id: int,
        transaction_id: int,
        inp: TransactionInput,
    ) -> dict[str, Any]:
        await self.mutator.update_transaction(user_id, transaction_id, inp)
        return await self.get_transaction(user_id, transaction_id)

    async def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        await self.mutator.delete_transaction(user_id, transaction_id)
