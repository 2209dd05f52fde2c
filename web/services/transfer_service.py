"""
이체 서비스

지갑 간 이체 조회와 변경(BalanceMutator 위임).
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import TransferNotFound
from core.ledger import BalanceMutator, LedgerEntryStore, Transfer, TransferInput
from core.ledger.validation import parse_date_range, parse_id, parse_page

logger = logging.getLogger(__name__)


class TransferService:
    """이체 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.entries = LedgerEntryStore(db)
        self.mutator = BalanceMutator(db)

    async def list_transfers(
        self,
        user_id: int,
        wallet_id: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """이체 목록 (wallet_id는 from/to 어느 쪽이든 일치)"""
        start, end = parse_date_range(start_date, end_date)
        page_limit, page_offset = parse_page(limit, offset)
        if wallet_id is not None:
            wallet_id = parse_id(wallet_id, "wallet_id")

        rows = await self.entries.list_transfers(
            user_id,
            wallet_id=wallet_id,
            start_date=start,
            end_date=end,
            limit=page_limit,
            offset=page_offset,
        )
        for row in rows:
            row["amount"] = str(row["amount"])
        return {"transfers": rows, "limit": page_limit, "offset": page_offset}

    async def get_transfer(self, user_id: int, transfer_id: int) -> Transfer:
        transfer = await self.entries.get_transfer(user_id, transfer_id)
        if transfer is None:
            raise TransferNotFound()
        return transfer

    async def create_transfer(self, user_id: int, inp: TransferInput) -> Transfer:
        return await self.mutator.create_transfer(user_id, inp)

    async def update_transfer(
        self,
        user_id: int,
        transfer_id: int,
        inp: TransferInput,
    ) -> Transfer:
        await self.mutator.update_transfer(user_id, transfer_id, inp)
        return await self.get_transfer(user_id, transfer_id)

    async def delete_transfer(self, user_id: int, transfer_id: int) -> None:
        await self.mutator.delete_transfer(user_id, transfer_id)
