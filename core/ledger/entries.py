"""
원장 항목 저장소

transactions / transfers 테이블 CRUD와 사용 여부 검사.
잔액 변경은 하지 않음 (BalanceMutator가 WalletDirectory로 처리).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.types import Transaction, TransactionInput, Transfer, TransferInput

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class LedgerEntryStore:
    """원장 항목 저장소

    모든 조회/변경은 user_id 범위로 제한.

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =========================================================================
    # Transactions
    # =========================================================================

    async def get_transaction(self, user_id: int, transaction_id: int) -> Transaction | None:
        """거래 조회"""
        row = await self.db.fetchone_dict(
            "SELECT * FROM transactions WHERE id = ? AND user_id = ?",
            (transaction_id, user_id),
        )
        return Transaction.from_row(row) if row else None

    async def insert_transaction(self, user_id: int, inp: TransactionInput) -> int:
        """거래 삽입

        Returns:
            생성된 거래 ID
        """
        cursor = await self.db.execute(
            """
            INSERT INTO transactions (
                user_id, category_id, wallet_id, amount,
                transaction_date, description
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                inp.category_id,
                inp.wallet_id,
                str(inp.amount),
                inp.transaction_date,
                inp.description,
            ),
        )
        return cursor.lastrowid

    async def update_transaction(
        self,
        user_id: int,
        transaction_id: int,
        inp: TransactionInput,
    ) -> None:
        """거래 행 갱신 (category_id는 확정된 값이어야 함)"""
        await self.db.execute(
            """
            UPDATE transactions
            SET category_id = ?, wallet_id = ?, amount = ?,
                transaction_date = ?, description = ?,
                updated_at = datetime('now')
            WHERE id = ? AND user_id = ?
            """,
            (
                inp.category_id,
                inp.wallet_id,
                str(inp.amount),
                inp.transaction_date,
                inp.description,
                transaction_id,
                user_id,
            ),
        )

    async def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        await self.db.execute(
            "DELETE FROM transactions WHERE id = ? AND user_id = ?",
            (transaction_id, user_id),
        )

    async def list_transactions(
        self,
        user_id: int,
        start_date: str | None = None,
        end_date: str | None = None,
        category_id: int | None = None,
        wallet_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """거래 목록 (카테고리/지갑 정보 조인, 날짜 내림차순)"""
        sql = """
            SELECT t.*,
                   c.name AS category_name, c.type AS category_type,
                   w.name AS wallet_name, w.type AS wallet_type,
                   w.currency AS wallet_currency
            FROM transactions t
            JOIN categories c ON c.id = t.category_id
            JOIN wallets w ON w.id = t.wallet_id
            WHERE t.user_id = ?
        """
        params: list[Any] = [user_id]

        if start_date is not None and end_date is not None:
            sql += " AND t.transaction_date BETWEEN ? AND ?"
            params.extend([start_date, end_date])
        if category_id is not None:
            sql += " AND t.category_id = ?"
            params.append(category_id)
        if wallet_id is not None:
            sql += " AND t.wallet_id = ?"
            params.append(wallet_id)

        sql += " ORDER BY t.transaction_date DESC, t.id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        return await self.db.fetchall_dict(sql, tuple(params))

    async def get_transaction_detail(
        self,
        user_id: int,
        transaction_id: int,
    ) -> dict[str, Any] | None:
        """거래 단건 (카테고리/지갑 정보 조인)"""
        return await self.db.fetchone_dict(
            """
            SELECT t.*,
                   c.name AS category_name, c.type AS category_type,
                   w.name AS wallet_name, w.type AS wallet_type,
                   w.currency AS wallet_currency
            FROM transactions t
            JOIN categories c ON c.id = t.category_id
            JOIN wallets w ON w.id = t.wallet_id
            WHERE t.id = ? AND t.user_id = ?
            """,
            (transaction_id, user_id),
        )

    # =========================================================================
    # Transfers
    # =========================================================================

    async def get_transfer(self, user_id: int, transfer_id: int) -> Transfer | None:
        """이체 조회"""
        row = await self.db.fetchone_dict(
            "SELECT * FROM transfers WHERE id = ? AND user_id = ?",
            (transfer_id, user_id),
        )
        return Transfer.from_row(row) if row else None

    async def insert_transfer(self, user_id: int, inp: TransferInput) -> int:
        cursor = await self.db.execute(
            """
            INSERT INTO transfers (
                user_id, from_wallet_id, to_wallet_id, amount,
                transfer_date, description
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                inp.from_wallet_id,
                inp.to_wallet_id,
                str(inp.amount),
                inp.transfer_date,
                inp.description,
            ),
        )
        return cursor.lastrowid

    async def update_transfer(
        self,
        user_id: int,
        transfer_id: int,
        inp: TransferInput,
    ) -> None:
        await self.db.execute(
            """
            UPDATE transfers
            SET from_wallet_id = ?, to_wallet_id = ?, amount = ?,
                transfer_date = ?, description = ?,
                updated_at = datetime('now')
            WHERE id = ? AND user_id = ?
            """,
            (
                inp.from_wallet_id,
                inp.to_wallet_id,
                str(inp.amount),
                inp.transfer_date,
                inp.description,
                transfer_id,
                user_id,
            ),
        )

    async def delete_transfer(self, user_id: int, transfer_id: int) -> None:
        await self.db.execute(
            "DELETE FROM transfers WHERE id = ? AND user_id = ?",
            (transfer_id, user_id),
        )

    async def list_transfers(
        self,
        user_id: int,
        wallet_id: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """이체 목록 (양쪽 지갑 이름 조인, 날짜 내림차순)

        wallet_id는 from/to 어느 쪽이든 일치하면 포함.
        """
        sql = """
            SELECT tr.*,
                   fw.name AS from_wallet_name,
                   tw.name AS to_wallet_name
            FROM transfers tr
            JOIN wallets fw ON fw.id = tr.from_wallet_id
            JOIN wallets tw ON tw.id = tr.to_wallet_id
            WHERE tr.user_id = ?
        """
        params: list[Any] = [user_id]

        if wallet_id is not None:
            sql += " AND (tr.from_wallet_id = ? OR tr.to_wallet_id = ?)"
            params.extend([wallet_id, wallet_id])
        if start_date is not None and end_date is not None:
            sql += " AND tr.transfer_date BETWEEN ? AND ?"
            params.extend([start_date, end_date])

        sql += " ORDER BY tr.transfer_date DESC, tr.id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        return await self.db.fetchall_dict(sql, tuple(params))

    # =========================================================================
    # 사용 여부 검사
    # =========================================================================

    async def category_usage(self, user_id: int, category_id: int) -> tuple[int, int]:
        """카테고리 참조 수

        Returns:
            (거래 수, 예산 수)
        """
        tx_row = await self.db.fetchone(
            "SELECT COUNT(*) FROM transactions WHERE user_id = ? AND category_id = ?",
            (user_id, category_id),
        )
        budget_row = await self.db.fetchone(
            "SELECT COUNT(*) FROM budgets WHERE user_id = ? AND category_id = ?",
            (user_id, category_id),
        )
        return (tx_row[0] if tx_row else 0, budget_row[0] if budget_row else 0)

    async def wallet_usage(self, user_id: int, wallet_id: int) -> tuple[int, int]:
        """지갑 참조 수

        Returns:
            (거래 수, 이체 수)
        """
        tx_row = await self.db.fetchone(
            "SELECT COUNT(*) FROM transactions WHERE user_id = ? AND wallet_id = ?",
            (user_id, wallet_id),
        )
        transfer_row = await self.db.fetchone(
            """
            SELECT COUNT(*) FROM transfers
            WHERE user_id = ? AND (from_wallet_id = ? OR to_wallet_id = ?)
            """,
            (user_id, wallet_id, wallet_id),
        )
        return (tx_row[0] if tx_row else 0, transfer_row[0] if transfer_row else 0)

    # =========================================================================
    # 재계산용 집계 (Decimal 합산은 Python에서 수행)
    # =========================================================================

    async def signed_transaction_rows(self, user_id: int) -> list[tuple[int, Decimal, str]]:
        """사용자 거래의 (wallet_id, amount, category_type) 목록"""
        rows = await self.db.fetchall(
            """
            SELECT t.wallet_id, t.amount, c.type
            FROM transactions t
            JOIN categories c ON c.id = t.category_id
            WHERE t.user_id = ?
            """,
            (user_id,),
        )
        return [(row[0], Decimal(str(row[1])), row[2]) for row in rows]

    async def transfer_rows(self, user_id: int) -> list[tuple[int, int, Decimal]]:
        """사용자 이체의 (from_wallet_id, to_wallet_id, amount) 목록"""
        rows = await self.db.fetchall(
            "SELECT from_wallet_id, to_wallet_id, amount FROM transfers WHERE user_id = ?",
            (user_id,),
        )
        return [(row[0], row[1], Decimal(str(row[2]))) for row in rows]

    async def category_amounts_by_wallet(
        self,
        user_id: int,
        category_id: int,
    ) -> dict[int, Decimal]:
        """카테고리의 지갑별 거래 금액 합계"""
        rows = await self.db.fetchall(
            "SELECT wallet_id, amount FROM transactions WHERE user_id = ? AND category_id = ?",
            (user_id, category_id),
        )
        totals: dict[int, Decimal] = {}
        for wallet_id, amount in rows:
            totals[wallet_id] = totals.get(wallet_id, Decimal("0")) + Decimal(str(amount))
        return totals
