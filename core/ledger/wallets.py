"""
지갑 디렉토리

사용자 범위 지갑 조회, 오름차순 잠금, 잔액 delta 적용.

규칙:
- 잠금/delta 적용은 반드시 SQLiteAdapter.transaction() 내부에서 호출
- 여러 지갑은 항상 id 오름차순으로 잠금
- 이체의 두 지갑 변경은 apply_paired_delta 한 번의 호출로 처리
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Iterable

from core.errors import InvalidAmount, InvalidWallet
from core.ledger.types import Wallet
from core.ledger.validation import quantize_money

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class WalletDirectory:
    """지갑 디렉토리

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =========================================================================
    # 조회
    # =========================================================================

    async def get(self, wallet_id: int, user_id: int) -> Wallet | None:
        """사용자 소유 지갑 조회"""
        row = await self.db.fetchone_dict(
            "SELECT * FROM wallets WHERE id = ? AND user_id = ?",
            (wallet_id, user_id),
        )
        return Wallet.from_row(row) if row else None

    async def list_for_user(self, user_id: int) -> list[Wallet]:
        """사용자 지갑 목록 (id 오름차순)"""
        rows = await self.db.fetchall_dict(
            "SELECT * FROM wallets WHERE user_id = ? ORDER BY id",
            (user_id,),
        )
        return [Wallet.from_row(row) for row in rows]

    # =========================================================================
    # 잠금
    # =========================================================================

    def _require_unit(self) -> None:
        if not self.db.in_transaction:
            raise RuntimeError("Wallet lock requires an active transaction")

    async def lock_in_order(
        self,
        user_id: int,
        wallet_ids: Iterable[int],
    ) -> dict[int, Wallet]:
        """지갑 잠금 (중복 제거 후 id 오름차순)

        BEGIN IMMEDIATE 작업 단위 안에서 읽으므로 커밋 전까지 다른 writer가
        변경할 수 없음. 존재하지 않거나 다른 사용자 소유인 지갑은 결과에서 제외.

        Returns:
            wallet_id → Wallet
        """
        self._require_unit()
        locked: dict[int, Wallet] = {}
        for wallet_id in sorted(set(wallet_ids)):
            wallet = await self.get(wallet_id, user_id)
            if wallet is not None:
                locked[wallet_id] = wallet
        return locked

    async def lock_required(
        self,
        user_id: int,
        wallet_ids: Iterable[int],
    ) -> dict[int, Wallet]:
        """지갑 잠금 (모두 존재해야 함)

        Raises:
            InvalidWallet: 하나라도 없거나 다른 사용자 소유
        """
        ids = set(wallet_ids)
        locked = await self.lock_in_order(user_id, ids)
        if len(locked) != len(ids):
            raise InvalidWallet()
        return locked

    # =========================================================================
    # 잔액 변경
    # =========================================================================

    async def _read_balance(self, wallet_id: int) -> Decimal:
        row = await self.db.fetchone(
            "SELECT balance FROM wallets WHERE id = ?",
            (wallet_id,),
        )
        if row is None:
            raise InvalidWallet()
        return Decimal(str(row[0]))

    async def current_balance(self, wallet_id: int) -> Decimal:
        """작업 단위 내 현재 잔액 (앞선 delta 반영)"""
        self._require_unit()
        return await self._read_balance(wallet_id)

    async def apply_delta(self, wallet_id: int, delta: Decimal) -> Decimal:
        """잔액에 delta 적용 (0이면 건너뜀)

        Returns:
            적용 후 잔액

        Raises:
            InvalidAmount: 적용 결과가 금액 정밀도 범위를 벗어남
        """
        self._require_unit()
        balance = await self._read_balance(wallet_id)
        if delta == 0:
            return balance

        try:
            new_balance = quantize_money(balance + delta)
        except InvalidOperation as e:
            raise InvalidAmount("Balance out of range") from e
        await self.db.execute(
            """
            UPDATE wallets
            SET balance = ?, updated_at = datetime('now')
            WHERE id = ?
            """,
            (str(new_balance), wallet_id),
        )
        logger.debug(
            "지갑 잔액 변경",
            extra={
                "wallet_id": wallet_id,
                "delta": str(delta),
                "balance": str(new_balance),
            },
        )
        return new_balance

    async def apply_paired_delta(
        self,
        wallet_a: int,
        delta_a: Decimal,
        wallet_b: int,
        delta_b: Decimal,
    ) -> None:
        """두 지갑에 delta를 한 쌍으로 적용 (id 오름차순)

        같은 작업 단위 안에서 둘 다 적용되거나 둘 다 롤백됨.
        """
        pairs = sorted([(wallet_a, delta_a), (wallet_b, delta_b)], key=lambda p: p[0])
        for wallet_id, delta in pairs:
            await self.apply_delta(wallet_id, delta)

    async def set_balances(
        self,
        wallet_id: int,
        opening_balance: Decimal,
        balance: Decimal,
    ) -> None:
        """개설 잔액과 잔액 동시 기록 (정합성 재계산 적용용)"""
        self._require_unit()
        await self.db.execute(
            """
            UPDATE wallets
            SET opening_balance = ?, balance = ?, updated_at = datetime('now')
            WHERE id = ?
            """,
            (str(quantize_money(opening_balance)), str(quantize_money(balance)), wallet_id),
        )
