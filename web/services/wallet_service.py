"""
지갑 서비스

지갑 CRUD, 기본 지갑 관리, 잔액 재계산.

규칙:
- balance는 직접 수정 불가 (opening_balance 변경 시 같은 차액만큼 이동)
- 사용자당 기본 지갑은 최대 1개 (설정 시 나머지 해제)
- 거래 또는 이체가 참조 중인 지갑은 삭제 불가
"""

import logging
from decimal import Decimal
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.errors import ValidationError, WalletInUse, WalletNotFound
from core.ledger import LedgerEntryStore, ReconciliationEngine, Wallet, WalletDirectory
from core.ledger.types import ReconciliationReport
from core.ledger.validation import normalize_currency, normalize_wallet_type, parse_money

logger = logging.getLogger(__name__)


class WalletService:
    """지갑 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.wallets = WalletDirectory(db)
        self.entries = LedgerEntryStore(db)

    async def list_wallets(self, user_id: int) -> list[Wallet]:
        """지갑 목록 (기본 지갑 우선, id 오름차순)"""
        rows = await self.db.fetchall_dict(
            "SELECT * FROM wallets WHERE user_id = ? ORDER BY is_default DESC, id ASC",
            (user_id,),
        )
        return [Wallet.from_row(row) for row in rows]

    async def get_wallet(self, user_id: int, wallet_id: int) -> Wallet:
        wallet = await self.wallets.get(wallet_id, user_id)
        if wallet is None:
            raise WalletNotFound()
        return wallet

    async def _user_currency(self, user_id: int) -> str:
        row = await self.db.fetchone("SELECT currency FROM users WHERE id = ?", (user_id,))
        return row[0] if row and row[0] else Defaults.CURRENCY

    async def create_wallet(
        self,
        user_id: int,
        name: str,
        wallet_type: str,
        currency: str | None = None,
        opening_balance: Any = None,
        is_default: bool = False,
    ) -> Wallet:
        """지갑 생성 (balance = opening_balance)"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Wallet name is required")
        normalized_type = normalize_wallet_type(wallet_type)
        opening = parse_money(opening_balance if opening_balance is not None else 0, "opening_balance")

        async with self.db.transaction():
            resolved_currency = normalize_currency(
                currency if currency is not None else await self._user_currency(user_id)
            )
            if is_default:
                await self._clear_default(user_id)

            cursor = await self.db.execute(
                """
                INSERT INTO wallets (
                    user_id, name, type, currency, opening_balance, balance, is_default
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    name,
                    normalized_type.value,
                    resolved_currency,
                    str(opening),
                    str(opening),
                    int(is_default),
                ),
            )
            wallet_id = cursor.lastrowid

        logger.info(
            f"지갑 생성: {wallet_id}",
            extra={"user_id": user_id, "opening_balance": str(opening), "is_default": is_default},
        )
        return await self.get_wallet(user_id, wallet_id)

    async def update_wallet(
        self,
        user_id: int,
        wallet_id: int,
        name: str | None = None,
        wallet_type: str | None = None,
        currency: str | None = None,
        opening_balance: Any = None,
        is_default: bool | None = None,
    ) -> Wallet:
        """지갑 수정

        opening_balance 변경 시 balance도 같은 차액만큼 이동 (잠금 상태에서).
        """
        updates: dict[str, Any] = {}
        if name is not None:
            stripped = name.strip()
            if not stripped:
                raise ValidationError("Wallet name is required")
            updates["name"] = stripped
        if wallet_type is not None:
            updates["type"] = normalize_wallet_type(wallet_type).value
        if currency is not None:
            updates["currency"] = normalize_currency(currency)
        new_opening = (
            parse_money(opening_balance, "opening_balance")
            if opening_balance is not None
            else None
        )

        if not updates and new_opening is None and is_default is None:
            raise ValidationError("No fields to update")

        async with self.db.transaction():
            locked = await self.wallets.lock_in_order(user_id, [wallet_id])
            wallet = locked.get(wallet_id)
            if wallet is None:
                raise WalletNotFound()

            if new_opening is not None and new_opening != wallet.opening_balance:
                shift = new_opening - wallet.opening_balance
                await self.wallets.apply_delta(wallet_id, shift)
                updates["opening_balance"] = str(new_opening)
                logger.info(
                    "개설 잔액 변경",
                    extra={"wallet_id": wallet_id, "shift": str(shift)},
                )

            if is_default is True:
                await self._clear_default(user_id)
                updates["is_default"] = 1
            elif is_default is False:
                updates["is_default"] = 0

            if updates:
                assignments = ", ".join(f"{column} = ?" for column in updates)
                await self.db.execute(
                    f"""
                    UPDATE wallets SET {assignments}, updated_at = datetime('now')
                    WHERE id = ? AND user_id = ?
                    """,
                    (*updates.values(), wallet_id, user_id),
                )

        return await self.get_wallet(user_id, wallet_id)

    async def delete_wallet(self, user_id: int, wallet_id: int) -> None:
        """지갑 삭제

        Raises:
            WalletNotFound / WalletInUse (거래 또는 이체가 참조)
        """
        async with self.db.transaction():
            if await self.wallets.get(wallet_id, user_id) is None:
                raise WalletNotFound()

            tx_count, transfer_count = await self.entries.wallet_usage(user_id, wallet_id)
            if tx_count or transfer_count:
                raise WalletInUse()

            await self.db.execute(
                "DELETE FROM wallets WHERE id = ? AND user_id = ?",
                (wallet_id, user_id),
            )

        logger.info(f"지갑 삭제: {wallet_id}", extra={"user_id": user_id})

    async def recalculate_balances(
        self,
        user_id: int,
        apply: bool = False,
        include_transfers: bool = False,
    ) -> ReconciliationReport:
        """잔액 재계산 (apply=False면 dry run)"""
        return await ReconciliationEngine(self.db).recalculate(
            user_id, apply=apply, include_transfers=include_transfers
        )

    async def _clear_default(self, user_id: int) -> None:
        await self.db.execute(
            "UPDATE wallets SET is_default = 0 WHERE user_id = ? AND is_default = 1",
            (user_id,),
        )

    @staticmethod
    def total_balance(wallets: list[Wallet]) -> Decimal:
        """지갑 잔액 합계"""
        return sum((w.balance for w in wallets), Decimal("0"))
