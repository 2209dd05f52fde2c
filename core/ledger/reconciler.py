"""
정합성 재계산 엔진

원장 항목으로부터 지갑 잔액을 다시 계산하여 캐시 잔액과의 차이(drift) 보고.

계산 규칙:
- net = 지갑별 거래 delta 합계 (카테고리 조인으로 부호 결정)
- include_transfers=True면 이체 delta(-from, +to)도 net에 포함
- 저장된 opening_balance가 0이고 net이 0이 아니면
  opening_balance = current_balance - net 으로 추정 (초기 데이터 보정)
- proposed_balance = opening_balance + net
- drift = current_balance - proposed_balance

apply=False는 읽기 전용 (잠금 없음), apply=True는 하나의 작업 단위에서
지갑을 id 오름차순으로 잠그고 (opening_balance, proposed_balance) 기록.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from core.ledger.classifier import delta_for_type
from core.ledger.entries import LedgerEntryStore
from core.ledger.types import ReconciliationReport, ReconciliationRow, Wallet
from core.ledger.validation import quantize_money
from core.ledger.wallets import WalletDirectory

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class ReconciliationEngine:
    """정합성 재계산 엔진

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.entries = LedgerEntryStore(db)
        self.wallets = WalletDirectory(db)

    async def recalculate(
        self,
        user_id: int,
        apply: bool = False,
        include_transfers: bool = False,
    ) -> ReconciliationReport:
        """지갑 잔액 재계산

        Args:
            user_id: 대상 사용자
            apply: True면 계산 결과를 저장
            include_transfers: True면 이체 효과도 net에 포함

        Returns:
            ReconciliationReport (지갑당 1행)
        """
        if not apply:
            wallets = await self.wallets.list_for_user(user_id)
            rows = await self._compute(user_id, wallets, include_transfers)
            report = ReconciliationReport(
                user_id=user_id,
                applied=False,
                include_transfers=include_transfers,
                rows=rows,
            )
            logger.info(
                "잔액 재계산 (dry run)",
                extra={"user_id": user_id, "drifted": len(report.drifted)},
            )
            return report

        async with self.db.transaction():
            wallets = await self.wallets.list_for_user(user_id)
            locked = await self.wallets.lock_in_order(user_id, [w.id for w in wallets])
            rows = await self._compute(user_id, list(locked.values()), include_transfers)
            for row in rows:
                await self.wallets.set_balances(
                    row.wallet_id, row.opening_balance, row.proposed_balance
                )

        report = ReconciliationReport(
            user_id=user_id,
            applied=True,
            include_transfers=include_transfers,
            rows=rows,
        )
        logger.info(
            "잔액 재계산 적용",
            extra={
                "user_id": user_id,
                "wallets": len(rows),
                "drifted": [row.wallet_id for row in report.drifted],
            },
        )
        return report

    async def _net_by_wallet(self, user_id: int, include_transfers: bool) -> dict[int, Decimal]:
        """지갑별 항목 delta 합계"""
        nets: dict[int, Decimal] = {}
        for wallet_id, amount, category_type in await self.entries.signed_transaction_rows(user_id):
            nets[wallet_id] = nets.get(wallet_id, ZERO) + delta_for_type(category_type, amount)

        if include_transfers:
            for from_id, to_id, amount in await self.entries.transfer_rows(user_id):
                nets[from_id] = nets.get(from_id, ZERO) - amount
                nets[to_id] = nets.get(to_id, ZERO) + amount

        return nets

    async def _compute(
        self,
        user_id: int,
        wallets: list[Wallet],
        include_transfers: bool,
    ) -> list[ReconciliationRow]:
        nets = await self._net_by_wallet(user_id, include_transfers)

        rows: list[ReconciliationRow] = []
        for wallet in sorted(wallets, key=lambda w: w.id):
            net = quantize_money(nets.get(wallet.id, ZERO))
            current = wallet.balance
            opening = wallet.opening_balance
            if opening == 0 and net != 0:
                opening = quantize_money(current - net)

            proposed = quantize_money(opening + net)
            rows.append(
                ReconciliationRow(
                    wallet_id=wallet.id,
                    opening_balance=opening,
                    current_balance=current,
                    net_from_entries=net,
                    proposed_balance=proposed,
                    drift=quantize_money(current - proposed),
                )
            )
        return rows
