"""
잔액 변경기 (Balance Mutator)

거래/이체의 생성·수정·삭제를 하나의 원자적 작업 단위로 처리하여
Wallet.balance = opening_balance + Σ 항목 delta 를 항상 유지.

작업 단위 순서:
1. BEGIN IMMEDIATE (쓰기 잠금 선점)
2. 기존 항목 조회 (수정/삭제 시 필수)
3. 카테고리 유형으로 부호 결정
4. 관련 지갑을 id 오름차순으로 잠금
5. delta 적용 후 항목 행 기록
6. COMMIT (실패 시 전체 ROLLBACK)

ConcurrencyConflict는 max_retries 만큼 작업 단위 전체를 재실행.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from core.constants import Defaults
from core.errors import (
    CategoryNotFound,
    ConcurrencyConflict,
    InsufficientBalance,
    InvalidCategory,
    InvalidWallet,
    TransactionNotFound,
    TransferNotFound,
)
from core.ledger.classifier import CategoryClassifier, delta_for_type
from core.ledger.entries import LedgerEntryStore
from core.ledger.types import Transaction, TransactionInput, Transfer, TransferInput
from core.ledger.validation import (
    parse_id,
    validate_transaction_input,
    validate_transfer_input,
)
from core.ledger.wallets import WalletDirectory
from core.types import CategoryType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BalanceMutator:
    """잔액 변경기

    Args:
        db: SQLite 어댑터
        max_retries: 동시성 충돌 시 자동 재시도 횟수
        retry_backoff_sec: 재시도 간 기본 대기 (시도 횟수만큼 배수)
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        max_retries: int = Defaults.MAX_RETRIES,
        retry_backoff_sec: float = Defaults.RETRY_BACKOFF_SEC,
    ):
        self.db = db
        self.max_retries = max_retries
        self.retry_backoff_sec = retry_backoff_sec
        self.entries = LedgerEntryStore(db)
        self.wallets = WalletDirectory(db)
        self.classifier = CategoryClassifier(db)

    async def _run(self, operation: str, unit: Callable[[], Awaitable[T]]) -> T:
        """작업 단위 실행 (ConcurrencyConflict 시 재시도)"""
        attempt = 0
        while True:
            try:
                return await unit()
            except ConcurrencyConflict:
                if attempt >= self.max_retries:
                    logger.warning(
                        f"동시성 충돌, 재시도 한도 초과: {operation}",
                        extra={"operation": operation, "attempts": attempt + 1},
                    )
                    raise
                attempt += 1
                logger.warning(
                    f"동시성 충돌, 재시도: {operation}",
                    extra={"operation": operation, "attempt": attempt},
                )
                await asyncio.sleep(self.retry_backoff_sec * attempt)

    async def _classify_owned(self, category_id: int, user_id: int) -> CategoryType:
        """입력 카테고리 분류 (없으면 InvalidCategory)"""
        try:
            return await self.classifier.classify(category_id, user_id)
        except CategoryNotFound as e:
            raise InvalidCategory() from e

    # =========================================================================
    # Transactions
    # =========================================================================

    async def create_transaction(self, user_id: int, inp: TransactionInput) -> Transaction:
        """거래 생성

        Raises:
            InvalidWallet / InvalidCategory / InvalidAmount / InvalidDate
        """
        inp = validate_transaction_input(inp, require_category=True)

        async def unit() -> Transaction:
            async with self.db.transaction():
                await self.wallets.lock_required(user_id, [inp.wallet_id])
                category_type = await self._classify_owned(inp.category_id, user_id)
                delta = delta_for_type(category_type, inp.amount)

                transaction_id = await self.entries.insert_transaction(user_id, inp)
                balance = await self.wallets.apply_delta(inp.wallet_id, delta)
                created = await self.entries.get_transaction(user_id, transaction_id)

            logger.info(
                f"거래 생성: {transaction_id}",
                extra={
                    "user_id": user_id,
                    "wallet_id": inp.wallet_id,
                    "delta": str(delta),
                    "balance": str(balance),
                },
            )
            assert created is not None
            return created

        return await self._run("create_transaction", unit)

    async def update_transaction(
        self,
        user_id: int,
        transaction_id: int,
        inp: TransactionInput,
    ) -> None:
        """거래 수정

        같은 지갑: balance += new_delta - old_delta
        다른 지갑: old.balance -= old_delta, new.balance += new_delta

        category_id 생략 시 기존 카테고리 유지.

        Raises:
            TransactionNotFound / InvalidWallet / InvalidCategory / InvalidAmount / InvalidDate
        """
        transaction_id = parse_id(transaction_id, "transaction id")
        inp = validate_transaction_input(inp, require_category=False)

        async def unit() -> None:
            async with self.db.transaction():
                old = await self.entries.get_transaction(user_id, transaction_id)
                if old is None:
                    raise TransactionNotFound()

                old_type = await self.classifier.classify(old.category_id, user_id)
                new_category_id = inp.category_id if inp.category_id is not None else old.category_id
                new_type = await self._classify_owned(new_category_id, user_id)

                old_delta = delta_for_type(old_type, old.amount)
                new_delta = delta_for_type(new_type, inp.amount)

                locked = await self.wallets.lock_in_order(
                    user_id, [old.wallet_id, inp.wallet_id]
                )
                if inp.wallet_id not in locked:
                    raise InvalidWallet()

                if old.wallet_id == inp.wallet_id:
                    await self.wallets.apply_delta(inp.wallet_id, new_delta - old_delta)
                else:
                    await self.wallets.apply_paired_delta(
                        old.wallet_id, -old_delta,
                        inp.wallet_id, new_delta,
                    )

                resolved = TransactionInput(
                    wallet_id=inp.wallet_id,
                    amount=inp.amount,
                    transaction_date=inp.transaction_date,
                    category_id=new_category_id,
                    description=inp.description,
                )
                await self.entries.update_transaction(user_id, transaction_id, resolved)

            logger.info(
                f"거래 수정: {transaction_id}",
                extra={
                    "user_id": user_id,
                    "old_wallet_id": old.wallet_id,
                    "new_wallet_id": inp.wallet_id,
                    "old_delta": str(old_delta),
                    "new_delta": str(new_delta),
                },
            )

        await self._run("update_transaction", unit)

    async def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        """거래 삭제 (balance -= delta)

        Raises:
            TransactionNotFound
        """
        transaction_id = parse_id(transaction_id, "transaction id")

        async def unit() -> None:
            async with self.db.transaction():
                old = await self.entries.get_transaction(user_id, transaction_id)
                if old is None:
                    raise TransactionNotFound()

                delta = delta_for_type(
                    await self.classifier.classify(old.category_id, user_id),
                    old.amount,
                )
                await self.wallets.lock_in_order(user_id, [old.wallet_id])
                await self.entries.delete_transaction(user_id, transaction_id)
                await self.wallets.apply_delta(old.wallet_id, -delta)

            logger.info(
                f"거래 삭제: {transaction_id}",
                extra={
                    "user_id": user_id,
                    "wallet_id": old.wallet_id,
                    "reverted_delta": str(-delta),
                },
            )

        await self._run("delete_transaction", unit)

    # =========================================================================
    # Transfers
    # =========================================================================

    async def create_transfer(self, user_id: int, inp: TransferInput) -> Transfer:
        """이체 생성

        Raises:
            SameWalletTransfer / InvalidWallet / InsufficientBalance / InvalidAmount / InvalidDate
        """
        inp = validate_transfer_input(inp)

        async def unit() -> Transfer:
            async with self.db.transaction():
                locked = await self.wallets.lock_required(
                    user_id, [inp.from_wallet_id, inp.to_wallet_id]
                )
                if locked[inp.from_wallet_id].balance < inp.amount:
                    raise InsufficientBalance()

                transfer_id = await self.entries.insert_transfer(user_id, inp)
                await self.wallets.apply_paired_delta(
                    inp.from_wallet_id, -inp.amount,
                    inp.to_wallet_id, inp.amount,
                )
                created = await self.entries.get_transfer(user_id, transfer_id)

            logger.info(
                f"이체 생성: {transfer_id}",
                extra={
                    "user_id": user_id,
                    "from_wallet_id": inp.from_wallet_id,
                    "to_wallet_id": inp.to_wallet_id,
                    "amount": str(inp.amount),
                },
            )
            assert created is not None
            return created

        return await self._run("create_transfer", unit)

    async def update_transfer(
        self,
        user_id: int,
        transfer_id: int,
        inp: TransferInput,
    ) -> None:
        """이체 수정

        기존/신규 지갑 합집합을 오름차순 잠금 → 기존 효과 되돌림 →
        되돌린 잔액 기준으로 new_from 잔액 검사 → 신규 효과 적용.

        Raises:
            TransferNotFound / SameWalletTransfer / InvalidWallet / InsufficientBalance
        """
        transfer_id = parse_id(transfer_id, "transfer id")
        inp = validate_transfer_input(inp)

        async def unit() -> None:
            async with self.db.transaction():
                old = await self.entries.get_transfer(user_id, transfer_id)
                if old is None:
                    raise TransferNotFound()

                locked = await self.wallets.lock_in_order(
                    user_id,
                    [old.from_wallet_id, old.to_wallet_id, inp.from_wallet_id, inp.to_wallet_id],
                )

                # 기존 효과 되돌림
                await self.wallets.apply_paired_delta(
                    old.from_wallet_id, old.amount,
                    old.to_wallet_id, -old.amount,
                )

                if inp.from_wallet_id not in locked or inp.to_wallet_id not in locked:
                    raise InvalidWallet()

                reverted_balance = await self.wallets.current_balance(inp.from_wallet_id)
                if reverted_balance < inp.amount:
                    raise InsufficientBalance()

                await self.wallets.apply_paired_delta(
                    inp.from_wallet_id, -inp.amount,
                    inp.to_wallet_id, inp.amount,
                )
                await self.entries.update_transfer(user_id, transfer_id, inp)

            logger.info(
                f"이체 수정: {transfer_id}",
                extra={
                    "user_id": user_id,
                    "old_pair": (old.from_wallet_id, old.to_wallet_id, str(old.amount)),
                    "new_pair": (inp.from_wallet_id, inp.to_wallet_id, str(inp.amount)),
                },
            )

        await self._run("update_transfer", unit)

    async def delete_transfer(self, user_id: int, transfer_id: int) -> None:
        """이체 삭제 (효과 되돌림)

        Raises:
            TransferNotFound
        """
        transfer_id = parse_id(transfer_id, "transfer id")

        async def unit() -> None:
            async with self.db.transaction():
                old = await self.entries.get_transfer(user_id, transfer_id)
                if old is None:
                    raise TransferNotFound()

                await self.wallets.lock_in_order(
                    user_id, [old.from_wallet_id, old.to_wallet_id]
                )
                await self.entries.delete_transfer(user_id, transfer_id)
                await self.wallets.apply_paired_delta(
                    old.from_wallet_id, old.amount,
                    old.to_wallet_id, -old.amount,
                )

            logger.info(
                f"이체 삭제: {transfer_id}",
                extra={
                    "user_id": user_id,
                    "from_wallet_id": old.from_wallet_id,
                    "to_wallet_id": old.to_wallet_id,
                    "amount": str(old.amount),
                },
            )

        await self._run("delete_transfer", unit)
