"""
BalanceMutator 이체 테스트

두 지갑 변경은 함께 반영되거나 함께 롤백되어야 함.
"""

from decimal import Decimal

import pytest

from core.errors import (
    InsufficientBalance,
    InvalidWallet,
    SameWalletTransfer,
    TransferNotFound,
)
from core.ledger import BalanceMutator, ReconciliationEngine, TransferInput


def transfer(from_id: int, to_id: int, amount: str, day: str = "2026-03-01") -> TransferInput:
    return TransferInput(
        from_wallet_id=from_id,
        to_wallet_id=to_id,
        amount=amount,
        transfer_date=day,
    )


class TestCreateTransfer:
    """이체 생성"""

    @pytest.mark.asyncio
    async def test_moves_money(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="1000.00")
        bank = await seed.wallet(user_id, "Bank", opening="0.00", wallet_type="bank")

        created = await BalanceMutator(db).create_transfer(user_id, transfer(cash, bank, "250"))

        assert created.amount == Decimal("250.00")
        assert await seed.balance(cash) == Decimal("750.00")
        assert await seed.balance(bank) == Decimal("250.00")

    @pytest.mark.asyncio
    async def test_exact_balance_allowed(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")

        await BalanceMutator(db).create_transfer(user_id, transfer(cash, bank, "100"))

        assert await seed.balance(cash) == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")

        with pytest.raises(InsufficientBalance) as exc_info:
            await BalanceMutator(db).create_transfer(user_id, transfer(cash, bank, "100.01"))

        assert exc_info.value.message == "Insufficient balance in from_wallet"
        assert await seed.balance(cash) == Decimal("100.00")
        assert await seed.balance(bank) == Decimal("0.00")
        assert await seed.count("transfers") == 0

    @pytest.mark.asyncio
    async def test_same_wallet(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, opening="100.00")

        with pytest.raises(SameWalletTransfer):
            await BalanceMutator(db).create_transfer(user_id, transfer(cash, cash, "10"))

    @pytest.mark.asyncio
    async def test_foreign_wallet(self, db, seed, user_id) -> None:
        other = await seed.user("other@example.com")
        cash = await seed.wallet(user_id, opening="100.00")
        foreign = await seed.wallet(other, opening="0.00")

        with pytest.raises(InvalidWallet):
            await BalanceMutator(db).create_transfer(user_id, transfer(cash, foreign, "10"))

        assert await seed.balance(cash) == Decimal("100.00")
        assert await seed.balance(foreign) == Decimal("0.00")


class TestUpdateTransfer:
    """이체 수정"""

    @pytest.mark.asyncio
    async def test_amount_checked_against_reverted_balance(self, db, seed, user_id) -> None:
        """되돌린 잔액 기준으로 검사: 100 보유 후 80 이체 → 100으로 수정 가능"""
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")
        mutator = BalanceMutator(db)
        created = await mutator.create_transfer(user_id, transfer(cash, bank, "80"))

        await mutator.update_transfer(user_id, created.id, transfer(cash, bank, "100"))

        assert await seed.balance(cash) == Decimal("0.00")
        assert await seed.balance(bank) == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_insufficient_after_revert_rolls_back(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")
        mutator = BalanceMutator(db)
        created = await mutator.create_transfer(user_id, transfer(cash, bank, "80"))

        with pytest.raises(InsufficientBalance):
            await mutator.update_transfer(user_id, created.id, transfer(cash, bank, "150"))

        stored = await mutator.entries.get_transfer(user_id, created.id)
        assert stored.amount == Decimal("80.00")
        assert await seed.balance(cash) == Decimal("20.00")
        assert await seed.balance(bank) == Decimal("80.00")

    @pytest.mark.asyncio
    async def test_reroute_to_other_wallets(self, db, seed, user_id) -> None:
        """기존/신규 지갑 합집합 모두 반영"""
        cash = await seed.wallet(user_id, "Cash", opening="500.00")
        bank = await seed.wallet(user_id, "Bank", opening="300.00", wallet_type="bank")
        card = await seed.wallet(user_id, "Card", opening="0.00", wallet_type="credit")
        mutator = BalanceMutator(db)
        created = await mutator.create_transfer(user_id, transfer(cash, bank, "100"))

        await mutator.update_transfer(user_id, created.id, transfer(bank, card, "250"))

        assert await seed.balance(cash) == Decimal("500.00")
        assert await seed.balance(bank) == Decimal("50.00")
        assert await seed.balance(card) == Decimal("250.00")

    @pytest.mark.asyncio
    async def test_invalid_wallet_rolls_back(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")
        mutator = BalanceMutator(db)
        created = await mutator.create_transfer(user_id, transfer(cash, bank, "40"))

        with pytest.raises(InvalidWallet):
            await mutator.update_transfer(user_id, created.id, transfer(cash, 9999, "40"))

        assert await seed.balance(cash) == Decimal("60.00")
        assert await seed.balance(bank) == Decimal("40.00")

    @pytest.mark.asyncio
    async def test_not_found(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")

        with pytest.raises(TransferNotFound):
            await BalanceMutator(db).update_transfer(user_id, 77, transfer(cash, bank, "10"))


class TestDeleteTransfer:
    """이체 삭제"""

    @pytest.mark.asyncio
    async def test_delete_reverts_both(self, db, seed, user_id) -> None:
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", wallet_type="bank")
        mutator = BalanceMutator(db)
        created = await mutator.create_transfer(user_id, transfer(cash, bank, "40"))

        await mutator.delete_transfer(user_id, created.id)

        assert await seed.balance(cash) == Decimal("100.00")
        assert await seed.balance(bank) == Decimal("0.00")
        assert await seed.count("transfers") == 0

        with pytest.raises(TransferNotFound):
            await mutator.delete_transfer(user_id, created.id)

    @pytest.mark.asyncio
    async def test_reconcile_with_transfers(self, db, seed, user_id) -> None:
        """include_transfers=True면 이체 반영 잔액과 drift 없음"""
        cash = await seed.wallet(user_id, "Cash", opening="100.00")
        bank = await seed.wallet(user_id, "Bank", opening="10.00", wallet_type="bank")
        await BalanceMutator(db).create_transfer(user_id, transfer(cash, bank, "40"))

        report = await ReconciliationEngine(db).recalculate(user_id, include_transfers=True)

        assert report.drifted == []
