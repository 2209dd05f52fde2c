"""
원장 (Ledger) 시스템

지갑 잔액 일관성 프로토콜.
모든 거래/이체 변경은 BalanceMutator의 원자적 작업 단위로 처리되어
Wallet.balance = opening_balance + Σ 항목 delta 를 유지.

사용 예시:
```python
from core.ledger import BalanceMutator, TransactionInput

mutator = BalanceMutator(db)
tx = await mutator.create_transaction(
    user_id,
    TransactionInput(wallet_id=1, category_id=4, amount="25000", transaction_date="2026-03-01"),
)

# 정합성 점검 (dry run)
report = await ReconciliationEngine(db).recalculate(user_id, apply=False)
```
"""

from core.ledger.classifier import CategoryClassifier, delta_for_type, parse_category_type
from core.ledger.entries import LedgerEntryStore
from core.ledger.mutator import BalanceMutator
from core.ledger.reconciler import ReconciliationEngine
from core.ledger.schema import init_ledger_schema
from core.ledger.types import (
    Category,
    ReconciliationReport,
    ReconciliationRow,
    Transaction,
    TransactionInput,
    Transfer,
    TransferInput,
    Wallet,
)
from core.ledger.wallets import WalletDirectory

__all__ = [
    # 핵심 클래스
    "BalanceMutator",
    "ReconciliationEngine",
    "CategoryClassifier",
    "WalletDirectory",
    "LedgerEntryStore",
    # 함수
    "delta_for_type",
    "parse_category_type",
    "init_ledger_schema",
    # 데이터 구조
    "Wallet",
    "Category",
    "Transaction",
    "Transfer",
    "TransactionInput",
    "TransferInput",
    "ReconciliationRow",
    "ReconciliationReport",
]
