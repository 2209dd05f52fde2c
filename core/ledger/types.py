"""
원장 타입 정의

지갑/카테고리/거래/이체 레코드와 입력, 정합성 리포트 데이터 구조.
금액은 모두 Decimal (DB에는 TEXT로 저장).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from core.types import WalletType


def _money(value: Any) -> Decimal:
    """DB 값 → Decimal (NULL은 0)"""
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


@dataclass
class Wallet:
    """지갑

    Attributes:
        id: 지갑 ID
        user_id: 소유 사용자
        name: 이름
        type: 지갑 유형 (cash/bank/credit)
        currency: 통화 코드 (대문자 3자리)
        opening_balance: 개설 잔액
        balance: 현재 잔액 (opening_balance + 항목 합계의 캐시 값)
        is_default: 기본 지갑 여부
    """

    id: int
    user_id: int
    name: str
    type: WalletType
    currency: str
    opening_balance: Decimal
    balance: Decimal
    is_default: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Wallet":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            type=WalletType(row["type"]),
            currency=row["currency"],
            opening_balance=_money(row.get("opening_balance")),
            balance=_money(row.get("balance")),
            is_default=bool(row.get("is_default")),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "type": self.type.value,
            "currency": self.currency,
            "opening_balance": str(self.opening_balance),
            "balance": str(self.balance),
            "is_default": self.is_default,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Category:
    """카테고리

    type은 저장된 문자열 그대로 보관 (분류기에서 검증).
    """

    id: int
    user_id: int
    name: str
    type: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Category":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            type=row["type"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "type": self.type,
        }


@dataclass
class Transaction:
    """수입/지출 거래

    잔액 효과: income이면 +amount, expense면 -amount
    """

    id: int
    user_id: int
    category_id: int
    wallet_id: int
    amount: Decimal
    transaction_date: str
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Transaction":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            category_id=row["category_id"],
            wallet_id=row["wallet_id"],
            amount=_money(row["amount"]),
            transaction_date=row["transaction_date"],
            description=row.get("description"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "wallet_id": self.wallet_id,
            "amount": str(self.amount),
            "transaction_date": self.transaction_date,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Transfer:
    """지갑 간 이체

    잔액 효과: from 지갑 -amount, to 지갑 +amount
    """

    id: int
    user_id: int
    from_wallet_id: int
    to_wallet_id: int
    amount: Decimal
    transfer_date: str
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Transfer":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            from_wallet_id=row["from_wallet_id"],
            to_wallet_id=row["to_wallet_id"],
            amount=_money(row["amount"]),
            transfer_date=row["transfer_date"],
            description=row.get("description"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "from_wallet_id": self.from_wallet_id,
            "to_wallet_id": self.to_wallet_id,
            "amount": str(self.amount),
            "transfer_date": self.transfer_date,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class TransactionInput:
    """거래 생성/수정 입력

    category_id가 None이면 수정 시 기존 카테고리 유지 (생성 시에는 필수).
    amount는 검증 전 원시 값도 허용 (문자열/숫자).
    """

    wallet_id: Any
    amount: Any
    transaction_date: Any
    category_id: Any = None
    description: str | None = None


@dataclass
class TransferInput:
    """이체 생성/수정 입력"""

    from_wallet_id: Any
    to_wallet_id: Any
    amount: Any
    transfer_date: Any
    description: str | None = None


@dataclass
class ReconciliationRow:
    """지갑별 정합성 계산 결과

    drift = current_balance - proposed_balance (0이 아니면 캐시 잔액 불일치)
    """

    wallet_id: int
    opening_balance: Decimal
    current_balance: Decimal
    net_from_entries: Decimal
    proposed_balance: Decimal
    drift: Decimal

    @property
    def has_drift(self) -> bool:
        return self.drift != 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet_id": self.wallet_id,
            "opening_balance": str(self.opening_balance),
            "current_balance": str(self.current_balance),
            "net_from_entries": str(self.net_from_entries),
            "proposed_balance": str(self.proposed_balance),
            "drift": str(self.drift),
        }


@dataclass
class ReconciliationReport:
    """정합성 재계산 리포트"""

    user_id: int
    applied: bool
    include_transfers: bool
    rows: list[ReconciliationRow] = field(default_factory=list)

    @property
    def drifted(self) -> list[ReconciliationRow]:
        """불일치 지갑 목록"""
        return [row for row in self.rows if row.has_drift]

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "applied": self.applied,
            "include_transfers": self.include_transfers,
            "rows": [row.to_dict() for row in self.rows],
        }
