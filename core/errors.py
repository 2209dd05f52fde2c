"""
도메인 에러 정의

모든 에러는 안정적인 code(기계 판독용)와 kind(분류)를 가짐.
HTTP 경계(web/app.py)에서 한 번만 응답으로 변환.

분류:
- VALIDATION: 입력 형식/범위 오류 (스토리지 접근 전 거부, 재시도 불가)
- REFERENCE: 지갑/카테고리가 없거나 다른 사용자 소유 (재시도 불가)
- NOT_FOUND: 대상 리소스 없음
- STATE_CONFLICT: 비즈니스 규칙 위반 (잔액 부족, 사용 중 삭제 등)
- CONCURRENCY: 잠금 타임아웃/데드락 (일시적, 동일 요청 재시도 가능)
- STORAGE: 스토리지 사용 불가 (현재 요청 실패)
- AUTH: 인증 실패
"""

from enum import Enum


class ErrorKind(str, Enum):
    """에러 분류"""

    VALIDATION = "VALIDATION"
    REFERENCE = "REFERENCE"
    NOT_FOUND = "NOT_FOUND"
    STATE_CONFLICT = "STATE_CONFLICT"
    CONCURRENCY = "CONCURRENCY"
    STORAGE = "STORAGE"
    AUTH = "AUTH"


class LedgerError(Exception):
    """도메인 에러 베이스

    Attributes:
        code: 안정적인 에러 코드 (예: INSUFFICIENT_BALANCE)
        kind: 에러 분류
        message: 사용자에게 노출되는 메시지
        retryable: 동일 요청 재시도 가능 여부
    """

    code: str = "LEDGER_ERROR"
    kind: ErrorKind = ErrorKind.STORAGE
    default_message: str = "Server error"
    retryable: bool = False

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        """응답 본문 변환"""
        return {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }


# =========================================================================
# VALIDATION
# =========================================================================


class ValidationError(LedgerError):
    """입력 검증 에러 베이스"""

    code = "INVALID_INPUT"
    kind = ErrorKind.VALIDATION
    default_message = "Invalid input"


class InvalidAmount(ValidationError):
    code = "INVALID_AMOUNT"
    default_message = "Invalid amount"


class InvalidDate(ValidationError):
    code = "INVALID_DATE"
    default_message = "Invalid date format. Use YYYY-MM-DD"


class InvalidPeriod(ValidationError):
    code = "INVALID_PERIOD"
    default_message = "Invalid period format. Use YYYY-MM"


class SameWalletTransfer(ValidationError):
    code = "SAME_WALLET_TRANSFER"
    default_message = "from_wallet_id and to_wallet_id must be different"


class InvalidCategoryType(ValidationError):
    """카테고리 유형이 income/expense가 아님 (오래된 값 조회 시 방어)"""

    code = "INVALID_CATEGORY_TYPE"
    default_message = "Invalid category type"


# =========================================================================
# REFERENCE
# =========================================================================


class InvalidReference(LedgerError):
    """참조 에러 베이스"""

    code = "INVALID_REFERENCE"
    kind = ErrorKind.REFERENCE
    default_message = "Invalid reference"


class InvalidWallet(InvalidReference):
    code = "INVALID_WALLET"
    default_message = "Invalid wallet_id"


class InvalidCategory(InvalidReference):
    code = "INVALID_CATEGORY"
    default_message = "Invalid category"


class CategoryNotFound(InvalidReference):
    """분류기 조회 실패 (사용자 소유 카테고리 없음)"""

    code = "CATEGORY_NOT_FOUND"
    default_message = "Category not found"


# =========================================================================
# NOT_FOUND
# =========================================================================


class NotFoundError(LedgerError):
    code = "NOT_FOUND"
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class TransactionNotFound(NotFoundError):
    code = "TRANSACTION_NOT_FOUND"
    default_message = "Transaction not found or unauthorized"


class TransferNotFound(NotFoundError):
    code = "TRANSFER_NOT_FOUND"
    default_message = "Transfer not found or unauthorized"


class WalletNotFound(NotFoundError):
    code = "WALLET_NOT_FOUND"
    default_message = "Wallet not found or unauthorized"


class BudgetNotFound(NotFoundError):
    code = "BUDGET_NOT_FOUND"
    default_message = "Budget not found or unauthorized"


class CategoryMissing(NotFoundError):
    """카테고리 리소스 직접 조회/수정/삭제 시 없음"""

    code = "CATEGORY_MISSING"
    default_message = "Category not found or unauthorized"


class UserNotFound(NotFoundError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class DeviceTokenNotFound(NotFoundError):
    code = "DEVICE_TOKEN_NOT_FOUND"
    default_message = "Device token not found"


# =========================================================================
# STATE_CONFLICT
# =========================================================================


class StateConflict(LedgerError):
    code = "STATE_CONFLICT"
    kind = ErrorKind.STATE_CONFLICT
    default_message = "Conflict"


class InsufficientBalance(StateConflict):
    code = "INSUFFICIENT_BALANCE"
    default_message = "Insufficient balance in from_wallet"


class CategoryInUse(StateConflict):
    code = "CATEGORY_IN_USE"
    default_message = "Category is in use and cannot be deleted"


class WalletInUse(StateConflict):
    code = "WALLET_IN_USE"
    default_message = "Wallet is in use by transactions or transfers and cannot be deleted"


class DuplicateCategory(StateConflict):
    code = "DUPLICATE_CATEGORY"
    default_message = "Category with this name and type already exists"


class DuplicateBudget(StateConflict):
    code = "DUPLICATE_BUDGET"
    default_message = "Budget already exists for this category and period"


class EmailAlreadyExists(StateConflict):
    code = "EMAIL_EXISTS"
    default_message = "Email already exists"


# =========================================================================
# CONCURRENCY / STORAGE / AUTH
# =========================================================================


class ConcurrencyConflict(LedgerError):
    """잠금 타임아웃 또는 데드락 (전체 작업 단위 재시도 가능)"""

    code = "CONCURRENCY_CONFLICT"
    kind = ErrorKind.CONCURRENCY
    default_message = "Please retry (lock conflict)"
    retryable = True


class StorageUnavailable(LedgerError):
    code = "STORAGE_UNAVAILABLE"
    kind = ErrorKind.STORAGE
    default_message = "Server error"


class AuthenticationFailed(LedgerError):
    code = "AUTHENTICATION_FAILED"
    kind = ErrorKind.AUTH
    default_message = "Invalid credentials"
