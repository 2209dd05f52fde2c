"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화

금액은 모두 문자열 (Decimal 정밀도 보존).
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")


class ErrorResponse(BaseModel):
    """에러 응답 (모든 도메인 에러 공통)"""

    code: str = Field(..., description="안정적인 에러 코드 (예: INSUFFICIENT_BALANCE)")
    message: str = Field(..., description="사람이 읽을 수 있는 메시지")
    retryable: bool = Field(default=False, description="재시도 가능 여부")


class MessageResponse(BaseModel):
    """단순 메시지 응답"""

    message: str


# =========================================================================
# 사용자
# =========================================================================


class UserResponse(BaseModel):
    """사용자 응답 (비밀번호 해시 제외)"""

    id: int
    username: str
    email: str
    full_name: str | None = None
    currency: str
    timezone: str | None = None
    avatar_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class TokenResponse(BaseModel):
    """로그인 응답"""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# =========================================================================
# 지갑 / 카테고리
# =========================================================================


class WalletResponse(BaseModel):
    """지갑 응답"""

    id: int
    user_id: int
    name: str
    type: str
    currency: str
    opening_balance: str
    balance: str
    is_default: bool
    created_at: str | None = None
    updated_at: str | None = None


class WalletListResponse(BaseModel):
    """지갑 목록 응답"""

    wallets: list[WalletResponse]
    total_balance: str = Field(..., description="전체 지갑 잔액 합계")


class ReconciliationRowResponse(BaseModel):
    """지갑별 재계산 결과"""

    wallet_id: int
    opening_balance: str
    current_balance: str
    net_from_entries: str
    proposed_balance: str
    drift: str


class ReconciliationResponse(BaseModel):
    """잔액 재계산 응답"""

    user_id: int
    applied: bool
    include_transfers: bool
    rows: list[ReconciliationRowResponse]


class CategoryResponse(BaseModel):
    """카테고리 응답"""

    id: int
    user_id: int
    name: str
    type: str


# =========================================================================
# 거래 / 이체
# =========================================================================


class TransactionResponse(BaseModel):
    """거래 응답"""

    id: int
    user_id: int
    category_id: int
    wallet_id: int
    amount: str
    transaction_date: str
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class TransactionDetailResponse(TransactionResponse):
    """거래 응답 (카테고리/지갑 정보 포함)"""

    category_name: str
    category_type: str
    wallet_name: str
    wallet_type: str
    wallet_currency: str


class TransactionListResponse(BaseModel):
    """거래 목록 응답"""

    transactions: list[TransactionDetailResponse]
    limit: int
    offset: int


class TransferResponse(BaseModel):
    """이체 응답"""

    id: int
    user_id: int
    from_wallet_id: int
    to_wallet_id: int
    amount: str
    transfer_date: str
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class TransferDetailResponse(TransferResponse):
    """이체 응답 (양쪽 지갑 이름 포함)"""

    from_wallet_name: str
    to_wallet_name: str


class TransferListResponse(BaseModel):
    """이체 목록 응답"""

    transfers: list[TransferDetailResponse]
    limit: int
    offset: int


# =========================================================================
# 예산 / 리포트
# =========================================================================


class BudgetResponse(BaseModel):
    """예산 응답 (해당 월 지출 포함)"""

    id: int
    user_id: int
    category_id: int
    category_name: str
    category_type: str
    amount: str
    period: str
    spent: str
    created_at: str | None = None
    updated_at: str | None = None


class CategoryStatResponse(BaseModel):
    """카테고리별 지출 합계"""

    name: str
    total: str


class DashboardResponse(BaseModel):
    """대시보드 응답"""

    period: str | None = Field(default=None, description="집계 기간 (YYYY-MM, 전체면 null)")
    income: str
    expense: str
    balance: str
    category_stats: list[CategoryStatResponse]


# =========================================================================
# 알림
# =========================================================================


class NotificationPreferencesResponse(BaseModel):
    """알림 설정 응답"""

    enabled: bool
    daily_time: str
    timezone: str
    daily_reminder_enabled: bool
    daily_summary_enabled: bool
    budget_warning_enabled: bool
