"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증

금액 필드는 문자열/숫자 모두 허용. 범위/형식 검증은 서비스 계층에서 수행하여
도메인 에러 코드(INVALID_AMOUNT 등)로 응답.
"""

from pydantic import BaseModel, Field

Amount = str | int | float


# =========================================================================
# 인증 / 사용자
# =========================================================================


class RegisterRequest(BaseModel):
    """회원가입 요청"""

    username: str = Field(..., description="사용자 이름")
    email: str = Field(..., description="이메일 (로그인 ID)")
    password: str = Field(..., description="비밀번호 (6자 이상)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"username": "alice", "email": "alice@example.com", "password": "secret123"},
            ]
        }
    }


class LoginRequest(BaseModel):
    """로그인 요청"""

    email: str = Field(..., description="이메일")
    password: str = Field(..., description="비밀번호")


class ProfileUpdateRequest(BaseModel):
    """프로필 수정 요청 (지정된 필드만 변경)"""

    full_name: str | None = Field(default=None, description="이름")
    currency: str | None = Field(default=None, description="통화 코드 (3자리)")
    timezone: str | None = Field(default=None, description="IANA 시간대")
    avatar_url: str | None = Field(default=None, description="아바타 URL")


# =========================================================================
# 지갑 / 카테고리
# =========================================================================


class WalletCreateRequest(BaseModel):
    """지갑 생성 요청"""

    name: str = Field(..., description="지갑 이름")
    type: str = Field(..., description="지갑 유형 (cash/bank/credit)")
    currency: str | None = Field(default=None, description="통화 (생략 시 사용자 통화)")
    opening_balance: Amount | None = Field(default=None, description="개설 잔액")
    is_default: bool = Field(default=False, description="기본 지갑 여부")


class WalletUpdateRequest(BaseModel):
    """지갑 수정 요청 (balance 직접 수정 불가)"""

    name: str | None = None
    type: str | None = None
    currency: str | None = None
    opening_balance: Amount | None = None
    is_default: bool | None = None


class CategoryCreateRequest(BaseModel):
    """카테고리 생성 요청"""

    name: str = Field(..., description="카테고리 이름")
    type: str = Field(..., description="유형 (income/expense)")


class CategoryUpdateRequest(BaseModel):
    """카테고리 수정 요청"""

    name: str | None = None
    type: str | None = None


# =========================================================================
# 거래 / 이체 / 예산
# =========================================================================


class TransactionRequest(BaseModel):
    """거래 생성/수정 요청

    수정 시 category_id를 생략하면 기존 카테고리 유지.
    """

    wallet_id: int = Field(..., description="지갑 ID")
    amount: Amount = Field(..., description="금액 (양수)")
    transaction_date: str = Field(..., description="거래일 (YYYY-MM-DD)")
    category_id: int | None = Field(default=None, description="카테고리 ID")
    description: str | None = Field(default=None, description="메모")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "wallet_id": 1,
                    "category_id": 4,
                    "amount": "125000",
                    "transaction_date": "2024-05-01",
                    "description": "Lunch",
                },
            ]
        }
    }


class TransferRequest(BaseModel):
    """이체 생성/수정 요청"""

    from_wallet_id: int = Field(..., description="출금 지갑 ID")
    to_wallet_id: int = Field(..., description="입금 지갑 ID")
    amount: Amount = Field(..., description="금액 (양수)")
    transfer_date: str = Field(..., description="이체일 (YYYY-MM-DD)")
    description: str | None = Field(default=None, description="메모")


class BudgetCreateRequest(BaseModel):
    """예산 생성 요청"""

    category_id: int = Field(..., description="카테고리 ID")
    amount: Amount = Field(..., description="예산 금액")
    period: str = Field(..., description="기간 (YYYY-MM)")


class BudgetUpdateRequest(BaseModel):
    """예산 수정 요청"""

    amount: Amount = Field(..., description="예산 금액")
    category_id: int | None = Field(default=None, description="카테고리 ID (생략 시 유지)")


# =========================================================================
# 알림
# =========================================================================


class NotificationPreferencesRequest(BaseModel):
    """알림 설정 수정 요청 (지정된 필드만 변경)"""

    enabled: bool | None = None
    daily_time: str | None = Field(default=None, description="알림 시각 (HH:MM)")
    timezone: str | None = Field(default=None, description="IANA 시간대")
    daily_reminder_enabled: bool | None = None
    daily_summary_enabled: bool | None = None
    budget_warning_enabled: bool | None = None


class DeviceRegisterRequest(BaseModel):
    """디바이스 토큰 등록 요청"""

    token: str = Field(..., description="푸시 토큰")
    platform: str = Field(..., description="플랫폼 (ios/android)")
