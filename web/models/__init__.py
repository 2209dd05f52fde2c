"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    BudgetCreateRequest,
    BudgetUpdateRequest,
    CategoryCreateRequest,
    CategoryUpdateRequest,
    DeviceRegisterRequest,
    LoginRequest,
    NotificationPreferencesRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TransactionRequest,
    TransferRequest,
    WalletCreateRequest,
    WalletUpdateRequest,
)
from web.models.responses import (
    BudgetResponse,
    CategoryResponse,
    DashboardResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    NotificationPreferencesResponse,
    ReconciliationResponse,
    TokenResponse,
    TransactionDetailResponse,
    TransactionListResponse,
    TransactionResponse,
    TransferDetailResponse,
    TransferListResponse,
    TransferResponse,
    UserResponse,
    WalletListResponse,
    WalletResponse,
)

__all__ = [
    # Requests
    "BudgetCreateRequest",
    "BudgetUpdateRequest",
    "CategoryCreateRequest",
    "CategoryUpdateRequest",
    "DeviceRegisterRequest",
    "LoginRequest",
    "NotificationPreferencesRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "TransactionRequest",
    "TransferRequest",
    "WalletCreateRequest",
    "WalletUpdateRequest",
    # Responses
    "BudgetResponse",
    "CategoryResponse",
    "DashboardResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "NotificationPreferencesResponse",
    "ReconciliationResponse",
    "TokenResponse",
    "TransactionDetailResponse",
    "TransactionListResponse",
    "TransactionResponse",
    "TransferDetailResponse",
    "TransferListResponse",
    "TransferResponse",
    "UserResponse",
    "WalletListResponse",
    "WalletResponse",
]
