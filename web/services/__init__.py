"""
Web 서비스 패키지

비즈니스 로직 처리
"""

from web.services.auth_service import AuthService
from web.services.budget_service import BudgetService
from web.services.category_service import CategoryService
from web.services.notification_service import NotificationService
from web.services.report_service import ReportService
from web.services.transaction_service import TransactionService
from web.services.transfer_service import TransferService
from web.services.user_service import UserService
from web.services.wallet_service import WalletService

__all__ = [
    "AuthService",
    "BudgetService",
    "CategoryService",
    "NotificationService",
    "ReportService",
    "TransactionService",
    "TransferService",
    "UserService",
    "WalletService",
]
