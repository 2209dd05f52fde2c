"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class CategoryType(str, Enum):
    """카테고리 유형 (금액 부호 결정)"""

    INCOME = "income"
    EXPENSE = "expense"


class WalletType(str, Enum):
    """지갑 유형"""

    CASH = "cash"
    BANK = "bank"
    CREDIT = "credit"


class DevicePlatform(str, Enum):
    """푸시 알림 디바이스 플랫폼"""

    IOS = "ios"
    ANDROID = "android"
