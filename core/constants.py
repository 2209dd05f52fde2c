"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 인증
    TOKEN_TTL_MINUTES: int = 60
    JWT_ALGORITHM: str = "HS256"
    PASSWORD_HASH_ROUNDS: int = 12

    # 사용자 기본값
    CURRENCY: str = "VND"
    TIMEZONE: str = "Asia/Bangkok"
    DAILY_TIME: str = "08:00"

    # 목록 조회 페이지
    PAGE_LIMIT: int = 50
    PAGE_LIMIT_MAX: int = 200

    # SQLite 잠금 대기 (밀리초)
    BUSY_TIMEOUT_MS: int = 30000

    # 동시성 충돌 시 자동 재시도
    MAX_RETRIES: int = 2
    RETRY_BACKOFF_SEC: float = 0.05

    # 알림 스케줄러 주기 (초)
    REMINDER_INTERVAL_SEC: int = 60


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    DB_FILE: Path = DATA_DIR / "ledger.db"


class PushEndpoints:
    """푸시 알림 엔드포인트 (고정값)"""

    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"

    # Firebase Cloud Messaging HTTP v1 (project_id 치환)
    FCM_SEND_URL: str = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
    FCM_SCOPE: str = "https://www.googleapis.com/auth/firebase.messaging"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"


# 금액 정밀도 (소수점 2자리)
MONEY_QUANT: Decimal = Decimal("0.01")

# 금액 절대값 상한 (DECIMAL(12,2) 범위)
MAX_AMOUNT: Decimal = Decimal("9999999999.99")

# 회원가입 시 생성되는 기본 카테고리 (name, type)
DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("Salary", "income"),
    ("Bonus", "income"),
    ("Other Income", "income"),
    ("Food", "expense"),
    ("Transportation", "expense"),
    ("Rent", "expense"),
    ("Utilities", "expense"),
    ("Entertainment", "expense"),
    ("Shopping", "expense"),
    ("Healthcare", "expense"),
    ("Education", "expense"),
    ("Other Expense", "expense"),
]

# 회원가입 시 생성되는 기본 지갑
DEFAULT_WALLET_NAME: str = "Cash"
DEFAULT_WALLET_TYPE: str = "cash"
