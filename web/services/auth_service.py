"""
인증 서비스

회원가입(기본 카테고리/지갑/알림 설정 생성), 로그인(JWT 발급), 토큰 검증.

비밀번호: bcrypt (72바이트 제한)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_WALLET_NAME,
    DEFAULT_WALLET_TYPE,
    Defaults,
)
from core.errors import AuthenticationFailed, EmailAlreadyExists, ValidationError
from core.notifications.store import NotificationPreferences, NotificationStore
from web.services.user_service import UserService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72


# =========================================================================
# 비밀번호 / 토큰
# =========================================================================


def hash_password(password: str, rounds: int = Defaults.PASSWORD_HASH_ROUNDS) -> str:
    """비밀번호 해시 생성"""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """비밀번호 검증 (형식이 잘못된 해시는 불일치로 처리)"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    user_id: int,
    secret: str,
    ttl_minutes: int = Defaults.TOKEN_TTL_MINUTES,
    now: datetime | None = None,
) -> str:
    """JWT 액세스 토큰 발급 (sub = user_id)"""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=ttl_minutes),
    }
    return jwt.encode(payload, secret, algorithm=Defaults.JWT_ALGORITHM)


def decode_access_token(token: str, secret: str) -> int:
    """JWT 검증 후 user_id 반환

    Raises:
        AuthenticationFailed: 서명 불일치, 만료, sub 누락
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[Defaults.JWT_ALGORITHM])
        return int(payload["sub"])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationFailed("Token expired") from e
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        raise AuthenticationFailed("Invalid token") from e


# =========================================================================
# 서비스
# =========================================================================


class AuthService:
    """인증 서비스

    Args:
        db: SQLite 어댑터
        jwt_secret: 토큰 서명 키
        token_ttl_minutes: 토큰 유효 시간
        default_currency: 신규 사용자 통화
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        jwt_secret: str,
        token_ttl_minutes: int = Defaults.TOKEN_TTL_MINUTES,
        default_currency: str = Defaults.CURRENCY,
    ):
        self.db = db
        self.jwt_secret = jwt_secret
        self.token_ttl_minutes = token_ttl_minutes
        self.default_currency = default_currency

    async def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        """회원가입

        사용자 생성과 기본 데이터(카테고리 12개, Cash 지갑, 알림 설정)를
        하나의 작업 단위로 생성.

        Raises:
            ValidationError: 필수값 누락, 짧거나 긴 비밀번호
            EmailAlreadyExists: 이메일 중복
        """
        username = (username or "").strip()
        email = (email or "").strip().lower()
        if not username or not email or "@" not in email:
            raise ValidationError("username and a valid email are required")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )

        password_hash = hash_password(password)

        async with self.db.transaction():
            existing = await self.db.fetchone(
                "SELECT id FROM users WHERE email = ?",
                (email,),
            )
            if existing is not None:
                raise EmailAlreadyExists()

            cursor = await self.db.execute(
                """
                INSERT INTO users (username, email, password_hash, currency)
                VALUES (?, ?, ?, ?)
                """,
                (username, email, password_hash, self.default_currency),
            )
            user_id = cursor.lastrowid

            await self.db.executemany(
                "INSERT INTO categories (user_id, name, type) VALUES (?, ?, ?)",
                [(user_id, name, category_type) for name, category_type in DEFAULT_CATEGORIES],
            )
            await self.db.execute(
                """
                INSERT INTO wallets (
                    user_id, name, type, currency, opening_balance, balance, is_default
                ) VALUES (?, ?, ?, ?, '0.00', '0.00', 1)
                """,
                (user_id, DEFAULT_WALLET_NAME, DEFAULT_WALLET_TYPE, self.default_currency),
            )
            await NotificationStore(self.db).save_preferences(
                NotificationPreferences(user_id=user_id)
            )

        logger.info("회원가입 완료", extra={"user_id": user_id})
        return await self.get_user(user_id)

    async def login(self, email: str, password: str) -> tuple[str, dict[str, Any]]:
        """로그인

        Returns:
            (액세스 토큰, 사용자 정보)

        Raises:
            AuthenticationFailed: 이메일 없음 또는 비밀번호 불일치
        """
        row = await self.db.fetchone(
            "SELECT id, password_hash FROM users WHERE email = ?",
            ((email or "").strip().lower(),),
        )
        if row is None or not verify_password(password or "", row[1]):
            logger.warning("로그인 실패", extra={"email": email})
            raise AuthenticationFailed()

        user_id = row[0]
        token = create_access_token(user_id, self.jwt_secret, self.token_ttl_minutes)
        logger.info("로그인 성공", extra={"user_id": user_id})
        return token, await self.get_user(user_id)

    async def get_user(self, user_id: int) -> dict[str, Any]:
        """사용자 조회"""
        return await UserService(self.db).get_profile(user_id)
