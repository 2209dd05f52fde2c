"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Request

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.errors import AuthenticationFailed
from web.services.auth_service import decode_access_token

TOKEN_COOKIE_NAME = "token"


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """요청 단위 DB 연결 반환

    쓰기 작업은 서비스에서 transaction() 작업 단위로 처리.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path) as db:
        yield db


def _extract_token(request: Request) -> str | None:
    """Authorization: Bearer 헤더 우선, 없으면 token 쿠키"""
    header = request.headers.get("Authorization")
    if header:
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(TOKEN_COOKIE_NAME)


def get_current_user_id(request: Request) -> int:
    """인증된 사용자 ID

    Raises:
        AuthenticationFailed: 토큰 없음, 서명 불일치, 만료
    """
    token = _extract_token(request)
    if not token:
        raise AuthenticationFailed("Not authenticated")
    return decode_access_token(token, get_settings().jwt_secret)
