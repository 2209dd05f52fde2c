"""
인증 라우트

회원가입, 로그인(JWT 발급 + token 쿠키), 현재 사용자 조회
"""

from fastapi import APIRouter, Depends, Response

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from web.dependencies import TOKEN_COOKIE_NAME, get_app_settings, get_current_user_id, get_db
from web.models.requests import LoginRequest, RegisterRequest
from web.models.responses import MessageResponse, TokenResponse, UserResponse
from web.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _service(db: SQLiteAdapter, settings: Settings) -> AuthService:
    return AuthService(
        db,
        jwt_secret=settings.jwt_secret,
        token_ttl_minutes=settings.token_ttl_minutes,
        default_currency=settings.default_currency,
    )


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    request: RegisterRequest,
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> UserResponse:
    """회원가입 (기본 카테고리/지갑/알림 설정 생성)"""
    user = await _service(db, settings).register(
        request.username, request.email, request.password
    )
    return UserResponse(**user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TokenResponse:
    """로그인

    응답 본문의 access_token과 동일한 값을 httponly 쿠키로도 설정.
    """
    token, user = await _service(db, settings).login(request.email, request.password)
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.token_ttl_minutes * 60,
    )
    return TokenResponse(access_token=token, user=UserResponse(**user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """로그아웃 (token 쿠키 삭제)"""
    response.delete_cookie(TOKEN_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def me(
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> UserResponse:
    """현재 사용자"""
    return UserResponse(**await _service(db, settings).get_user(user_id))
