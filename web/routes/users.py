"""
사용자 라우트

프로필 조회/수정
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from web.dependencies import get_current_user_id, get_db
from web.models.requests import ProfileUpdateRequest
from web.models.responses import UserResponse
from web.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> UserResponse:
    """내 프로필 조회"""
    return UserResponse(**await UserService(db).get_profile(user_id))


@router.put("/me", response_model=UserResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> UserResponse:
    """내 프로필 수정 (지정된 필드만)"""
    user = await UserService(db).update_profile(
        user_id,
        full_name=request.full_name,
        currency=request.currency,
        timezone=request.timezone,
        avatar_url=request.avatar_url,
    )
    return UserResponse(**user)
