"""
알림 라우트

알림 설정, 디바이스 토큰 관리
"""

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from web.dependencies import get_current_user_id, get_db
from web.models.requests import DeviceRegisterRequest, NotificationPreferencesRequest
from web.models.responses import MessageResponse, NotificationPreferencesResponse
from web.services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


# =========================================================================
# 알림 설정
# =========================================================================


@router.get("/preferences", response_model=NotificationPreferencesResponse)
async def get_preferences(
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> NotificationPreferencesResponse:
    """알림 설정 조회 (저장된 설정이 없으면 기본값)"""
    prefs = await NotificationService(db).get_preferences(user_id)
    return NotificationPreferencesResponse(**prefs.to_dict())


@router.put("/preferences", response_model=NotificationPreferencesResponse)
async def update_preferences(
    request: NotificationPreferencesRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> NotificationPreferencesResponse:
    """알림 설정 수정"""
    prefs = await NotificationService(db).update_preferences(
        user_id, **request.model_dump(exclude_none=True)
    )
    return NotificationPreferencesResponse(**prefs.to_dict())


# =========================================================================
# 디바이스 토큰
# =========================================================================


@router.post("/devices", response_model=MessageResponse, status_code=201)
async def register_device(
    request: DeviceRegisterRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> MessageResponse:
    """디바이스 토큰 등록 (이미 있으면 소유자/플랫폼 갱신)"""
    await NotificationService(db).register_device(user_id, request.token, request.platform)
    return MessageResponse(message="Device registered")


@router.delete("/devices", response_model=MessageResponse)
async def delete_device(
    token: str = Query(..., description="삭제할 푸시 토큰"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> MessageResponse:
    """디바이스 토큰 삭제"""
    await NotificationService(db).delete_device(user_id, token)
    return MessageResponse(message="Device removed")
