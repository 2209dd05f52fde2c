"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter

from web.models.responses import HealthResponse

API_VERSION = "1.0.0"

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, version 정보
    """
    return HealthResponse(status="ok", version=API_VERSION)
