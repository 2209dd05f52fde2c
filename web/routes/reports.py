"""
리포트 라우트

대시보드 집계
"""

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from web.dependencies import get_current_user_id, get_db
from web.models.responses import DashboardResponse
from web.services.report_service import ReportService

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    month: int | None = Query(default=None, description="월 (1-12, year와 함께)"),
    year: int | None = Query(default=None, description="연도 (month와 함께)"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> DashboardResponse:
    """수입/지출/차액 및 지출 카테고리별 합계"""
    report = await ReportService(db).dashboard(user_id, month=month, year=year)
    return DashboardResponse(**report.to_dict())
