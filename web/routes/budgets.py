"""
예산 라우트

월별 카테고리 예산 CRUD
"""

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from web.dependencies import get_current_user_id, get_db
from web.models.requests import BudgetCreateRequest, BudgetUpdateRequest
from web.models.responses import BudgetResponse, MessageResponse
from web.services.budget_service import BudgetService

router = APIRouter(prefix="/api/budgets", tags=["Budgets"])


@router.get("", response_model=list[BudgetResponse])
async def list_budgets(
    period: str | None = Query(default=None, description="기간 (YYYY-MM)"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> list[BudgetResponse]:
    """예산 목록 (해당 월 지출 포함)"""
    budgets = await BudgetService(db).list_budgets(user_id, period=period)
    return [BudgetResponse(**b) for b in budgets]


@router.post("", response_model=BudgetResponse, status_code=201)
async def create_budget(
    request: BudgetCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> BudgetResponse:
    """예산 생성"""
    budget = await BudgetService(db).create_budget(
        user_id, request.category_id, request.amount, request.period
    )
    return BudgetResponse(**budget)


@router.put("/{budget_id}", response_model=BudgetResponse)
async def update_budget(
    request: BudgetUpdateRequest,
    budget_id: int = Path(..., description="예산 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> BudgetResponse:
    """예산 수정"""
    budget = await BudgetService(db).update_budget(
        user_id, budget_id, request.amount, category_id=request.category_id
    )
    return BudgetResponse(**budget)


@router.delete("/{budget_id}", response_model=MessageResponse)
async def delete_budget(
    budget_id: int = Path(..., description="예산 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> MessageResponse:
    """예산 삭제"""
    await BudgetService(db).delete_budget(user_id, budget_id)
    return MessageResponse(message=f"Budget deleted: {budget_id}")
