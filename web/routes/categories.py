"""
카테고리 라우트

카테고리 CRUD
"""

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from web.dependencies import get_current_user_id, get_db
from web.models.requests import CategoryCreateRequest, CategoryUpdateRequest
from web.models.responses import CategoryResponse, MessageResponse
from web.services.category_service import CategoryService

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    type: str | None = Query(default=None, description="유형 필터 (income/expense)"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> list[CategoryResponse]:
    """카테고리 목록"""
    categories = await CategoryService(db).list_categories(user_id, category_type=type)
    return [CategoryResponse(**c.to_dict()) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    request: CategoryCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> CategoryResponse:
    """카테고리 생성"""
    category = await CategoryService(db).create_category(user_id, request.name, request.type)
    return CategoryResponse(**category.to_dict())


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    request: CategoryUpdateRequest,
    category_id: int = Path(..., description="카테고리 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> CategoryResponse:
    """카테고리 수정 (유형 변경 시 관련 지갑 잔액 재부호화)"""
    category = await CategoryService(db).update_category(
        user_id, category_id, name=request.name, category_type=request.type
    )
    return CategoryResponse(**category.to_dict())


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int = Path(..., description="카테고리 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> MessageResponse:
    """카테고리 삭제 (거래/예산이 참조하면 409)"""
    await CategoryService(db).delete_category(user_id, category_id)
    return MessageResponse(message=f"Category deleted: {category_id}")
