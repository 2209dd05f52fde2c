"""
거래 라우트

수입/지출 거래 CRUD. 잔액 변경은 BalanceMutator가 같은 작업 단위에서 처리.
"""

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger import TransactionInput
from web.dependencies import get_current_user_id, get_db
from web.models.requests import TransactionRequest
from web.models.responses import (
    MessageResponse,
    TransactionDetailResponse,
    TransactionListResponse,
    TransactionResponse,
)
from web.services.transaction_service import TransactionService

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


def _to_input(request: TransactionRequest) -> TransactionInput:
    return TransactionInput(
        wallet_id=request.wallet_id,
        amount=request.amount,
        transaction_date=request.transaction_date,
        category_id=request.category_id,
        description=request.description,
    )


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    start_date: str | None = Query(default=None, description="시작일 (YYYY-MM-DD)"),
    end_date: str | None = Query(default=None, description="종료일 (YYYY-MM-DD)"),
    category_id: int | None = Query(default=None, description="카테고리 필터"),
    wallet_id: int | None = Query(default=None, description="지갑 필터"),
    limit: int | None = Query(default=None, description="최대 조회 수 (기본 50, 최대 200)"),
    offset: int | None = Query(default=None, description="건너뛸 수"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransactionListResponse:
    """거래 목록 (날짜 내림차순)"""
    result = await TransactionService(db).list_transactions(
        user_id,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        wallet_id=wallet_id,
        limit=limit,
        offset=offset,
    )
    return TransactionListResponse(**result)


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    request: TransactionRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransactionResponse:
    """거래 생성 (지갑 잔액 동시 반영)"""
    transaction = await TransactionService(db).create_transaction(user_id, _to_input(request))
    return TransactionResponse(**transaction.to_dict())


@router.get("/{transaction_id}", response_model=TransactionDetailResponse)
async def get_transaction(
    transaction_id: int = Path(..., description="거래 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransactionDetailResponse:
    """거래 조회"""
    row = await TransactionService(db).get_transaction(user_id, transaction_id)
    return TransactionDetailResponse(**row)


@router.put("/{transaction_id}", response_model=TransactionDetailResponse)
async def update_transaction(
    request: TransactionRequest,
    transaction_id: int = Path(..., description="거래 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransactionDetailResponse:
    """거래 수정 (category_id 생략 시 기존 카테고리 유지)"""
    row = await TransactionService(db).update_transaction(
        user_id, transaction_id, _to_input(request)
    )
    return TransactionDetailResponse(**row)


@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction_id: int = Path(..., description="거래 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> MessageResponse:
    """거래 삭제 (잔액 효과 되돌림)"""
    await TransactionService(db).delete_transaction(user_id, transaction_id)
    return MessageResponse(message=f"Transaction deleted: {transaction_id}")
