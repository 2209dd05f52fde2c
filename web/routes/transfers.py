"""
이체 라우트

지갑 간 이체 CRUD. 두 지갑의 잔액은 한 쌍으로 변경.
"""

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger import TransferInput
from web.dependencies import get_current_user_id, get_db
from web.models.requests import TransferRequest
from web.models.responses import MessageResponse, TransferListResponse, TransferResponse
from web.services.transfer_service import TransferService

router = APIRouter(prefix="/api/transfers", tags=["Transfers"])


def _to_input(request: TransferRequest) -> TransferInput:
    return TransferInput(
        from_wallet_id=request.from_wallet_id,
        to_wallet_id=request.to_wallet_id,
        amount=request.amount,
        transfer_date=request.transfer_date,
        description=request.description,
    )


@router.get("", response_model=TransferListResponse)
async def list_transfers(
    wallet_id: int | None = Query(default=None, description="지갑 필터 (from/to)"),
    start_date: str | None = Query(default=None, description="시작일 (YYYY-MM-DD)"),
    end_date: str | None = Query(default=None, description="종료일 (YYYY-MM-DD)"),
    limit: int | None = Query(default=None, description="최대 조회 수 (기본 50, 최대 200)"),
    offset: int | None = Query(default=None, description="건너뛸 수"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransferListResponse:
    """이체 목록 (날짜 내림차순)"""
    result = await TransferService(db).list_transfers(
        user_id,
        wallet_id=wallet_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return TransferListResponse(**result)


@router.post("", response_model=TransferResponse, status_code=201)
async def create_transfer(
    request: TransferRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransferResponse:
    """이체 생성 (출금 지갑 잔액 부족 시 409)"""
    transfer = await TransferService(db).create_transfer(user_id, _to_input(request))
    return TransferResponse(**transfer.to_dict())


@router.get("/{transfer_id}", response_model=TransferResponse)
async def get_transfer(
    transfer_id: int = Path(..., description="이체 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransferResponse:
    """이체 조회"""
    transfer = await TransferService(db).get_transfer(user_id, transfer_id)
    return TransferResponse(**transfer.to_dict())


@router.put("/{transfer_id}", response_model=TransferResponse)
async def update_transfer(
    request: TransferRequest,
    transfer_id: int = Path(..., description="이체 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> TransferResponse:
    """이체 수정 (기존 효과 되돌린 뒤 새 효과 적용)"""
    transfer = await TransferService(db).update_transfer(user_id, transfer_id, _to_input(request))
    return TransferResponse(**transfer.to_dict())


@router.delete("/{transfer_id}", response_model=MessageResponse)
async def delete_transfer(
    transfer_id: int = Path(..., description="이체 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> MessageResponse:
    """이체 삭제 (양쪽 잔액 되돌림)"""
    await TransferService(db).delete_transfer(user_id, transfer_id)
    return MessageResponse(message=f"Transfer deleted: {transfer_id}")
