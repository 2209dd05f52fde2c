"""
지갑 라우트

지갑 CRUD 및 잔액 재계산
"""

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from web.dependencies import get_current_user_id, get_db
from web.models.requests import WalletCreateRequest, WalletUpdateRequest
from web.models.responses import (
    MessageResponse,
    ReconciliationResponse,
    WalletListResponse,
    WalletResponse,
)
from web.services.wallet_service import WalletService

router = APIRouter(prefix="/api/wallets", tags=["Wallets"])


@router.get("", response_model=WalletListResponse)
async def list_wallets(
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> WalletListResponse:
    """지갑 목록 (기본 지갑 우선) 및 잔액 합계"""
    wallets = await WalletService(db).list_wallets(user_id)
    return WalletListResponse(
        wallets=[WalletResponse(**w.to_dict()) for w in wallets],
        total_balance=str(WalletService.total_balance(wallets)),
    )


@router.post("", response_model=WalletResponse, status_code=201)
async def create_wallet(
    request: WalletCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> WalletResponse:
    """지갑 생성"""
    wallet = await WalletService(db).create_wallet(
        user_id,
        name=request.name,
        wallet_type=request.type,
        currency=request.currency,
        opening_balance=request.opening_balance,
        is_default=request.is_default,
    )
    return WalletResponse(**wallet.to_dict())


@router.post("/recalculate-balances", response_model=ReconciliationResponse)
async def recalculate_balances(
    apply: bool = Query(default=False, description="계산 결과를 잔액에 반영"),
    include_transfers: bool = Query(default=False, description="이체 포함 여부"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> ReconciliationResponse:
    """잔액 재계산 (apply=false면 dry run)"""
    report = await WalletService(db).recalculate_balances(
        user_id, apply=apply, include_transfers=include_transfers
    )
    return ReconciliationResponse(**report.to_dict())


@router.get("/{wallet_id}", response_model=WalletResponse)
async def get_wallet(
    wallet_id: int = Path(..., description="지갑 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> WalletResponse:
    """지갑 조회"""
    wallet = await WalletService(db).get_wallet(user_id, wallet_id)
    return WalletResponse(**wallet.to_dict())


@router.put("/{wallet_id}", response_model=WalletResponse)
async def update_wallet(
    request: WalletUpdateRequest,
    wallet_id: int = Path(..., description="지갑 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> WalletResponse:
    """지갑 수정 (opening_balance 변경 시 balance도 같은 차액만큼 이동)"""
    wallet = await WalletService(db).update_wallet(
        user_id,
        wallet_id,
        name=request.name,
        wallet_type=request.type,
        currency=request.currency,
        opening_balance=request.opening_balance,
        is_default=request.is_default,
    )
    return WalletResponse(**wallet.to_dict())


@router.delete("/{wallet_id}", response_model=MessageResponse)
async def delete_wallet(
    wallet_id: int = Path(..., description="지갑 ID"),
    user_id: int = Depends(get_current_user_id),
    db: SQLiteAdapter = Depends(get_db),
) -> MessageResponse:
    """지갑 삭제 (거래/이체가 참조하면 409)"""
    await WalletService(db).delete_wallet(user_id, wallet_id)
    return MessageResponse(message=f"Wallet deleted: {wallet_id}")
