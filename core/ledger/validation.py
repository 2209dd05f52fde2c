"""
입력 검증

스토리지 접근 전에 형식/범위를 검사하여 VALIDATION 에러로 거부.
검증 통과 값은 정규화된 형태(Decimal 금액, int ID 등)로 반환.
"""

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.constants import MAX_AMOUNT, MONEY_QUANT, Defaults
from core.errors import (
    InvalidAmount,
    InvalidDate,
    InvalidPeriod,
    SameWalletTransfer,
    ValidationError,
)
from core.ledger.types import TransactionInput, TransferInput
from core.types import WalletType

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
_DAILY_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def quantize_money(value: Decimal) -> Decimal:
    """소수점 2자리 반올림 (ROUND_HALF_UP)"""
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def parse_amount(value: Any) -> Decimal:
    """금액 검증 (유한한 양수, 상한 MAX_AMOUNT)

    Raises:
        InvalidAmount: 숫자가 아니거나 0 이하 (반올림 후 0 포함), 상한 초과
    """
    amount = _to_decimal(value)
    if amount is None:
        raise InvalidAmount()
    try:
        amount = quantize_money(amount)
    except InvalidOperation as e:
        raise InvalidAmount() from e
    if amount <= 0:
        raise InvalidAmount()
    if amount > MAX_AMOUNT:
        raise InvalidAmount(f"Amount must not exceed {MAX_AMOUNT}")
    return amount


def parse_money(value: Any, field_name: str = "amount") -> Decimal:
    """부호 제한 없는 금액 검증 (개설 잔액 등, 절대값 상한 MAX_AMOUNT)"""
    amount = _to_decimal(value)
    if amount is None:
        raise InvalidAmount(f"Invalid {field_name}")
    try:
        amount = quantize_money(amount)
    except InvalidOperation as e:
        raise InvalidAmount(f"Invalid {field_name}") from e
    if abs(amount) > MAX_AMOUNT:
        raise InvalidAmount(f"{field_name} must not exceed {MAX_AMOUNT}")
    return amount


def parse_date(value: Any) -> str:
    """날짜 검증 (YYYY-MM-DD, 실제 달력 날짜)

    Raises:
        InvalidDate: 형식 불일치 또는 존재하지 않는 날짜 (2026-02-30 등)
    """
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise InvalidDate()
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDate() from e
    return value


def parse_period(value: Any) -> str:
    """예산 기간 검증 (YYYY-MM)"""
    if not isinstance(value, str) or not _PERIOD_RE.match(value):
        raise InvalidPeriod()
    return value


def parse_id(value: Any, field_name: str) -> int:
    """양의 정수 ID 검증"""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {field_name}")
    return value


def normalize_currency(value: Any) -> str:
    """통화 코드 정규화 (대문자 3자리)"""
    if not isinstance(value, str):
        raise ValidationError("Invalid currency")
    currency = value.strip().upper()
    if not _CURRENCY_RE.match(currency):
        raise ValidationError("Invalid currency")
    return currency


def normalize_wallet_type(value: Any) -> WalletType:
    """지갑 유형 정규화 (cash/bank/credit)"""
    if isinstance(value, WalletType):
        return value
    if not isinstance(value, str):
        raise ValidationError("Invalid wallet type")
    try:
        return WalletType(value.strip().lower())
    except ValueError as e:
        raise ValidationError("Invalid wallet type") from e


def validate_daily_time(value: Any) -> str:
    """알림 시각 검증 (HH:MM, 24시간)"""
    if not isinstance(value, str) or not _DAILY_TIME_RE.match(value):
        raise ValidationError("Invalid daily_time. Use HH:MM")
    return value


def validate_timezone(value: Any) -> str:
    """IANA 시간대 검증"""
    if not isinstance(value, str) or not value:
        raise ValidationError("Invalid timezone")
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError("Invalid timezone") from e
    return value


def parse_page(limit: Any, offset: Any) -> tuple[int, int]:
    """페이지 파라미터 검증 (limit 기본 50, 최대 200 / offset ≥ 0)"""
    if limit is None:
        page_limit = Defaults.PAGE_LIMIT
    else:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError("Invalid limit")
        page_limit = min(limit, Defaults.PAGE_LIMIT_MAX)

    if offset is None:
        page_offset = 0
    else:
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise ValidationError("Invalid offset")
        page_offset = offset

    return page_limit, page_offset


def parse_date_range(
    start_date: Any,
    end_date: Any,
) -> tuple[str | None, str | None]:
    """기간 필터 검증 (둘 다 지정하거나 둘 다 생략)"""
    if start_date is None and end_date is None:
        return None, None
    if start_date is None or end_date is None:
        raise ValidationError("start_date and end_date must be provided together")
    return parse_date(start_date), parse_date(end_date)


def validate_transaction_input(
    inp: TransactionInput,
    require_category: bool = True,
) -> TransactionInput:
    """거래 입력 검증 및 정규화

    Args:
        inp: 원시 입력
        require_category: 생성 시 True (수정 시 생략 허용)

    Returns:
        정규화된 TransactionInput
    """
    wallet_id = parse_id(inp.wallet_id, "wallet_id")
    amount = parse_amount(inp.amount)
    transaction_date = parse_date(inp.transaction_date)

    category_id = None
    if inp.category_id is not None:
        category_id = parse_id(inp.category_id, "category_id")
    elif require_category:
        raise ValidationError("category_id is required")

    return TransactionInput(
        wallet_id=wallet_id,
        amount=amount,
        transaction_date=transaction_date,
        category_id=category_id,
        description=inp.description,
    )


def validate_transfer_input(inp: TransferInput) -> TransferInput:
    """이체 입력 검증 및 정규화

    Raises:
        SameWalletTransfer: from == to (스토리지 접근 전 거부)
    """
    from_wallet_id = parse_id(inp.from_wallet_id, "from_wallet_id")
    to_wallet_id = parse_id(inp.to_wallet_id, "to_wallet_id")
    if from_wallet_id == to_wallet_id:
        raise SameWalletTransfer()

    return TransferInput(
        from_wallet_id=from_wallet_id,
        to_wallet_id=to_wallet_id,
        amount=parse_amount(inp.amount),
        transfer_date=parse_date(inp.transfer_date),
        description=inp.description,
    )
