"""
FastAPI 애플리케이션

라우터 등록, 에러 응답 변환 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.errors import ErrorKind, LedgerError, ValidationError
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import (
    auth,
    budgets,
    categories,
    health,
    notifications,
    reports,
    transactions,
    transfers,
    users,
    wallets,
)
from web.routes.health import API_VERSION

logger = logging.getLogger(__name__)

# 에러 분류 → HTTP 상태 코드
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.REFERENCE: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STATE_CONFLICT: 409,
    ErrorKind.CONCURRENCY: 503,
    ErrorKind.STORAGE: 500,
    ErrorKind.AUTH: 401,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
    from core.ledger import init_ledger_schema

    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)
        await init_ledger_schema(db)

    scheduler, notifier, scheduler_db = await _start_scheduler(settings)

    yield

    # 종료 시 - 리소스 정리
    if scheduler:
        await scheduler.stop()
    if notifier:
        await notifier.close()
    if scheduler_db:
        await scheduler_db.close()
        logger.info("Web: 스케줄러 DB 연결 종료 완료")


async def _start_scheduler(settings):
    """알림 스케줄러 시작 (notifications.scheduler_enabled일 때만)

    Returns:
        (ReminderScheduler | None, PushRouter | None, SQLiteAdapter | None)
    """
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.push import ExpoPushClient, FcmPushClient, PushRouter
    from core.notifications import ReminderScheduler

    config = settings.notifications
    if not config.scheduler_enabled:
        logger.info("Web: 알림 스케줄러 비활성화")
        return None, None, None

    # 스케줄러 전용 연결 (요청 연결과 작업 단위 잠금을 공유하지 않음)
    db = SQLiteAdapter(settings.db_path)
    await db.connect()
    notifier = PushRouter(
        expo=ExpoPushClient(access_token=config.expo_access_token),
        fcm=FcmPushClient.from_file(config.fcm_service_account_path),
    )

    scheduler = ReminderScheduler(db, notifier, interval_sec=config.interval_sec)
    await scheduler.start()
    return scheduler, notifier, db


app = FastAPI(
    title="Finance Ledger API",
    description="개인 가계부 API (지갑, 거래, 이체, 예산, 알림)",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# 에러 응답 변환
# =========================================================================


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """도메인 에러 → {code, message, retryable}"""
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(
            f"요청 실패: {exc.code}",
            extra={"path": request.url.path, "error": exc.message},
        )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """요청 스키마 오류 → 400 INVALID_INPUT"""
    errors = exc.errors()
    message = ValidationError.default_message
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid input: {location}" if location else message
    return JSONResponse(status_code=400, content=ValidationError(message).to_dict())


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(wallets.router)
app.include_router(categories.router)
app.include_router(transactions.router)
app.include_router(transfers.router)
app.include_router(budgets.router)
app.include_router(reports.router)
app.include_router(notifications.router)
