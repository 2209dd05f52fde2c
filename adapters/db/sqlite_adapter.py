"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
Web 요청별 연결과 운영 스크립트가 동시에 접근 가능하도록 설정.

트랜잭션 규칙:
- 연결은 autocommit 모드 (isolation_level=None)
- transaction()은 BEGIN IMMEDIATE로 시작하여 첫 읽기 전에 쓰기 잠금 획득
  (MySQL의 SELECT ... FOR UPDATE에 해당)
- 잠금 대기 초과/busy 에러는 ConcurrencyConflict로 변환 (재시도 가능)

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Defaults
from core.errors import ConcurrencyConflict, LedgerError, StorageUnavailable

logger = logging.getLogger(__name__)

# 잠금 충돌로 판단하는 sqlite 에러 메시지
_LOCK_ERROR_MARKERS = ("database is locked", "database table is locked", "busy")


def is_lock_error(exc: BaseException) -> bool:
    """sqlite 잠금 충돌 에러 여부"""
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    message = str(exc).lower()
    return any(marker in message for marker in _LOCK_ERROR_MARKERS)


def translate_storage_error(exc: sqlite3.Error) -> LedgerError:
    """sqlite 에러를 도메인 에러로 변환

    Args:
        exc: sqlite3 (aiosqlite) 에러

    Returns:
        ConcurrencyConflict (잠금 충돌) 또는 StorageUnavailable
    """
    if is_lock_error(exc):
        return ConcurrencyConflict()
    return StorageUnavailable()


async def create_connection(
    db_path: Path | str,
    busy_timeout_ms: int = Defaults.BUSY_TIMEOUT_MS,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드, autocommit)

    Args:
        db_path: DB 파일 경로
        busy_timeout_ms: 잠금 대기 시간 (밀리초)

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    # BEGIN/COMMIT을 직접 관리하기 위해 autocommit 모드로 연결
    conn = await aiosqlite.connect(db_path_str, isolation_level=None)

    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.debug(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "busy_timeout_ms": busy_timeout_ms},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    원자적 작업 단위(transaction) 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로
        busy_timeout_ms: 잠금 대기 시간 (밀리초)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        async with db.transaction():
            await db.execute("UPDATE wallets SET ...")
    ```
    """

    def __init__(
        self,
        db_path: Path | str,
        busy_timeout_ms: int = Defaults.BUSY_TIMEOUT_MS,
    ):
        self.db_path = Path(db_path)
        self.busy_timeout_ms = busy_timeout_ms
        self._conn: aiosqlite.Connection | None = None
        # 같은 연결을 공유하는 코루틴 간 작업 단위 직렬화
        self._tx_lock = asyncio.Lock()
        self._tx_owner: asyncio.Task | None = None

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """현재 작업 단위 진행 여부"""
        return self._tx_owner is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        try:
            self._conn = await create_connection(self.db_path, self.busy_timeout_ms)
        except sqlite3.Error as e:
            logger.error(
                "SQLite 연결 실패",
                extra={"db_path": str(self.db_path)},
                exc_info=True,
            )
            raise translate_storage_error(e) from e

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.debug("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        return await self._conn.executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def fetchone_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> dict[str, Any] | None:
        """단일 행 조회 (컬럼명 → 값 dict)"""
        cursor = await self.execute(sql, parameters)
        row = await cursor.fetchone()
        if row is None:
            return None
        columns = [desc[0] for desc in cursor.description]
        return dict(zip(columns, row))

    async def fetchall_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[dict[str, Any]]:
        """전체 행 조회 (컬럼명 → 값 dict 리스트)"""
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    async def commit(self) -> None:
        """커밋 (진행 중인 트랜잭션이 있을 때만 유효)"""
        if self._conn is not None and self._conn.in_transaction:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None and self._conn.in_transaction:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """원자적 작업 단위 컨텍스트 매니저

        BEGIN IMMEDIATE로 쓰기 잠금을 먼저 확보한 뒤 본문 실행.
        성공 시 COMMIT, 예외(취소 포함) 시 ROLLBACK 후 예외 전파.
        sqlite 에러는 ConcurrencyConflict / StorageUnavailable로 변환.

        중첩 호출은 지원하지 않음 (같은 태스크에서 재진입 시 RuntimeError).
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        current = asyncio.current_task()
        if current is not None and self._tx_owner is current:
            raise RuntimeError("Nested transaction is not supported")

        async with self._tx_lock:
            self._tx_owner = current
            try:
                try:
                    await self._conn.execute("BEGIN IMMEDIATE")
                except sqlite3.Error as e:
                    logger.warning(
                        "작업 단위 시작 실패",
                        extra={"db_path": str(self.db_path), "error": str(e)},
                    )
                    raise translate_storage_error(e) from e

                try:
                    yield self._conn
                except sqlite3.Error as e:
                    await self._rollback_quietly()
                    if is_lock_error(e):
                        logger.warning("잠금 충돌로 롤백", extra={"error": str(e)})
                    else:
                        logger.error("스토리지 에러로 롤백", exc_info=True)
                    raise translate_storage_error(e) from e
                except BaseException as e:
                    await self._rollback_quietly()
                    logger.warning(
                        "작업 단위 롤백",
                        extra={"reason": type(e).__name__},
                    )
                    raise

                try:
                    await self._conn.execute("COMMIT")
                except sqlite3.Error as e:
                    await self._rollback_quietly()
                    logger.error("커밋 실패", exc_info=True)
                    raise translate_storage_error(e) from e
            finally:
                self._tx_owner = None

    async def _rollback_quietly(self) -> None:
        """롤백 (롤백 자체의 실패는 로그만 남김)"""
        if self._conn is None or not self._conn.in_transaction:
            return
        try:
            await self._conn.execute("ROLLBACK")
        except sqlite3.Error:
            logger.error("롤백 실패", exc_info=True)

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    async def get_table_info(self, table_name: str) -> list[dict[str, Any]]:
        """테이블 정보 조회"""
        rows = await self.fetchall(f"PRAGMA table_info({table_name})")

        columns = []
        for row in rows:
            columns.append({
                "cid": row[0],
                "name": row[1],
                "type": row[2],
                "notnull": bool(row[3]),
                "default_value": row[4],
                "pk": bool(row[5]),
            })

        return columns

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """계정 스키마 초기화 (users, 알림 설정, 디바이스 토큰)

    원장 테이블은 core.ledger.schema.init_ledger_schema에서 생성.

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # users
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            username         TEXT NOT NULL,
            email            TEXT NOT NULL UNIQUE,
            password_hash    TEXT NOT NULL,
            full_name        TEXT,
            currency         TEXT NOT NULL DEFAULT 'VND',
            timezone         TEXT,
            avatar_url       TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # notification_preferences (사용자당 1행)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS notification_preferences (
            user_id                INTEGER PRIMARY KEY
                                   REFERENCES users(id) ON DELETE CASCADE,
            enabled                INTEGER NOT NULL DEFAULT 1,
            daily_time             TEXT NOT NULL DEFAULT '08:00',
            timezone               TEXT NOT NULL DEFAULT 'Asia/Bangkok',
            daily_reminder_enabled INTEGER NOT NULL DEFAULT 1,
            daily_summary_enabled  INTEGER NOT NULL DEFAULT 1,
            budget_warning_enabled INTEGER NOT NULL DEFAULT 1,
            last_daily_sent_on     TEXT,
            updated_at             TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # user_devices (푸시 토큰)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS user_devices (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id          INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            token            TEXT NOT NULL UNIQUE,
            platform         TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_user_devices_user
        ON user_devices(user_id)
    """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")
