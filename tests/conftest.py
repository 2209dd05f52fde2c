"""
pytest 공통 fixture 정의

임시 SQLite DB(전체 스키마)와 테스트 데이터 생성 헬퍼
"""

import tempfile
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.ledger import init_ledger_schema


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """테스트용 DB 파일 경로"""
    return tmp_path / "ledger_test.db"


async def create_schema(db_path: Path) -> None:
    """DB 파일에 전체 스키마 생성"""
    async with SQLiteAdapter(db_path) as adapter:
        await init_schema(adapter)
        await init_ledger_schema(adapter)


@pytest_asyncio.fixture
async def db(db_path: Path) -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 생성된 임시 DB"""
    await create_schema(db_path)
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()
    yield adapter
    await adapter.close()


class Seeder:
    """테스트 데이터 직접 삽입 헬퍼 (서비스 로직을 거치지 않음)"""

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._user_seq = 0

    async def user(self, email: str | None = None, currency: str = "VND") -> int:
        self._user_seq += 1
        email = email or f"user{self._user_seq}@example.com"
        cursor = await self.db.execute(
            """
            INSERT INTO users (username, email, password_hash, currency)
            VALUES (?, ?, 'x', ?)
            """,
            (email.split("@")[0], email, currency),
        )
        await self.db.commit()
        return cursor.lastrowid

    async def wallet(
        self,
        user_id: int,
        name: str = "Cash",
        opening: str = "0.00",
        balance: str | None = None,
        wallet_type: str = "cash",
        is_default: bool = False,
    ) -> int:
        cursor = await self.db.execute(
            """
            INSERT INTO wallets (
                user_id, name, type, currency, opening_balance, balance, is_default
            ) VALUES (?, ?, ?, 'VND', ?, ?, ?)
            """,
            (user_id, name, wallet_type, opening, balance or opening, int(is_default)),
        )
        await self.db.commit()
        return cursor.lastrowid

    async def category(self, user_id: int, name: str, category_type: str) -> int:
        cursor = await self.db.execute(
            "INSERT INTO categories (user_id, name, type) VALUES (?, ?, ?)",
            (user_id, name, category_type),
        )
        await self.db.commit()
        return cursor.lastrowid

    async def budget(self, user_id: int, category_id: int, amount: str, period: str) -> int:
        cursor = await self.db.execute(
            "INSERT INTO budgets (user_id, category_id, amount, period) VALUES (?, ?, ?, ?)",
            (user_id, category_id, amount, period),
        )
        await self.db.commit()
        return cursor.lastrowid

    async def balance(self, wallet_id: int) -> Decimal:
        row = await self.db.fetchone("SELECT balance FROM wallets WHERE id = ?", (wallet_id,))
        return Decimal(row[0])

    async def opening(self, wallet_id: int) -> Decimal:
        row = await self.db.fetchone(
            "SELECT opening_balance FROM wallets WHERE id = ?", (wallet_id,)
        )
        return Decimal(row[0])

    async def count(self, table: str) -> int:
        row = await self.db.fetchone(f"SELECT COUNT(*) FROM {table}")
        return row[0]


@pytest.fixture
def seed(db: SQLiteAdapter) -> Seeder:
    """테스트 데이터 헬퍼"""
    return Seeder(db)


@pytest_asyncio.fixture
async def user_id(seed: Seeder) -> int:
    """기본 테스트 사용자"""
    return await seed.user("owner@example.com")
