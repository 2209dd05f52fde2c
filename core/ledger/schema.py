"""
원장 스키마 초기화

Web 시작 시 및 init_db 스크립트에서 원장 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액 컬럼은 모두 TEXT (Decimal 문자열, 소수점 2자리).
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """원장 스키마 초기화 (테이블 + 인덱스)

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    await db.commit()
    logger.info("원장 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """원장 테이블 생성"""

    # wallets 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS wallets (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id          INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name             TEXT NOT NULL,
            type             TEXT NOT NULL CHECK (type IN ('cash', 'bank', 'credit')),
            currency         TEXT NOT NULL,
            opening_balance  TEXT NOT NULL DEFAULT '0.00',
            balance          TEXT NOT NULL DEFAULT '0.00',
            is_default       INTEGER NOT NULL DEFAULT 0,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # categories 테이블 (type 검증은 분류기에서 수행)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id          INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name             TEXT NOT NULL,
            type             TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # transactions 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id          INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            category_id      INTEGER NOT NULL REFERENCES categories(id),
            wallet_id        INTEGER NOT NULL REFERENCES wallets(id),
            amount           TEXT NOT NULL,
            transaction_date TEXT NOT NULL,
            description      TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # transfers 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transfers (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id          INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            from_wallet_id   INTEGER NOT NULL REFERENCES wallets(id),
            to_wallet_id     INTEGER NOT NULL REFERENCES wallets(id),
            amount           TEXT NOT NULL,
            transfer_date    TEXT NOT NULL,
            description      TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now')),
            CHECK (from_wallet_id <> to_wallet_id)
        )
    """)

    # budgets 테이블 (잔액에 영향 없음)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS budgets (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id          INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            category_id      INTEGER NOT NULL REFERENCES categories(id),
            amount           TEXT NOT NULL,
            period           TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(user_id, category_id, period)
        )
    """)


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """원장 인덱스 생성"""

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_wallets_user
        ON wallets(user_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_categories_user
        ON categories(user_id, type)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_user_date
        ON transactions(user_id, transaction_date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_wallet
        ON transactions(wallet_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_category
        ON transactions(category_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transfers_user_date
        ON transfers(user_id, transfer_date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transfers_from
        ON transfers(from_wallet_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_transfers_to
        ON transfers(to_wallet_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_budgets_user_period
        ON budgets(user_id, period)
    """)
