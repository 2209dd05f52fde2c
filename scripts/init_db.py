"""
DB 스키마 초기화

사용법:
    python -m scripts.init_db
    python -m scripts.init_db --db-path data/other.db
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import get_settings
from core.ledger import init_ledger_schema

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def init_db(db_path: Path) -> list[str]:
    """사용자/알림/원장 스키마 생성

    Returns:
        생성 후 존재하는 테이블 이름 목록
    """
    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        await init_ledger_schema(db)
        rows = await db.fetchall(
            "SELECT name FROM sqlite_master WHERE type = 'table' "
            "AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
    return [row[0] for row in rows]


def main() -> None:
    parser = argparse.ArgumentParser(description="DB 스키마 초기화")
    parser.add_argument(
        "--db-path",
        type=Path,
        default=None,
        help="DB 파일 경로 (생략 시 settings.yaml의 database.path)",
    )
    args = parser.parse_args()

    db_path = args.db_path or get_settings().db_path
    tables = asyncio.run(init_db(db_path))

    logger.info(f"스키마 초기화 완료: {db_path}")
    for table in tables:
        print(f"  - {table}")


if __name__ == "__main__":
    main()
