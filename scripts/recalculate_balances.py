"""
지갑 잔액 재계산

거래(및 선택적으로 이체) 합계로 지갑 잔액을 다시 계산.
--apply 없이 실행하면 dry run (DB 변경 없음).

사용법:
    python -m scripts.recalculate_balances --user-id 1
    python -m scripts.recalculate_balances --user-id 1 --apply --include-transfers
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from core.ledger import ReconciliationEngine, ReconciliationReport

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def recalculate(
    db_path: Path,
    user_id: int,
    apply: bool,
    include_transfers: bool,
) -> ReconciliationReport:
    async with SQLiteAdapter(db_path) as db:
        return await ReconciliationEngine(db).recalculate(
            user_id, apply=apply, include_transfers=include_transfers
        )


def print_report(report: ReconciliationReport) -> None:
    """재계산 결과 표 출력"""
    mode = "APPLY" if report.applied else "DRY RUN"
    print(f"\n[{mode}] user_id={report.user_id} include_transfers={report.include_transfers}")
    print(f"{'wallet':>8} {'opening':>16} {'current':>16} {'net':>16} {'proposed':>16} {'drift':>16}")
    for row in report.rows:
        marker = " *" if row.has_drift else ""
        print(
            f"{row.wallet_id:>8} {row.opening_balance:>16} {row.current_balance:>16} "
            f"{row.net_from_entries:>16} {row.proposed_balance:>16} {row.drift:>16}{marker}"
        )
    print(f"\n불일치 지갑: {len(report.drifted)} / {len(report.rows)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="지갑 잔액 재계산")
    parser.add_argument("--user-id", type=int, required=True, help="대상 사용자 ID")
    parser.add_argument("--apply", action="store_true", help="계산 결과를 DB에 반영")
    parser.add_argument(
        "--include-transfers",
        action="store_true",
        help="이체 효과를 순증감에 포함",
    )
    parser.add_argument("--db-path", type=Path, default=None, help="DB 파일 경로")
    args = parser.parse_args()

    db_path = args.db_path or get_settings().db_path
    report = asyncio.run(
        recalculate(db_path, args.user_id, args.apply, args.include_transfers)
    )
    print_report(report)


if __name__ == "__main__":
    main()
