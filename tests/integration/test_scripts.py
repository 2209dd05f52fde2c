"""
운영 스크립트 테스트 (init_db, recalculate_balances)
"""

from pathlib import Path

import pytest

from scripts.init_db import init_db
from scripts.recalculate_balances import print_report, recalculate


@pytest.mark.asyncio
async def test_init_db_creates_all_tables(tmp_path: Path) -> None:
    tables = await init_db(tmp_path / "fresh" / "ledger.db")

    assert set(tables) >= {
        "users",
        "notification_preferences",
        "user_devices",
        "wallets",
        "categories",
        "transactions",
        "transfers",
        "budgets",
    }


@pytest.mark.asyncio
async def test_recalculate_dry_run_then_apply(db, db_path: Path, seed, user_id, capsys) -> None:
    wallet = await seed.wallet(user_id, opening="100.00", balance="130.00")

    dry = await recalculate(db_path, user_id, apply=False, include_transfers=False)
    print_report(dry)

    assert dry.rows[0].drift == 30
    assert await seed.balance(wallet) == 130
    output = capsys.readouterr().out
    assert "[DRY RUN]" in output
    assert "불일치 지갑: 1 / 1" in output

    applied = await recalculate(db_path, user_id, apply=True, include_transfers=False)

    assert applied.applied is True
    assert await seed.balance(wallet) == 100
