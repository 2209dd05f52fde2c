"""
core/constants.py 테스트

경로 상수와 기본 데이터 검증
"""

from decimal import Decimal
from pathlib import Path

from core.constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_WALLET_NAME,
    MONEY_QUANT,
    PROJECT_ROOT,
    Defaults,
    Paths,
)
from core.types import CategoryType, WalletType


class TestPaths:
    """Paths 테스트"""

    def test_paths_are_pathlib(self) -> None:
        """모든 경로는 pathlib.Path"""
        assert isinstance(Paths.CONFIG_DIR, Path)
        assert isinstance(Paths.DB_FILE, Path)
        assert isinstance(Paths.LOGS_DIR, Path)

    def test_paths_under_project_root(self) -> None:
        """프로젝트 루트 하위"""
        assert Paths.SETTINGS_FILE.parent == Paths.CONFIG_DIR
        assert Paths.DB_FILE.parent == Paths.DATA_DIR
        assert Paths.CONFIG_DIR.parent == PROJECT_ROOT


class TestDefaultData:
    """기본 카테고리/지갑 테스트"""

    def test_twelve_default_categories(self) -> None:
        """기본 카테고리 12개 (수입 3, 지출 9)"""
        assert len(DEFAULT_CATEGORIES) == 12
        types = [CategoryType(t) for _, t in DEFAULT_CATEGORIES]
        assert types.count(CategoryType.INCOME) == 3
        assert types.count(CategoryType.EXPENSE) == 9

    def test_default_category_names_unique(self) -> None:
        """이름 중복 없음"""
        names = [name.lower() for name, _ in DEFAULT_CATEGORIES]
        assert len(names) == len(set(names))

    def test_default_wallet(self) -> None:
        """기본 지갑은 Cash"""
        assert DEFAULT_WALLET_NAME == "Cash"
        assert WalletType("cash") == WalletType.CASH


class TestDefaults:
    """Defaults 테스트"""

    def test_money_precision(self) -> None:
        """소수점 2자리"""
        assert MONEY_QUANT == Decimal("0.01")

    def test_page_limits(self) -> None:
        """페이지 기본값은 최대값 이하"""
        assert 0 < Defaults.PAGE_LIMIT <= Defaults.PAGE_LIMIT_MAX
