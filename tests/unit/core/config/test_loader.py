"""
core/config/loader.py 테스트

settings.yaml 로드, 검증, 싱글턴 테스트
"""

from pathlib import Path

import pytest

from core.config.loader import (
    SETTINGS_ENV_VAR,
    AppConfig,
    NotificationConfig,
    Settings,
    SettingsLoadError,
    get_settings,
    load_settings,
    resolve_settings_path,
)
from core.constants import Paths, PROJECT_ROOT


def write_settings(directory: Path, content: str) -> Path:
    path = directory / "settings.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_settings():
    """테스트 간 싱글턴 격리"""
    Settings.reset()
    yield
    Settings.reset()


class TestAppConfig:
    """AppConfig 데이터클래스 테스트"""

    def test_frozen(self) -> None:
        """불변성 확인"""
        config = AppConfig(db_path=Path("x.db"), jwt_secret="s")

        with pytest.raises(AttributeError):
            config.jwt_secret = "other"  # type: ignore

    def test_notification_defaults(self) -> None:
        """스케줄러는 기본 비활성화"""
        config = NotificationConfig()

        assert config.scheduler_enabled is False
        assert config.interval_sec == 60
        assert config.expo_access_token is None


class TestLoadSettings:
    """load_settings 테스트"""

    def test_full_file(self, temp_dir: Path) -> None:
        """모든 섹션 로드"""
        path = write_settings(
            temp_dir,
            f"""
auth:
  jwt_secret: "secret-xyz"
  token_ttl_minutes: 15
database:
  path: "{(temp_dir / 'ledger.db').as_posix()}"
default_currency: usd
notifications:
  scheduler_enabled: true
  interval_sec: 30
  expo_access_token: "expo-token"
  fcm_service_account_path: "config/fcm.json"
""",
        )

        config = load_settings(path)

        assert config.jwt_secret == "secret-xyz"
        assert config.token_ttl_minutes == 15
        assert config.db_path == temp_dir / "ledger.db"
        assert config.default_currency == "USD"
        assert config.notifications.scheduler_enabled is True
        assert config.notifications.interval_sec == 30
        assert config.notifications.expo_access_token == "expo-token"
        assert config.notifications.fcm_service_account_path == Paths.CONFIG_DIR.parent / "config" / "fcm.json"

    def test_minimal_file_uses_defaults(self, temp_dir: Path) -> None:
        """auth.jwt_secret만 있어도 동작"""
        path = write_settings(temp_dir, "auth:\n  jwt_secret: abc\n")

        config = load_settings(path)

        assert config.db_path == Paths.DB_FILE
        assert config.token_ttl_minutes == 60
        assert config.default_currency == "VND"
        assert config.notifications == NotificationConfig()

    def test_relative_db_path_from_project_root(self, temp_dir: Path) -> None:
        """상대 경로는 프로젝트 루트 기준"""
        path = write_settings(
            temp_dir,
            "auth:\n  jwt_secret: abc\ndatabase:\n  path: data/custom.db\n",
        )

        assert load_settings(path).db_path == PROJECT_ROOT / "data" / "custom.db"

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(SettingsLoadError, match="찾을 수 없습니다"):
            load_settings(temp_dir / "missing.yaml")

    def test_empty_file(self, temp_dir: Path) -> None:
        path = write_settings(temp_dir, "")

        with pytest.raises(SettingsLoadError, match="비어 있습니다"):
            load_settings(path)

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        path = write_settings(temp_dir, "auth: [unclosed\n")

        with pytest.raises(SettingsLoadError, match="파싱 실패"):
            load_settings(path)

    def test_missing_jwt_secret(self, temp_dir: Path) -> None:
        path = write_settings(temp_dir, "auth:\n  token_ttl_minutes: 10\n")

        with pytest.raises(SettingsLoadError, match="jwt_secret"):
            load_settings(path)

    def test_invalid_ttl(self, temp_dir: Path) -> None:
        path = write_settings(temp_dir, "auth:\n  jwt_secret: a\n  token_ttl_minutes: 0\n")

        with pytest.raises(SettingsLoadError, match="token_ttl_minutes"):
            load_settings(path)

    def test_invalid_interval(self, temp_dir: Path) -> None:
        path = write_settings(
            temp_dir,
            "auth:\n  jwt_secret: a\nnotifications:\n  interval_sec: -5\n",
        )

        with pytest.raises(SettingsLoadError, match="interval_sec"):
            load_settings(path)


class TestResolveSettingsPath:
    """설정 파일 경로 우선순위 테스트"""

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)

        assert resolve_settings_path() == Paths.SETTINGS_FILE

    def test_env_var(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(temp_dir / "alt.yaml"))

        assert resolve_settings_path() == temp_dir / "alt.yaml"

    def test_argument_wins(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(temp_dir / "alt.yaml"))

        assert resolve_settings_path(temp_dir / "arg.yaml") == temp_dir / "arg.yaml"


class TestSettings:
    """Settings 싱글턴 테스트"""

    def test_singleton(self, temp_dir: Path) -> None:
        path = write_settings(temp_dir, "auth:\n  jwt_secret: one\n")

        first = get_settings(path)
        second = get_settings()

        assert first is second
        assert second.jwt_secret == "one"

    def test_reset_reloads(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_settings(temp_dir, "auth:\n  jwt_secret: one\n")
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))
        assert get_settings().jwt_secret == "one"

        path.write_text("auth:\n  jwt_secret: two\n", encoding="utf-8")
        Settings.reset()

        assert get_settings().jwt_secret == "two"
