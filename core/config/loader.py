"""
설정 로더

settings.yaml 로드 및 애플리케이션 설정 생성
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from core.constants import Defaults, Paths


# 설정 파일 경로 재지정용 환경 변수
SETTINGS_ENV_VAR = "LEDGER_SETTINGS"


@dataclass(frozen=True)
class NotificationConfig:
    """푸시 알림 설정

    scheduler_enabled가 False면 Web lifespan에서 스케줄러를 시작하지 않음
    """

    scheduler_enabled: bool = False
    interval_sec: int = Defaults.REMINDER_INTERVAL_SEC
    expo_access_token: str | None = None
    fcm_service_account_path: Path | None = None


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: Path
    jwt_secret: str
    token_ttl_minutes: int = Defaults.TOKEN_TTL_MINUTES
    default_currency: str = Defaults.CURRENCY
    notifications: NotificationConfig = field(default_factory=NotificationConfig)


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def resolve_settings_path(path: Path | None = None) -> Path:
    """설정 파일 경로 결정

    우선순위: 인자 > LEDGER_SETTINGS 환경 변수 > 기본 경로
    """
    if path is not None:
        return path
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Paths.SETTINGS_FILE


def _resolve_path(value: str | None) -> Path | None:
    """상대 경로는 프로젝트 루트 기준"""
    if not value:
        return None
    path = Path(value)
    if not path.is_absolute():
        path = Paths.CONFIG_DIR.parent / path
    return path


def _load_notifications(data: dict) -> NotificationConfig:
    section = data.get("notifications") or {}
    if not isinstance(section, dict):
        raise SettingsLoadError("settings.yaml의 'notifications'는 매핑이어야 합니다")

    interval = section.get("interval_sec", Defaults.REMINDER_INTERVAL_SEC)
    if not isinstance(interval, int) or interval <= 0:
        raise SettingsLoadError(
            f"notifications.interval_sec는 양의 정수여야 합니다: {interval!r}"
        )

    return NotificationConfig(
        scheduler_enabled=bool(section.get("scheduler_enabled", False)),
        interval_sec=interval,
        expo_access_token=section.get("expo_access_token") or None,
        fcm_service_account_path=_resolve_path(section.get("fcm_service_account_path")),
    )


def load_settings(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 환경 변수 또는 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
    """
    path = resolve_settings_path(path)

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    # auth 섹션
    auth_config = data.get("auth") or {}
    jwt_secret = auth_config.get("jwt_secret")
    if not jwt_secret:
        raise SettingsLoadError("settings.yaml의 auth 섹션에 'jwt_secret'가 없습니다")

    ttl = auth_config.get("token_ttl_minutes", Defaults.TOKEN_TTL_MINUTES)
    if not isinstance(ttl, int) or ttl <= 0:
        raise SettingsLoadError(
            f"auth.token_ttl_minutes는 양의 정수여야 합니다: {ttl!r}"
        )

    # database 섹션 (상대 경로는 프로젝트 루트 기준)
    db_config = data.get("database") or {}
    db_path_value = db_config.get("path")
    db_path = _resolve_path(db_path_value) or Paths.DB_FILE

    currency = str(data.get("default_currency", Defaults.CURRENCY)).upper()

    return AppConfig(
        db_path=db_path,
        jwt_secret=str(jwt_secret),
        token_ttl_minutes=ttl,
        default_currency=currency,
        notifications=_load_notifications(data),
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_settings(settings_path)

    @property
    def config(self) -> AppConfig:
        """전체 설정"""
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """DB 경로"""
        return self.config.db_path

    @property
    def jwt_secret(self) -> str:
        """JWT 서명 키"""
        return self.config.jwt_secret

    @property
    def token_ttl_minutes(self) -> int:
        """토큰 유효 시간 (분)"""
        return self.config.token_ttl_minutes

    @property
    def default_currency(self) -> str:
        """사용자 기본 통화"""
        return self.config.default_currency

    @property
    def notifications(self) -> NotificationConfig:
        """푸시 알림 설정"""
        return self.config.notifications

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
