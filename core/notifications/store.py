"""
알림 설정 / 디바이스 토큰 저장소

notification_preferences, user_devices 테이블 CRUD.
저장된 행이 없는 사용자는 기본 설정을 사용.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.constants import Defaults
from core.types import DevicePlatform

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class NotificationPreferences:
    """사용자 알림 설정

    Attributes:
        user_id: 사용자 ID
        enabled: 알림 전체 활성화
        daily_time: 일일 알림 시각 (HH:MM, 사용자 시간대 기준)
        timezone: IANA 시간대
        daily_reminder_enabled: 일일 알림 발송 여부
        daily_summary_enabled: 오늘 수입/지출 요약 포함 여부
        budget_warning_enabled: 예산 초과 경고 포함 여부
        last_daily_sent_on: 마지막 발송일 (YYYY-MM-DD, 사용자 시간대 기준)
    """

    user_id: int
    enabled: bool = True
    daily_time: str = Defaults.DAILY_TIME
    timezone: str = Defaults.TIMEZONE
    daily_reminder_enabled: bool = True
    daily_summary_enabled: bool = True
    budget_warning_enabled: bool = True
    last_daily_sent_on: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "NotificationPreferences":
        return cls(
            user_id=row["user_id"],
            enabled=bool(row["enabled"]),
            daily_time=row["daily_time"],
            timezone=row["timezone"],
            daily_reminder_enabled=bool(row["daily_reminder_enabled"]),
            daily_summary_enabled=bool(row["daily_summary_enabled"]),
            budget_warning_enabled=bool(row["budget_warning_enabled"]),
            last_daily_sent_on=row.get("last_daily_sent_on"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "daily_time": self.daily_time,
            "timezone": self.timezone,
            "daily_reminder_enabled": self.daily_reminder_enabled,
            "daily_summary_enabled": self.daily_summary_enabled,
            "budget_warning_enabled": self.budget_warning_enabled,
        }


class NotificationStore:
    """알림 설정 / 디바이스 토큰 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =========================================================================
    # 알림 설정
    # =========================================================================

    async def get_preferences(self, user_id: int) -> NotificationPreferences:
        """알림 설정 조회 (행이 없으면 기본값)"""
        row = await self.db.fetchone_dict(
            "SELECT * FROM notification_preferences WHERE user_id = ?",
            (user_id,),
        )
        if row is None:
            return NotificationPreferences(user_id=user_id)
        return NotificationPreferences.from_row(row)

    async def save_preferences(self, prefs: NotificationPreferences) -> None:
        """알림 설정 저장 (upsert, 커밋은 호출자 담당)"""
        await self.db.execute(
            """
            INSERT INTO notification_preferences (
                user_id, enabled, daily_time, timezone,
                daily_reminder_enabled, daily_summary_enabled, budget_warning_enabled
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                enabled = excluded.enabled,
                daily_time = excluded.daily_time,
                timezone = excluded.timezone,
                daily_reminder_enabled = excluded.daily_reminder_enabled,
                daily_summary_enabled = excluded.daily_summary_enabled,
                budget_warning_enabled = excluded.budget_warning_enabled,
                updated_at = datetime('now')
            """,
            (
                prefs.user_id,
                int(prefs.enabled),
                prefs.daily_time,
                prefs.timezone,
                int(prefs.daily_reminder_enabled),
                int(prefs.daily_summary_enabled),
                int(prefs.budget_warning_enabled),
            ),
        )

    async def list_enabled(self) -> list[NotificationPreferences]:
        """알림 활성화 사용자 설정 목록"""
        rows = await self.db.fetchall_dict(
            "SELECT * FROM notification_preferences WHERE enabled = 1 ORDER BY user_id"
        )
        return [NotificationPreferences.from_row(row) for row in rows]

    async def mark_daily_sent(self, user_id: int, sent_on: str) -> None:
        """일일 알림 발송일 기록"""
        await self.db.execute(
            "UPDATE notification_preferences SET last_daily_sent_on = ? WHERE user_id = ?",
            (sent_on, user_id),
        )
        await self.db.commit()

    # =========================================================================
    # 디바이스 토큰
    # =========================================================================

    async def list_tokens(self, user_id: int) -> list[str]:
        rows = await self.db.fetchall(
            "SELECT token FROM user_devices WHERE user_id = ? ORDER BY id",
            (user_id,),
        )
        return [row[0] for row in rows if row[0]]

    async def upsert_device(
        self,
        user_id: int,
        token: str,
        platform: DevicePlatform,
    ) -> None:
        """디바이스 토큰 등록 (같은 토큰은 소유자/플랫폼 갱신)"""
        await self.db.execute(
            """
            INSERT INTO user_devices (user_id, token, platform)
            VALUES (?, ?, ?)
            ON CONFLICT(token) DO UPDATE SET
                user_id = excluded.user_id,
                platform = excluded.platform,
                updated_at = datetime('now')
            """,
            (user_id, token, platform.value),
        )
        await self.db.commit()

    async def delete_device(self, user_id: int, token: str) -> bool:
        """디바이스 토큰 삭제

        Returns:
            삭제 여부 (없으면 False)
        """
        cursor = await self.db.execute(
            "DELETE FROM user_devices WHERE user_id = ? AND token = ?",
            (user_id, token),
        )
        await self.db.commit()
        return cursor.rowcount > 0

    async def remove_tokens(self, tokens: list[str]) -> None:
        """무효 토큰 일괄 삭제"""
        if not tokens:
            return
        await self.db.executemany(
            "DELETE FROM user_devices WHERE token = ?",
            [(token,) for token in tokens],
        )
        await self.db.commit()
        logger.info("무효 푸시 토큰 삭제", extra={"count": len(tokens)})
