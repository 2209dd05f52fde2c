"""
알림 서비스

알림 설정 조회/수정, 디바이스 토큰 등록/삭제.
"""

import logging
from dataclasses import replace
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import DeviceTokenNotFound, ValidationError
from core.ledger.validation import validate_daily_time, validate_timezone
from core.notifications.store import NotificationPreferences, NotificationStore
from core.types import DevicePlatform

logger = logging.getLogger(__name__)

_BOOL_FIELDS = (
    "enabled",
    "daily_reminder_enabled",
    "daily_summary_enabled",
    "budget_warning_enabled",
)


class NotificationService:
    """알림 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = NotificationStore(db)

    async def get_preferences(self, user_id: int) -> NotificationPreferences:
        return await self.store.get_preferences(user_id)

    async def update_preferences(self, user_id: int, **fields: Any) -> NotificationPreferences:
        """알림 설정 수정 (지정된 필드만, upsert)"""
        changes: dict[str, Any] = {}
        for name in _BOOL_FIELDS:
            if fields.get(name) is not None:
                changes[name] = bool(fields[name])
        if fields.get("daily_time") is not None:
            changes["daily_time"] = validate_daily_time(fields["daily_time"])
        if fields.get("timezone") is not None:
            changes["timezone"] = validate_timezone(fields["timezone"])

        if not changes:
            raise ValidationError("No fields to update")

        prefs = replace(await self.store.get_preferences(user_id), **changes)
        await self.store.save_preferences(prefs)
        await self.db.commit()

        logger.info("알림 설정 수정", extra={"user_id": user_id, "fields": list(changes)})
        return prefs

    async def register_device(self, user_id: int, token: str, platform: str) -> None:
        """디바이스 토큰 등록"""
        token = (token or "").strip()
        if not token:
            raise ValidationError("token is required")
        try:
            parsed_platform = DevicePlatform((platform or "").strip().lower())
        except ValueError as e:
            raise ValidationError("platform must be ios or android") from e

        await self.store.upsert_device(user_id, token, parsed_platform)
        logger.info(
            "디바이스 토큰 등록",
            extra={"user_id": user_id, "platform": parsed_platform.value},
        )

    async def delete_device(self, user_id: int, token: str) -> None:
        """디바이스 토큰 삭제

        Raises:
            DeviceTokenNotFound
        """
        if not await self.store.delete_device(user_id, (token or "").strip()):
            raise DeviceTokenNotFound()
