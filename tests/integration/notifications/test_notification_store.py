"""
알림 저장소 / 알림 서비스 테스트
"""

import pytest

from core.errors import DeviceTokenNotFound, ValidationError
from core.notifications import NotificationPreferences, NotificationStore
from core.types import DevicePlatform
from web.services.notification_service import NotificationService


class TestNotificationStore:

    @pytest.mark.asyncio
    async def test_defaults_without_row(self, db, user_id) -> None:
        prefs = await NotificationStore(db).get_preferences(user_id)

        assert prefs == NotificationPreferences(user_id=user_id)
        assert prefs.daily_time == "08:00"
        assert prefs.timezone == "Asia/Bangkok"

    @pytest.mark.asyncio
    async def test_save_and_list_enabled(self, db, seed, user_id) -> None:
        store = NotificationStore(db)
        other = await seed.user("other@example.com")
        await store.save_preferences(NotificationPreferences(user_id=user_id, daily_time="21:30"))
        await store.save_preferences(NotificationPreferences(user_id=other, enabled=False))

        enabled = await store.list_enabled()

        assert [p.user_id for p in enabled] == [user_id]
        assert enabled[0].daily_time == "21:30"

    @pytest.mark.asyncio
    async def test_mark_daily_sent(self, db, user_id) -> None:
        store = NotificationStore(db)
        await store.save_preferences(NotificationPreferences(user_id=user_id))

        await store.mark_daily_sent(user_id, "2026-03-01")

        assert (await store.get_preferences(user_id)).last_daily_sent_on == "2026-03-01"

    @pytest.mark.asyncio
    async def test_devices(self, db, seed, user_id) -> None:
        store = NotificationStore(db)
        other = await seed.user("other@example.com")
        await store.upsert_device(user_id, "tok-1", DevicePlatform.IOS)
        await store.upsert_device(user_id, "tok-2", DevicePlatform.ANDROID)
        # 같은 토큰을 다른 사용자가 등록하면 소유자 이전
        await store.upsert_device(other, "tok-2", DevicePlatform.ANDROID)

        assert await store.list_tokens(user_id) == ["tok-1"]
        assert await store.list_tokens(other) == ["tok-2"]

        assert await store.delete_device(user_id, "tok-2") is False
        assert await store.delete_device(user_id, "tok-1") is True

        await store.remove_tokens(["tok-2"])
        assert await store.list_tokens(other) == []


class TestNotificationService:

    @pytest.mark.asyncio
    async def test_partial_update(self, db, user_id) -> None:
        service = NotificationService(db)

        prefs = await service.update_preferences(user_id, daily_time="07:15", budget_warning_enabled=False)
        stored = await service.get_preferences(user_id)

        assert prefs.daily_time == "07:15"
        assert stored.budget_warning_enabled is False
        assert stored.daily_summary_enabled is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [{}, {"daily_time": "24:00"}, {"daily_time": "7:5"}, {"timezone": "Mars/Base"}],
    )
    async def test_invalid_update(self, db, user_id, fields) -> None:
        with pytest.raises(ValidationError):
            await NotificationService(db).update_preferences(user_id, **fields)

    @pytest.mark.asyncio
    async def test_register_and_delete_device(self, db, seed, user_id) -> None:
        service = NotificationService(db)

        await service.register_device(user_id, " ExponentPushToken[abc] ", "iOS")

        assert await service.store.list_tokens(user_id) == ["ExponentPushToken[abc]"]
        await service.delete_device(user_id, "ExponentPushToken[abc]")
        with pytest.raises(DeviceTokenNotFound):
            await service.delete_device(user_id, "ExponentPushToken[abc]")

    @pytest.mark.asyncio
    async def test_register_invalid(self, db, user_id) -> None:
        service = NotificationService(db)

        with pytest.raises(ValidationError, match="ios or android"):
            await service.register_device(user_id, "tok", "web")
        with pytest.raises(ValidationError):
            await service.register_device(user_id, "  ", "ios")
