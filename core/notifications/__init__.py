"""
푸시 알림

알림 설정/디바이스 토큰 저장소, 일일 메시지 생성, 스케줄러.
"""

from core.notifications.messages import DailyMessage, OverBudget, build_daily_message
from core.notifications.scheduler import ReminderScheduler, safe_zone, seconds_until_boundary
from core.notifications.store import NotificationPreferences, NotificationStore

__all__ = [
    "DailyMessage",
    "OverBudget",
    "build_daily_message",
    "ReminderScheduler",
    "safe_zone",
    "seconds_until_boundary",
    "NotificationPreferences",
    "NotificationStore",
]
