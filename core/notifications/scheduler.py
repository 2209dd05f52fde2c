"""
일일 알림 스케줄러

벽시계 분 경계마다 tick하여 사용자 시간대 기준 daily_time이 된 사용자에게 푸시 전송.

규칙:
- enabled와 daily_reminder_enabled가 모두 켜진 사용자만 대상
- 저장된 시간대가 유효하지 않으면 기본 시간대(Asia/Bangkok) 사용
- 같은 날(사용자 시간대 기준) 이미 보냈으면 건너뜀
- 디바이스가 없어도 발송일은 기록 (매 분 재시도 방지)
- DeviceNotRegistered 토큰은 삭제
- tick 사이 대기는 다음 분 경계까지 (tick 소요 시간만큼 밀리지 않음)
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from adapters.models import PushMessage
from core.constants import Defaults
from core.notifications.messages import build_daily_message
from core.notifications.store import NotificationPreferences, NotificationStore

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.interfaces import IPushNotifier

logger = logging.getLogger(__name__)


def safe_zone(name: str | None) -> ZoneInfo:
    """시간대 파싱 (유효하지 않으면 기본 시간대)"""
    if isinstance(name, str) and name.strip():
        try:
            return ZoneInfo(name.strip())
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("유효하지 않은 시간대, 기본값 사용", extra={"timezone": name})
    return ZoneInfo(Defaults.TIMEZONE)


def seconds_until_boundary(timestamp: float, interval_sec: int) -> float:
    """다음 interval 경계(epoch 기준)까지 남은 초"""
    if interval_sec <= 0:
        return 0.0
    return interval_sec - (timestamp % interval_sec)


class ReminderScheduler:
    """일일 알림 스케줄러

    Args:
        db: SQLite 어댑터 (스케줄러 전용 연결)
        notifier: 푸시 전송 클라이언트
        interval_sec: tick 주기 (초)
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        notifier: IPushNotifier,
        interval_sec: int = Defaults.REMINDER_INTERVAL_SEC,
    ):
        self.db = db
        self.notifier = notifier
        self.interval_sec = interval_sec
        self.store = NotificationStore(db)

        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """백그라운드 tick 루프 시작"""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self.run_forever())
        logger.info("알림 스케줄러 시작", extra={"interval_sec": self.interval_sec})

    async def stop(self) -> None:
        """루프 중지"""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("알림 스케줄러 중지")

    async def run_forever(self) -> None:
        """tick 루프 (tick 실패는 로그만 남기고 다음 주기 계속)"""
        while self._running:
            try:
                await self.tick(datetime.now(timezone.utc))
            except Exception as e:
                logger.error(f"알림 스케줄러 tick 실패: {e}", exc_info=True)

            await asyncio.sleep(seconds_until_boundary(time.time(), self.interval_sec))

    async def tick(self, now: datetime) -> int:
        """한 번의 스케줄 점검

        Args:
            now: 현재 시각 (timezone-aware)

        Returns:
            이번 tick에 처리(발송 기록)한 사용자 수
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        processed = 0
        for prefs in await self.store.list_enabled():
            if not prefs.daily_reminder_enabled:
                continue

            local_now = now.astimezone(safe_zone(prefs.timezone))
            if local_now.strftime("%H:%M") != prefs.daily_time:
                continue

            today = local_now.date().isoformat()
            if prefs.last_daily_sent_on == today:
                continue

            await self._send_daily(prefs, local_now)
            await self.store.mark_daily_sent(prefs.user_id, today)
            processed += 1

        return processed

    async def _send_daily(self, prefs: NotificationPreferences, local_now: datetime) -> None:
        tokens = await self.store.list_tokens(prefs.user_id)
        if not tokens:
            logger.debug("등록된 디바이스 없음", extra={"user_id": prefs.user_id})
            return

        message = await build_daily_message(
            self.db,
            prefs.user_id,
            local_now.date(),
            include_summary=prefs.daily_summary_enabled,
            include_budget_warning=prefs.budget_warning_enabled,
        )
        tickets = await self.notifier.send([
            PushMessage(to=token, title=message.title, body=message.body, data=message.data)
            for token in tokens
        ])

        stale = [t.token for t in tickets if t.device_not_registered]
        await self.store.remove_tokens(stale)

        logger.info(
            "일일 알림 발송",
            extra={
                "user_id": prefs.user_id,
                "devices": len(tokens),
                "ok": sum(1 for t in tickets if t.ok),
                "removed": len(stale),
            },
        )
