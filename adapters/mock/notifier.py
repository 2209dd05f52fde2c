"""
Mock 푸시 알림 서비스

테스트용 Mock Push Notifier.
IPushNotifier Protocol 준수.
"""

from adapters.models import PushMessage, PushTicket


class MockPushNotifier:
    """Mock 푸시 알림 서비스

    IPushNotifier Protocol 구현.
    전송된 모든 메시지를 기록하여 테스트에서 검증 가능.

    사용 예시:
    ```python
    notifier = MockPushNotifier(unregistered={"ExponentPushToken[old]"})

    await scheduler.tick(now)

    assert notifier.message_count == 1
    assert notifier.last_message.title == "Daily Finance Reminder"
    ```
    """

    def __init__(
        self,
        unregistered: set[str] | None = None,
        should_fail: bool = False,
    ):
        """
        Args:
            unregistered: DeviceNotRegistered로 응답할 토큰 목록
            should_fail: True면 모든 전송 실패 (에러 시나리오 테스트용)
        """
        self.unregistered = unregistered or set()
        self.should_fail = should_fail
        self.messages: list[PushMessage] = []
        self.closed = False

    async def send(self, messages: list[PushMessage]) -> list[PushTicket]:
        """푸시 전송 (기록만 남김)"""
        tickets = []
        for message in messages:
            self.messages.append(message)
            if message.to in self.unregistered:
                tickets.append(
                    PushTicket(token=message.to, ok=False, error="DeviceNotRegistered")
                )
            elif self.should_fail:
                tickets.append(PushTicket(token=message.to, ok=False, error="MockFailure"))
            else:
                tickets.append(
                    PushTicket(token=message.to, ok=True, ticket_id=f"mock-{len(self.messages)}")
                )
        return tickets

    async def close(self) -> None:
        self.closed = True

    # -------------------------------------------------------------------------
    # 테스트 헬퍼 메서드
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """전송 기록 초기화"""
        self.messages.clear()

    def sent_to(self, token: str) -> list[PushMessage]:
        """특정 토큰으로 전송된 메시지"""
        return [m for m in self.messages if m.to == token]

    @property
    def last_message(self) -> PushMessage | None:
        """마지막 메시지"""
        return self.messages[-1] if self.messages else None

    @property
    def message_count(self) -> int:
        """전체 메시지 수"""
        return len(self.messages)
