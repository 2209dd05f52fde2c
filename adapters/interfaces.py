"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from typing import Protocol, runtime_checkable

from adapters.models import PushMessage, PushTicket


@runtime_checkable
class IPushNotifier(Protocol):
    """푸시 알림 서비스 인터페이스

    디바이스 토큰으로 푸시 메시지를 전송하고 토큰별 결과를 반환.
    """

    async def send(self, messages: list[PushMessage]) -> list[PushTicket]:
        """푸시 전송

        Args:
            messages: 전송할 메시지 목록

        Returns:
            메시지별 PushTicket (지원하지 않는 토큰은 ok=False)
        """
        ...

    async def close(self) -> None:
        """리소스 정리"""
        ...
