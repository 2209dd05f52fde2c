"""
어댑터 공통 데이터 모델

푸시 알림 요청/응답을 표준화한 모델.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PushMessage:
    """푸시 메시지

    Attributes:
        to: 디바이스 푸시 토큰
        title: 제목
        body: 본문
        data: 앱으로 전달되는 부가 데이터
    """

    to: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Expo push API 요청 항목"""
        return {
            "to": self.to,
            "title": self.title,
            "body": self.body,
            "data": self.data,
            "sound": "default",
        }


@dataclass(frozen=True)
class PushTicket:
    """푸시 전송 결과 (토큰당 1개)

    Attributes:
        token: 대상 토큰
        ok: 전송 수락 여부
        ticket_id: 공급자 티켓 ID
        error: 실패 시 에러 코드 (예: DeviceNotRegistered)
        message: 실패 메시지
    """

    token: str
    ok: bool
    ticket_id: str | None = None
    error: str | None = None
    message: str | None = None

    @property
    def device_not_registered(self) -> bool:
        """토큰이 더 이상 유효하지 않음 (삭제 대상)"""
        return self.error == "DeviceNotRegistered"
