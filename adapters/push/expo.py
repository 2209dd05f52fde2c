"""
Expo 푸시 알림 클라이언트

Expo push API(https://exp.host)로 알림 전송.
IPushNotifier Protocol 준수.

Expo 토큰(ExponentPushToken[...])만 지원하며,
FCM 등 다른 형식의 토큰은 경고 로그 후 건너뜀 (분배는 PushRouter 담당).
"""

import logging
from typing import Any

import httpx

from adapters.models import PushMessage, PushTicket
from core.constants import PushEndpoints

logger = logging.getLogger(__name__)

# Expo API 1회 요청 최대 메시지 수
MAX_BATCH_SIZE = 100

_EXPO_TOKEN_PREFIXES = ("ExponentPushToken[", "ExpoPushToken[")


def is_expo_token(token: str) -> bool:
    """Expo 푸시 토큰 형식 여부"""
    return token.startswith(_EXPO_TOKEN_PREFIXES) and token.endswith("]")


class ExpoPushClient:
    """Expo 푸시 클라이언트

    사용 예시:
    ```python
    async with ExpoPushClient() as client:
        tickets = await client.send([
            PushMessage(to="ExponentPushToken[xxx]", title="Hi", body="..."),
        ])
    ```
    """

    def __init__(
        self,
        url: str = PushEndpoints.EXPO_PUSH_URL,
        access_token: str | None = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            url: Expo push 엔드포인트
            access_token: Expo 액세스 토큰 (보안 푸시 사용 시)
            timeout: HTTP 요청 타임아웃 (초)
        """
        self.url = url
        self.access_token = access_token
        self.timeout = timeout

        # httpx 비동기 클라이언트 (재사용)
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            headers = {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
            if self.access_token:
                headers["Authorization"] = f"Bearer {self.access_token}"
            self._client = httpx.AsyncClient(timeout=self.timeout, headers=headers)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def send(self, messages: list[PushMessage]) -> list[PushTicket]:
        """푸시 전송

        Args:
            messages: 전송할 메시지 목록

        Returns:
            메시지 순서와 같은 PushTicket 목록
        """
        tickets: dict[int, PushTicket] = {}
        deliverable: list[tuple[int, PushMessage]] = []

        for index, message in enumerate(messages):
            if is_expo_token(message.to):
                deliverable.append((index, message))
            else:
                logger.warning(
                    "Expo 형식이 아닌 토큰 건너뜀",
                    extra={"token_prefix": message.to[:16]},
                )
                tickets[index] = PushTicket(
                    token=message.to,
                    ok=False,
                    error="UnsupportedToken",
                    message="Only Expo push tokens are supported",
                )

        for start in range(0, len(deliverable), MAX_BATCH_SIZE):
            batch = deliverable[start:start + MAX_BATCH_SIZE]
            batch_tickets = await self._send_batch([m for _, m in batch])
            for (index, _), ticket in zip(batch, batch_tickets):
                tickets[index] = ticket

        return [tickets[i] for i in range(len(messages))]

    async def _send_batch(self, batch: list[PushMessage]) -> list[PushTicket]:
        """Expo API로 한 묶음 전송

        HTTP 실패 시 묶음 전체를 실패 티켓으로 반환 (예외 전파 안 함).
        """
        try:
            client = await self._get_client()
            response = await client.post(
                self.url,
                json=[m.to_payload() for m in batch],
            )
        except httpx.TimeoutException:
            logger.error("Expo 푸시 전송 타임아웃", extra={"count": len(batch)})
            return [self._failed(m, "Timeout") for m in batch]
        except httpx.HTTPError as e:
            logger.error("Expo 푸시 전송 HTTP 에러: %s", e)
            return [self._failed(m, "HTTPError") for m in batch]

        if response.status_code != 200:
            logger.warning(
                "Expo 푸시 전송 실패: status=%s, body=%s",
                response.status_code,
                response.text,
            )
            return [self._failed(m, f"HTTP{response.status_code}") for m in batch]

        try:
            data = response.json().get("data", [])
        except ValueError:
            logger.warning("Expo 응답 파싱 실패", extra={"body": response.text[:200]})
            return [self._failed(m, "InvalidResponse") for m in batch]

        tickets = []
        for index, message in enumerate(batch):
            item: dict[str, Any] = data[index] if index < len(data) else {}
            tickets.append(self._parse_ticket(message.to, item))

        logger.debug(
            "Expo 푸시 전송 완료",
            extra={"count": len(batch), "ok": sum(1 for t in tickets if t.ok)},
        )
        return tickets

    @staticmethod
    def _parse_ticket(token: str, item: dict[str, Any]) -> PushTicket:
        if item.get("status") == "ok":
            return PushTicket(token=token, ok=True, ticket_id=item.get("id"))
        details = item.get("details") or {}
        return PushTicket(
            token=token,
            ok=False,
            error=details.get("error") or "Unknown",
            message=item.get("message"),
        )

    @staticmethod
    def _failed(message: PushMessage, error: str) -> PushTicket:
        return PushTicket(token=message.to, ok=False, error=error)

    # -------------------------------------------------------------------------
    # Context Manager 지원
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "ExpoPushClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
