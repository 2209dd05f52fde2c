"""
FCM 푸시 알림 클라이언트

Firebase Cloud Messaging HTTP v1 API로 알림 전송 (Expo 형식이 아닌 네이티브 토큰용).
서비스 계정 JSON으로 서명한 assertion을 OAuth2 액세스 토큰으로 교환하여 사용.
IPushNotifier Protocol 준수.

서비스 계정이 설정되지 않았거나 읽을 수 없으면 전송하지 않고
FcmNotConfigured 실패 티켓을 반환.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any

import httpx
import jwt

from adapters.models import PushMessage, PushTicket
from core.constants import PushEndpoints

logger = logging.getLogger(__name__)

# assertion 유효 시간 (Google 최대 1시간)
ASSERTION_TTL_SEC = 3600

# 액세스 토큰 만료 전 갱신 여유 (초)
TOKEN_REFRESH_MARGIN_SEC = 60

_JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
_REQUIRED_KEYS = ("project_id", "client_email", "private_key")


class FcmPushClient:
    """FCM 푸시 클라이언트

    사용 예시:
    ```python
    async with FcmPushClient.from_file(Path("config/fcm.json")) as client:
        tickets = await client.send([
            PushMessage(to="fcm-device-token", title="Hi", body="..."),
        ])
    ```
    """

    def __init__(
        self,
        service_account: dict[str, Any] | None = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            service_account: 서비스 계정 JSON 내용 (None이면 미설정)
            timeout: HTTP 요청 타임아웃 (초)
        """
        self.service_account = service_account or {}
        self.timeout = timeout

        self._client: httpx.AsyncClient | None = None
        self._access_token: str | None = None
        self._token_expires_at: float = 0.0

    @classmethod
    def from_file(cls, path: Path | None, timeout: float = 10.0) -> "FcmPushClient":
        """서비스 계정 파일에서 생성 (경로 없음/읽기 실패 시 미설정 클라이언트)"""
        if path is None:
            return cls(None, timeout)
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"FCM 서비스 계정 로드 실패: {e}", extra={"path": str(path)})
            return cls(None, timeout)
        if not isinstance(data, dict):
            logger.error("FCM 서비스 계정 형식 오류", extra={"path": str(path)})
            return cls(None, timeout)
        return cls(data, timeout)

    @property
    def is_configured(self) -> bool:
        return all(self.service_account.get(key) for key in _REQUIRED_KEYS)

    @property
    def token_uri(self) -> str:
        return self.service_account.get("token_uri") or PushEndpoints.GOOGLE_TOKEN_URL

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    # -------------------------------------------------------------------------
    # 인증
    # -------------------------------------------------------------------------

    def _build_assertion(self, now: float) -> str:
        """서비스 계정 키로 RS256 assertion 서명"""
        issued_at = int(now)
        payload = {
            "iss": self.service_account["client_email"],
            "scope": PushEndpoints.FCM_SCOPE,
            "aud": self.token_uri,
            "iat": issued_at,
            "exp": issued_at + ASSERTION_TTL_SEC,
        }
        return jwt.encode(payload, self.service_account["private_key"], algorithm="RS256")

    async def _get_access_token(self) -> str:
        """OAuth2 액세스 토큰 (만료 전까지 재사용)"""
        now = time.time()
        if self._access_token and now < self._token_expires_at - TOKEN_REFRESH_MARGIN_SEC:
            return self._access_token

        client = await self._get_client()
        response = await client.post(
            self.token_uri,
            data={"grant_type": _JWT_BEARER_GRANT, "assertion": self._build_assertion(now)},
        )
        response.raise_for_status()
        data = response.json()

        self._access_token = data["access_token"]
        self._token_expires_at = now + int(data.get("expires_in", ASSERTION_TTL_SEC))
        logger.debug("FCM 액세스 토큰 발급", extra={"expires_in": data.get("expires_in")})
        return self._access_token

    # -------------------------------------------------------------------------
    # 전송
    # -------------------------------------------------------------------------

    async def send(self, messages: list[PushMessage]) -> list[PushTicket]:
        """푸시 전송 (토큰당 1회 요청)

        Returns:
            메시지 순서와 같은 PushTicket 목록
        """
        if not messages:
            return []

        if not self.is_configured:
            logger.warning("FCM 미설정, 전송 건너뜀", extra={"count": len(messages)})
            return [self._failed(m, "FcmNotConfigured") for m in messages]

        try:
            access_token = await self._get_access_token()
        except httpx.TimeoutException:
            logger.error("FCM 액세스 토큰 발급 타임아웃")
            return [self._failed(m, "Timeout") for m in messages]
        except (httpx.HTTPError, jwt.PyJWTError, KeyError, ValueError) as e:
            logger.error(f"FCM 액세스 토큰 발급 실패: {e}")
            return [self._failed(m, "AuthError") for m in messages]

        tickets = [await self._send_one(m, access_token) for m in messages]
        logger.debug(
            "FCM 푸시 전송 완료",
            extra={"count": len(tickets), "ok": sum(1 for t in tickets if t.ok)},
        )
        return tickets

    async def _send_one(self, message: PushMessage, access_token: str) -> PushTicket:
        """단일 토큰 전송 (HTTP 실패는 실패 티켓으로 반환)"""
        url = PushEndpoints.FCM_SEND_URL.format(project_id=self.service_account["project_id"])
        payload = {
            "message": {
                "token": message.to,
                "notification": {"title": message.title, "body": message.body},
                # FCM data 값은 문자열만 허용
                "data": {str(k): str(v) for k, v in message.data.items()},
            }
        }

        try:
            client = await self._get_client()
            response = await client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.TimeoutException:
            logger.error("FCM 푸시 전송 타임아웃")
            return self._failed(message, "Timeout")
        except httpx.HTTPError as e:
            logger.error("FCM 푸시 전송 HTTP 에러: %s", e)
            return self._failed(message, "HTTPError")

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code == 200:
            return PushTicket(token=message.to, ok=True, ticket_id=body.get("name"))

        return self._parse_error(message.to, response.status_code, body)

    @staticmethod
    def _parse_error(token: str, status_code: int, body: dict[str, Any]) -> PushTicket:
        error = body.get("error") or {}
        codes = [
            detail.get("errorCode")
            for detail in error.get("details") or []
            if isinstance(detail, dict) and detail.get("errorCode")
        ]

        if "UNREGISTERED" in codes:
            code = "DeviceNotRegistered"
        else:
            code = (codes[0] if codes else None) or error.get("status") or f"HTTP{status_code}"

        logger.warning(
            "FCM 푸시 전송 실패",
            extra={"status": status_code, "error": code},
        )
        return PushTicket(token=token, ok=False, error=code, message=error.get("message"))

    @staticmethod
    def _failed(message: PushMessage, error: str) -> PushTicket:
        return PushTicket(token=message.to, ok=False, error=error)

    # -------------------------------------------------------------------------
    # Context Manager 지원
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "FcmPushClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
