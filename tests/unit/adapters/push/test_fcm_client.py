"""
FCM 푸시 클라이언트 테스트

httpx.MockTransport로 OAuth2 토큰 엔드포인트와 FCM API 응답을 대체하여 검증.
"""

import json
from pathlib import Path
from urllib.parse import parse_qs

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from adapters.models import PushMessage
from adapters.push.fcm import FcmPushClient

TOKEN_URI = "https://oauth.test/token"
PROJECT_ID = "ledger-test"


@pytest.fixture(scope="module")
def rsa_keys() -> tuple[str, str]:
    """(private PEM, public PEM)"""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture
def service_account(rsa_keys) -> dict:
    return {
        "project_id": PROJECT_ID,
        "client_email": "push@ledger-test.iam.gserviceaccount.com",
        "private_key": rsa_keys[0],
        "token_uri": TOKEN_URI,
    }


def make_client(service_account: dict | None, handler) -> FcmPushClient:
    """MockTransport를 주입한 클라이언트"""
    client = FcmPushClient(service_account)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


def message(token: str, data: dict | None = None) -> PushMessage:
    return PushMessage(to=token, title="Daily Finance Reminder", body="body", data=data or {})


def token_response() -> httpx.Response:
    return httpx.Response(200, json={"access_token": "access-1", "expires_in": 3600})


class TestNotConfigured:

    @pytest.mark.asyncio
    async def test_no_service_account(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        client = make_client(None, handler)
        tickets = await client.send([message("device-a")])

        assert client.is_configured is False
        assert tickets[0].ok is False
        assert tickets[0].error == "FcmNotConfigured"
        assert calls == []

    def test_from_file_missing(self, tmp_path: Path) -> None:
        client = FcmPushClient.from_file(tmp_path / "missing.json")

        assert client.is_configured is False

    def test_from_file(self, tmp_path: Path, service_account: dict) -> None:
        path = tmp_path / "fcm.json"
        path.write_text(json.dumps(service_account), encoding="utf-8")

        client = FcmPushClient.from_file(path)

        assert client.is_configured is True
        assert client.token_uri == TOKEN_URI

    def test_from_file_none(self) -> None:
        assert FcmPushClient.from_file(None).is_configured is False


class TestSend:
    """send 테스트"""

    @pytest.mark.asyncio
    async def test_ok_and_unregistered(self, service_account: dict, rsa_keys) -> None:
        sent: list[dict] = []
        assertions: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == TOKEN_URI:
                form = parse_qs(request.content.decode())
                assert form["grant_type"] == ["urn:ietf:params:oauth:grant-type:jwt-bearer"]
                assertions.append(
                    jwt.decode(
                        form["assertion"][0],
                        rsa_keys[1],
                        algorithms=["RS256"],
                        audience=TOKEN_URI,
                    )
                )
                return token_response()

            assert request.headers["Authorization"] == "Bearer access-1"
            assert f"/projects/{PROJECT_ID}/messages:send" in request.url.path
            body = json.loads(request.content)["message"]
            sent.append(body)
            if body["token"] == "device-old":
                return httpx.Response(404, json={"error": {
                    "code": 404,
                    "message": "Requested entity was not found.",
                    "status": "NOT_FOUND",
                    "details": [{"errorCode": "UNREGISTERED"}],
                }})
            return httpx.Response(200, json={"name": f"projects/{PROJECT_ID}/messages/1"})

        client = make_client(service_account, handler)
        tickets = await client.send([
            message("device-a", {"type": "daily", "count": 3}),
            message("device-old"),
        ])
        await client.close()

        assert tickets[0].ok is True
        assert tickets[0].ticket_id == f"projects/{PROJECT_ID}/messages/1"
        assert tickets[1].device_not_registered is True
        assert tickets[1].message == "Requested entity was not found."
        assert sent[0]["notification"] == {"title": "Daily Finance Reminder", "body": "body"}
        assert sent[0]["data"] == {"type": "daily", "count": "3"}
        assert assertions[0]["iss"] == service_account["client_email"]
        assert assertions[0]["scope"] == "https://www.googleapis.com/auth/firebase.messaging"

    @pytest.mark.asyncio
    async def test_access_token_reused(self, service_account: dict) -> None:
        token_requests = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal token_requests
            if str(request.url) == TOKEN_URI:
                token_requests += 1
                return token_response()
            return httpx.Response(200, json={"name": "m"})

        client = make_client(service_account, handler)
        await client.send([message("device-a")])
        await client.send([message("device-b")])

        assert token_requests == 1

    @pytest.mark.asyncio
    async def test_token_endpoint_failure(self, service_account: dict) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == TOKEN_URI:
                return httpx.Response(400, json={"error": "invalid_grant"})
            raise AssertionError("send must not be attempted")

        client = make_client(service_account, handler)
        tickets = await client.send([message("device-a"), message("device-b")])

        assert [t.error for t in tickets] == ["AuthError", "AuthError"]

    @pytest.mark.asyncio
    async def test_other_error_code(self, service_account: dict) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == TOKEN_URI:
                return token_response()
            return httpx.Response(400, json={"error": {
                "status": "INVALID_ARGUMENT",
                "message": "bad token",
                "details": [{"errorCode": "INVALID_ARGUMENT"}],
            }})

        client = make_client(service_account, handler)
        (ticket,) = await client.send([message("device-a")])

        assert ticket.ok is False
        assert ticket.error == "INVALID_ARGUMENT"
        assert ticket.device_not_registered is False

    @pytest.mark.asyncio
    async def test_non_json_error(self, service_account: dict) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == TOKEN_URI:
                return token_response()
            return httpx.Response(503, text="unavailable")

        client = make_client(service_account, handler)
        (ticket,) = await client.send([message("device-a")])

        assert ticket.error == "HTTP503"

    @pytest.mark.asyncio
    async def test_timeout(self, service_account: dict) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == TOKEN_URI:
                return token_response()
            raise httpx.ReadTimeout("slow", request=request)

        client = make_client(service_account, handler)
        (ticket,) = await client.send([message("device-a")])

        assert ticket.error == "Timeout"

    @pytest.mark.asyncio
    async def test_empty(self, service_account: dict) -> None:
        client = make_client(service_account, lambda request: token_response())

        assert await client.send([]) == []
