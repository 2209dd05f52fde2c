"""
PushRouter 테스트

토큰 형식별 분배와 티켓 순서 보존 검증.
"""

import pytest

from adapters.interfaces import IPushNotifier
from adapters.mock.notifier import MockPushNotifier
from adapters.models import PushMessage
from adapters.push.router import PushRouter

EXPO = "ExponentPushToken[aaa]"


def message(token: str) -> PushMessage:
    return PushMessage(to=token, title="t", body="b")


@pytest.mark.asyncio
async def test_routes_by_token_format() -> None:
    expo, fcm = MockPushNotifier(), MockPushNotifier(unregistered={"native-old"})
    router = PushRouter(expo=expo, fcm=fcm)

    tickets = await router.send([message("native-1"), message(EXPO), message("native-old")])

    assert [m.to for m in expo.messages] == [EXPO]
    assert [m.to for m in fcm.messages] == ["native-1", "native-old"]
    assert [t.token for t in tickets] == ["native-1", EXPO, "native-old"]
    assert tickets[2].device_not_registered is True


@pytest.mark.asyncio
async def test_skips_empty_side() -> None:
    expo, fcm = MockPushNotifier(), MockPushNotifier()

    await PushRouter(expo=expo, fcm=fcm).send([message(EXPO)])

    assert fcm.message_count == 0


@pytest.mark.asyncio
async def test_close_both() -> None:
    expo, fcm = MockPushNotifier(), MockPushNotifier()
    router = PushRouter(expo=expo, fcm=fcm)

    await router.close()

    assert expo.closed is True
    assert fcm.closed is True
    assert isinstance(router, IPushNotifier)
