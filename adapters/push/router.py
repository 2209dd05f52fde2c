"""
푸시 토큰 라우터

토큰 형식에 따라 Expo 클라이언트와 FCM 클라이언트로 나누어 전송.
IPushNotifier Protocol 준수.
"""

from adapters.interfaces import IPushNotifier
from adapters.models import PushMessage, PushTicket
from adapters.push.expo import is_expo_token


class PushRouter:
    """Expo / FCM 분배 전송

    Args:
        expo: Expo 토큰(ExponentPushToken[...]) 전송 클라이언트
        fcm: 그 외 네이티브 토큰 전송 클라이언트
    """

    def __init__(self, expo: IPushNotifier, fcm: IPushNotifier):
        self.expo = expo
        self.fcm = fcm

    async def send(self, messages: list[PushMessage]) -> list[PushTicket]:
        """메시지 순서와 같은 PushTicket 목록 반환"""
        expo_items: list[tuple[int, PushMessage]] = []
        fcm_items: list[tuple[int, PushMessage]] = []
        for index, message in enumerate(messages):
            target = expo_items if is_expo_token(message.to) else fcm_items
            target.append((index, message))

        tickets: dict[int, PushTicket] = {}
        for client, items in ((self.expo, expo_items), (self.fcm, fcm_items)):
            if not items:
                continue
            results = await client.send([m for _, m in items])
            for (index, _), ticket in zip(items, results):
                tickets[index] = ticket

        return [tickets[i] for i in range(len(messages))]

    async def close(self) -> None:
        await self.expo.close()
        await self.fcm.close()
