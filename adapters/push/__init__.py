"""
푸시 알림 어댑터

Expo push API / FCM HTTP v1 API를 통한 알림 전송.
PushRouter가 토큰 형식에 따라 두 클라이언트로 분배.
IPushNotifier Protocol 준수.
"""

from adapters.push.expo import ExpoPushClient, is_expo_token
from adapters.push.fcm import FcmPushClient
from adapters.push.router import PushRouter

__all__ = [
    "ExpoPushClient",
    "FcmPushClient",
    "PushRouter",
    "is_expo_token",
]
