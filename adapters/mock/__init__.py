"""
Mock 어댑터

테스트용 Mock 구현체.
"""

from adapters.mock.notifier import MockPushNotifier

__all__ = [
    "MockPushNotifier",
]
