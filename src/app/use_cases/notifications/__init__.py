"""
Notification Use Cases
"""

from .inbox_use_case import InboxUseCase
from .notify_use_case import NotifyUseCase
from .dtos import FanOutResponse, InboxResponse, NotificationInfo, ReadStateResponse

__all__ = [
    "InboxUseCase",
    "NotifyUseCase",
    "FanOutResponse",
    "InboxResponse",
    "NotificationInfo",
    "ReadStateResponse",
]
